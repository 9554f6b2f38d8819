"""
Result envelope for explicit success/failure handling.

The synchronization engine absorbs most transport failures into a status
transition and returns the resource, but a 404 on load raises. Callers that
prefer not to branch on exceptions use the ``try_*`` engine variants, which
return ``Ok(resource)`` or ``Err(error)``; the batch hydrator uses the same
envelope to collect item outcomes before deciding whether to re-raise.

Examples:
    >>> from linkstate.core.result import Ok, Err
    >>> Ok(10).map(lambda x: x * 2).unwrap()
    20
    >>> Err(ValueError("oops")).unwrap_or(0)
    0

    Pattern matching:

    >>> match Ok("hydrated"):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(error)
    hydrated
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from linkstate.core.errors import LinkStateError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing an exception."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        """Get default since this is Err."""
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, LinkStateError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


async def try_result_async(
    f: Callable[[], Awaitable[T]],
    catch: type[Exception] | tuple[type[Exception], ...] = LinkStateError,
) -> Result[T]:
    """
    Await a coroutine factory and wrap the outcome in a Result.

    Only exceptions matching ``catch`` become ``Err``; anything else
    propagates, so programming errors are not turned into values.

    Args:
        f: Zero-argument callable returning an awaitable
        catch: Exception type(s) to capture

    Returns:
        Ok with the awaited value, or Err with the captured exception
    """
    try:
        return Ok(await f())
    except catch as e:
        return Err(e)


def partition_results(results: list[Result[T]]) -> tuple[list[T], list[Exception]]:
    """Split results into (values, errors), preserving order."""
    values: list[T] = []
    errors: list[Exception] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors


__all__ = [
    "Ok",
    "Err",
    "Result",
    "try_result_async",
    "partition_results",
]
