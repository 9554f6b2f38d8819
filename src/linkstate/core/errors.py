"""
Structured error types for linkstate.

Every error raised by the synchronization engine, its collaborators and the
default transport extends :class:`LinkStateError`. Errors carry a category,
an explicit retry flag, structured context (uri, link relation, HTTP status)
and an optional chained cause.

Hierarchy:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                      LinkStateError                              │
        │  (category, retryable, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ContractError          TransportError        ResourceNotFound   │
        │  (CONTRACT)             (TRANSPORT)           (NOT_FOUND)        │
        │       │                      │                                   │
        │  MissingLinkError       HttpRequestError                         │
        │  UntrackedResource      NetworkError                             │
        │  MissingContextUri                                               │
        │  UnsupportedOperation                                            │
        │  InvalidStatusError                          RepresentationError │
        │                                              (PARSE)             │
        └─────────────────────────────────────────────────────────────────┘

Contract errors are programmer mistakes (a missing link relation, an untracked
resource where tracking is required) and fail the current operation
immediately. Transport errors are what a :class:`~linkstate.http.Transport`
raises; the engine absorbs them into a status transition, except for a 404 on
load, which surfaces as :class:`ResourceNotFoundError`.

Usage:
    from linkstate.core.errors import HttpRequestError

    raise HttpRequestError(
        "GET failed", status=503, headers={"retry-after": "30"}
    ).with_context(uri="https://api.example.com/question/1")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    # Caller broke the engine's contract
    CONTRACT = "CONTRACT"

    # Transport failures
    TRANSPORT = "TRANSPORT"       # HTTP status returned by the server
    NETWORK = "NETWORK"           # Connection, timeout, DNS

    # Classified server outcomes
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CLIENT = "CLIENT"
    SERVER = "SERVER"

    # Wire data the engine cannot interpret
    PARSE = "PARSE"

    # Internal errors
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        uri: URI of the resource being operated on
        rel: Link relation used to resolve the target
        operation: Engine operation (load, create, update, delete)
        http_status: HTTP status code if applicable
        metadata: Additional key-value pairs
    """

    uri: str | None = None
    rel: str | None = None
    operation: str | None = None
    http_status: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["uri", "rel", "operation", "http_status"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class LinkStateError(Exception):
    """
    Base exception for all linkstate errors.

    Subclasses set ``default_category`` and ``default_retryable`` so callers
    rarely pass them explicitly.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> LinkStateError:
        """
        Add context to this error (fluent API).

        Usage:
            raise MissingLinkError("no 'edit' link").with_context(rel="edit")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONTRACT ERRORS (never retryable)
# =============================================================================


class ContractError(LinkStateError):
    """The caller used the engine in a way it does not support."""

    default_category = ErrorCategory.CONTRACT
    default_retryable = False


class MissingLinkError(ContractError):
    """The resource has no link for the requested relation."""

    def __init__(self, rel: str, uri: str | None = None, message: str | None = None):
        msg = message or f"No link relation '{rel}' found on '{uri or 'unknown'}'"
        super().__init__(msg, context=ErrorContext(rel=rel, uri=uri))
        self.rel = rel


class UntrackedResourceError(ContractError):
    """The operation requires a tracked resource (one with a State record)."""

    def __init__(self, operation: str, uri: str | None = None):
        super().__init__(
            f"{operation} requires a tracked resource; '{uri or 'unknown'}' has no state",
            context=ErrorContext(operation=operation, uri=uri),
        )
        self.operation = operation


class MissingContextUriError(ContractError):
    """create() was given a context that does not resolve to a URI to POST on."""

    def __init__(self, rel: str):
        super().__init__(
            f"create has no context to find uri to POST on (rel '{rel}')",
            context=ErrorContext(rel=rel, operation="create"),
        )


class UnsupportedOperationError(ContractError):
    """The operation is not implemented for this kind of resource."""


class InvalidStatusError(ContractError):
    """A status value outside the closed Status enumeration."""

    def __init__(self, value: Any):
        super().__init__(f"Unknown resource status: {value!r}")
        self.value = value


# =============================================================================
# TRANSPORT ERRORS
# =============================================================================


class TransportError(LinkStateError):
    """Base for failures raised by a transport collaborator."""

    default_category = ErrorCategory.TRANSPORT
    default_retryable = False

    @property
    def status(self) -> int | None:
        return None

    @property
    def headers(self) -> dict[str, str]:
        return {}


class HttpRequestError(TransportError):
    """
    The server answered with a non-success HTTP status.

    5xx responses are retryable by default; 4xx responses are not.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        headers: dict[str, str] | None = None,
        status_text: str = "",
        cause: Exception | None = None,
    ):
        super().__init__(
            message,
            retryable=500 <= status < 600,
            context=ErrorContext(http_status=status),
            cause=cause,
        )
        self._status = status
        self._headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.status_text = status_text

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def headers(self) -> dict[str, str]:
        return self._headers


class NetworkError(TransportError):
    """The request never produced an HTTP status (connection, timeout, DNS)."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


# =============================================================================
# CLASSIFIED OUTCOMES
# =============================================================================


class ResourceNotFoundError(LinkStateError):
    """A load received 404; the resource has been marked deleted."""

    default_category = ErrorCategory.NOT_FOUND
    default_retryable = False


class RepresentationError(LinkStateError):
    """Wire data does not match the linked-resource, collection or feed shape."""

    default_category = ErrorCategory.PARSE
    default_retryable = False


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, LinkStateError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, LinkStateError):
        return error.category
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCategory.NETWORK
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "LinkStateError",
    # Contract
    "ContractError",
    "MissingLinkError",
    "UntrackedResourceError",
    "MissingContextUriError",
    "UnsupportedOperationError",
    "InvalidStatusError",
    # Transport
    "TransportError",
    "HttpRequestError",
    "NetworkError",
    # Outcomes
    "ResourceNotFoundError",
    "RepresentationError",
    # Utilities
    "is_retryable",
    "categorize_error",
]
