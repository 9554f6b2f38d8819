"""
Error classifier: transport and representation failures → state transitions.

    ┌─────────────────┬─────────────┬─────────────────────────────────────┐
    │ HTTP status     │ new status  │ propagation                         │
    ├─────────────────┼─────────────┼─────────────────────────────────────┤
    │ 403             │ forbidden   │ absorbed; headers/retrieved kept    │
    │ 404             │ deleted     │ ResourceNotFoundError (load only)   │
    │ other 4xx       │ unknown     │ absorbed                            │
    │ 5xx             │ unknown     │ absorbed                            │
    │ none / other    │ unknown     │ absorbed, logged as unexpected      │
    └─────────────────┴─────────────┴─────────────────────────────────────┘

A response body that cannot be read as a representation is treated like a
failure with no status.

A forbidden resource is returned to the caller with its status set; what to
do with it (drop it from a list, dim it in a view) is the application's call.
The 404 asymmetry is kept as documented: a load that finds the resource gone
fails loudly after marking it deleted.
"""

from __future__ import annotations

from dataclasses import dataclass

from linkstate.core.errors import (
    ErrorCategory,
    ErrorContext,
    LinkStateError,
    ResourceNotFoundError,
    categorize_error,
    is_retryable,
)
from linkstate.core.logging import get_logger
from linkstate.representation.state import State
from linkstate.representation.status import Status

logger = get_logger(__name__)


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one failure."""

    status: Status
    category: ErrorCategory
    http_status: int | None
    propagate: bool = False


class ErrorClassifier:
    def classify(
        self,
        error: LinkStateError,
        state: State,
        *,
        uri: str | None = None,
        raise_not_found: bool = True,
    ) -> Classification:
        """Apply the state transition for *error*; raise on 404 when asked to."""
        classification = self.categorize(error)
        http_status = classification.http_status
        uri = uri or state.uri

        match classification.category:
            case ErrorCategory.FORBIDDEN:
                logger.debug("classify.forbidden", uri=uri, status_text=_status_text(error))
                state.transition(Status.FORBIDDEN)
                state.record_response(error.headers)
            case ErrorCategory.NOT_FOUND:
                logger.info("classify.not_found", uri=uri)
                state.transition(Status.DELETED)
            case ErrorCategory.CLIENT:
                logger.info("classify.client_error", uri=uri, http_status=http_status,
                            status_text=_status_text(error))
                state.transition(Status.UNKNOWN)
            case ErrorCategory.SERVER:
                logger.info("classify.server_error", uri=uri, http_status=http_status,
                            status_text=_status_text(error))
                state.transition(Status.UNKNOWN)
            case _:
                logger.error("classify.unexpected", uri=uri, http_status=http_status,
                             error=str(error), error_type=type(error).__name__,
                             category=categorize_error(error).value,
                             retryable=is_retryable(error))
                state.transition(Status.UNKNOWN)

        if classification.propagate and raise_not_found:
            raise ResourceNotFoundError(
                f"Resource not found (likely stale collection member) '{uri}'",
                context=ErrorContext(uri=uri, http_status=http_status),
                cause=error,
            )
        return classification

    @staticmethod
    def categorize(error: LinkStateError) -> Classification:
        """Map an error onto a category and target status, without side effects."""
        status = getattr(error, "status", None)
        if status == 403:
            return Classification(Status.FORBIDDEN, ErrorCategory.FORBIDDEN, status)
        if status == 404:
            return Classification(Status.DELETED, ErrorCategory.NOT_FOUND, status, propagate=True)
        if status is not None and 400 <= status < 500:
            return Classification(Status.UNKNOWN, ErrorCategory.CLIENT, status)
        if status is not None and 500 <= status < 600:
            return Classification(Status.UNKNOWN, ErrorCategory.SERVER, status)
        return Classification(Status.UNKNOWN, ErrorCategory.UNKNOWN, status)


def _status_text(error: LinkStateError) -> str | None:
    return getattr(error, "status_text", None) or None
