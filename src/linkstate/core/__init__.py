"""
Core primitives shared by the representation engine and the transports.

- errors: typed error hierarchy
- result: Ok/Err envelope
- logging: structlog configuration
- settings: pydantic-settings configuration
- timestamps: UTC clock and HTTP-date parsing
"""

from linkstate.core.errors import (
    ContractError,
    ErrorCategory,
    ErrorContext,
    HttpRequestError,
    InvalidStatusError,
    LinkStateError,
    MissingContextUriError,
    MissingLinkError,
    NetworkError,
    RepresentationError,
    ResourceNotFoundError,
    TransportError,
    UnsupportedOperationError,
    UntrackedResourceError,
)
from linkstate.core.logging import LogContext, configure_logging, get_logger
from linkstate.core.result import Err, Ok, Result, partition_results
from linkstate.core.settings import LinkStateSettings, get_settings

__all__ = [
    "ContractError",
    "ErrorCategory",
    "ErrorContext",
    "HttpRequestError",
    "InvalidStatusError",
    "LinkStateError",
    "MissingContextUriError",
    "MissingLinkError",
    "NetworkError",
    "RepresentationError",
    "ResourceNotFoundError",
    "TransportError",
    "UnsupportedOperationError",
    "UntrackedResourceError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "Err",
    "Ok",
    "Result",
    "partition_results",
    "LinkStateSettings",
    "get_settings",
]
