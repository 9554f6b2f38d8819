"""Transport contract and the default httpx-backed transport."""

from linkstate.http.httpx_transport import HttpxTransport
from linkstate.http.transport import HttpResponse, Transport

__all__ = ["HttpResponse", "HttpxTransport", "Transport"]
