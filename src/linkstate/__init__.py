"""
linkstate - client-side synchronization of hypermedia (linked) resources.

Keeps an in-memory graph of linked resources consistent with a server:
sparse placeholders are hydrated on demand, collections are reconciled
against their feeds, and every resource carries a lifecycle status.
"""

__version__ = "0.1.0"

from linkstate.core import *  # noqa
from linkstate.http import HttpResponse, HttpxTransport, Transport  # noqa
from linkstate.representation import *  # noqa
