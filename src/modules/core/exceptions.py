"""Infrastructure-level exceptions shared by every module.

Raised by concrete repositories; the transport adapters translate them
into their own wire conventions (HTTP 503, RPC envelope status 503).
"""

from __future__ import annotations


class BackendUnavailable(Exception):
    """The database could not be reached (disconnect, timeout, refused)."""
