"""Route modules exposed by the API package."""

from . import auth, ping, reports, tickets

__all__ = ["auth", "ping", "reports", "tickets"]
