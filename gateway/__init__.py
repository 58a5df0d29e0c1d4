"""Runtime wiring for the registration gateway.

``python -m gateway`` starts the Discord client and the HTTP server in a
single event loop.
"""

__all__ = ["config", "runtime", "web"]
