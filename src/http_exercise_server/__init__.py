"""HTTP Exercise Server: routing, JSON, cookies, sessions and headers over an in-memory user list."""

__version__ = "1.0.0"
