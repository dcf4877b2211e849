"""Local-first chat with a simulated assistant and JSON-backed session history."""

__version__ = "0.1.0"
