"""Games, daily SQLite records and web-service helpers for group chat bots."""

__version__ = "0.1.0"