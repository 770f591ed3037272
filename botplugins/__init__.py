"""Framework-independent logic and SQLite storage for group-chat bot features."""

__version__ = "0.1.0"