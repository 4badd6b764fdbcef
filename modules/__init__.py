"""Helper modules for the PartsQuest Web application."""

__all__ = [
    "forms",
    "voice",
]
