"""Package version (bump on release)."""

__version__ = "0.1.0"
