"""lendingdesk - library lending and renewal transactions."""

__version__ = "0.1.0"
