"""Money Tracker: учёт личных финансов."""

__version__ = "2.0.0"
