"""Merge and rewrite iCalendar files from the command line."""

__version__ = "0.1.0"
