"""Repair Pinboard bookmarks whose title is just their URL."""

__version__ = "0.1.0"
