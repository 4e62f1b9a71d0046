"""Shortest relationship paths over a semicolon-delimited family table."""

__version__ = "0.1.0"
