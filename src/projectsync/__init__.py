"""Offline-first project list with last-writer-wins sync."""

__version__ = "0.1.0"
