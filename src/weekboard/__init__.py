"""Weekboard: a weekly task board with a versioned, time-travelling state engine."""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
