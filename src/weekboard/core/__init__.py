"""Core package for Weekboard.

Holds the configuration layer, the persistence collaborators and the
versioned state/history engine in :mod:`weekboard.core.history`.
"""

from __future__ import annotations

__all__ = ["__doc__"]
