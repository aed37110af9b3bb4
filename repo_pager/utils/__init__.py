"""Utility modules shared across the package.

This package provides reusable utilities for:
- Debounced, cancellable callbacks with an injectable clock
"""

from repo_pager.utils.debounce import Clock, DebouncedCallback, LoopClock, ManualClock

__all__ = [
    "Clock",
    "DebouncedCallback",
    "LoopClock",
    "ManualClock",
]
