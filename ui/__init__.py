"""User interface components"""

from .progress import ProgressTracker, ConsoleProgress, SilentProgress

__all__ = [
    "ProgressTracker",
    "ConsoleProgress",
    "SilentProgress",
]
