"""Google API services used by the fetcher."""

from . import drive

__all__ = [
    "drive",
]
