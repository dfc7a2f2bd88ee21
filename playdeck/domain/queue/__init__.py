"""Playback queue state transitions."""

from . import operations

__all__ = ["operations"]
