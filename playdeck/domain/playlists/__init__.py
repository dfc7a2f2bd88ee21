"""Playlist edit operations."""

from . import operations

__all__ = ["operations"]
