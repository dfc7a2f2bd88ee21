"""Application utilities: snapshot publishing and background writes."""

from .background import BackgroundWriter
from .observable import ObservableValue

__all__ = ["BackgroundWriter", "ObservableValue"]
