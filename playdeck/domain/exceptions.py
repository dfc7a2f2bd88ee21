"""Domain exception hierarchy."""


class PlaydeckError(Exception):
    """Base class for playdeck errors."""


class DocumentDecodeError(PlaydeckError):
    """A persisted document could not be decoded."""

    def __init__(self, document: str, reason: str) -> None:
        super().__init__(f"Cannot decode document '{document}': {reason}")
        self.document = document
        self.reason = reason
