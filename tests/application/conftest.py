"""Application layer fixtures: real components over in-memory collaborators."""

from unittest.mock import AsyncMock

import pytest

from playdeck.application.services import EntityGraph, PlaybackQueue, PlaylistStore
from playdeck.application.utilities import BackgroundWriter
from playdeck.domain.library import build_batch
from tests.conftest import make_candidate


class FakeDocumentRepository:
    """Keeps saved documents in a list; load returns a preset value."""

    def __init__(self, loaded=None, load_error: Exception | None = None):
        self.loaded = loaded
        self.load_error = load_error
        self.saved = []

    def load(self):
        if self.load_error is not None:
            raise self.load_error
        return self.loaded

    def save(self, document):
        self.saved.append(document)


@pytest.fixture
def writer():
    writer = BackgroundWriter(name="test-writer")
    yield writer
    writer.close(timeout=5)


@pytest.fixture
def playlist_repo():
    return FakeDocumentRepository()


@pytest.fixture
def playlist_store(playlist_repo, writer, fixed_now):
    store = PlaylistStore(playlist_repo, writer, clock=lambda: fixed_now)
    writer.flush(timeout=5)
    playlist_repo.saved.clear()
    return store


@pytest.fixture
def candidates():
    return [
        make_candidate("a1", album="First", artist="Nina"),
        make_candidate("a2", album="First", artist="Nina"),
        make_candidate("b1", album="Second", artist="Nina"),
        make_candidate("c1", album="Single", artist="Otis"),
    ]


@pytest.fixture
def graph(candidates):
    graph = EntityGraph()
    graph.merge_batch(build_batch(candidates))
    return graph


@pytest.fixture
def queue():
    return PlaybackQueue()


@pytest.fixture
def deleter():
    deleter = AsyncMock()
    deleter.delete.return_value = True
    return deleter
