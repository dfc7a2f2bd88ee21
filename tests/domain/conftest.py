"""Domain layer test fixtures - pure entities with no collaborators."""

import pytest

from playdeck.domain.library import build_batch, graph_operations as ops
from tests.conftest import make_candidate


@pytest.fixture
def candidates():
    """Two albums by one artist plus a single by another."""
    return [
        make_candidate("a1", album="First", artist="Nina", track_number=1),
        make_candidate("a2", album="First", artist="Nina", track_number=2),
        make_candidate("b1", album="Second", artist="Nina", track_number=1),
        make_candidate("c1", album="Single", artist="Otis", track_number=1),
    ]


@pytest.fixture
def batch(candidates):
    return build_batch(candidates)


@pytest.fixture
def library(batch):
    """Snapshot holding the merged candidates."""
    return ops.merge(ops.empty(), batch.tracks, batch.albums, batch.artists)
