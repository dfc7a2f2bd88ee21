"""CLI fixtures: components over in-memory storage, injected through ctx.obj."""

import json
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from playdeck.config import Settings
from playdeck.domain.library import build_batch
from playdeck.infrastructure.bootstrap import build_components
from playdeck.infrastructure.cli.app import app
from playdeck.infrastructure.persistence import InMemoryDocumentStore
from tests.conftest import make_candidate


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI callback from reconfiguring global log sinks."""
    monkeypatch.setattr(
        "playdeck.infrastructure.cli.app.setup_loguru_logger", lambda verbose=False: None
    )


@pytest.fixture
def runner():
    """CLI test runner."""
    return CliRunner()


@pytest.fixture
def deleter():
    deleter = AsyncMock()
    deleter.delete.return_value = True
    return deleter


@pytest.fixture
def components(tmp_path, deleter):
    components = build_components(
        Settings(storage={"data_dir": tmp_path}),
        store=InMemoryDocumentStore(),
        media_index=AsyncMock(),
        deleter=deleter,
    )
    components.graph.merge_batch(
        build_batch(
            [
                make_candidate("a1", album="First", artist="Nina"),
                make_candidate("a2", album="First", artist="Nina"),
                make_candidate("c1", album="Single", artist="Otis"),
            ]
        )
    )
    yield components
    components.shutdown()


@pytest.fixture
def invoke(runner, components):
    """Run the CLI against the injected components."""
    def run(*args):
        return runner.invoke(app, list(args), obj={"components": components})

    return run


@pytest.fixture
def manifest(tmp_path):
    path = tmp_path / "manifest.json"
    path.write_text(
        json.dumps(
            {
                "tracks": [
                    {"locator": "/music/n1.flac", "title": "N1", "artist": "Kim", "album": "Live", "media_id": "n1"},
                    {"locator": "/music/n2.flac", "title": "N2", "artist": "Kim", "album": "Live", "media_id": "n2"},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path
