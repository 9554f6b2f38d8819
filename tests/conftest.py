"""
Shared pytest fixtures for linkstate tests.

This module provides:
- FakeTransport: a scripted, recording stand-in for the HTTP transport
- engine / store / settings fixtures wired to the fake

Usage:
    @pytest.mark.asyncio
    async def test_something(engine, transport):
        transport.respond("GET", QUESTION_URI, question_data())
        question = engine.make(uri=QUESTION_URI)
        await engine.load(question)
"""

import sys
from pathlib import Path

import pytest

# Ensure linkstate package and tests.fixtures are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from linkstate.core.settings import LinkStateSettings
from linkstate.representation.engine import SyncEngine
from linkstate.representation.state import StateStore
from tests.fixtures.transport import FakeTransport


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings() -> LinkStateSettings:
    """Settings independent of the developer's environment."""
    return LinkStateSettings(
        _env_file=None,
        log_level="INFO",
        log_format="console",
        batch_size=1,
        mapped_title="name",
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store() -> StateStore:
    return StateStore()


@pytest.fixture
def engine(transport, store, settings) -> SyncEngine:
    return SyncEngine(transport, store=store, settings=settings)
