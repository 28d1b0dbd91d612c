"""Shared test fixtures for relationship garden tests."""

from __future__ import annotations

import asyncio
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTACTS_PATH", "")
    monkeypatch.setenv("MEMO_CACHE_SIZE", "32")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from tend.domains.garden.connectors.providers import InMemoryContactSource  # noqa: E402
from tend.domains.garden.domain_logic.garden_models import Contact  # noqa: E402

# Fixed evaluation date for deterministic classification.
TODAY = date(2026, 3, 1)
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def run_async(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def make_contact(
    id: str = "c-1",
    days_ago: int | None = 0,
    target: int | None = 30,
    importance: str = "medium",
    name: str | None = None,
) -> Contact:
    """Create a contact last seen ``days_ago`` days before TODAY (None = never)."""
    last = TODAY - timedelta(days=days_ago) if days_ago is not None else None
    return Contact(
        id=id,
        name=name if name is not None else f"Contact {id}",
        last_interaction_date=last,
        target_frequency_days=target,
        importance=importance,
    )


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def population() -> list[Contact]:
    """One contact per health state, plus a never-contacted one (target 30)."""
    return [
        make_contact("bloom", days_ago=5, importance="low"),
        make_contact("nourish", days_ago=25, importance="medium"),
        make_contact("thirst", days_ago=45, importance="high"),
        make_contact("fade", days_ago=90, importance="medium"),
        make_contact("never", days_ago=None, target=None, importance="high"),
    ]


@pytest.fixture
def contact_source(population: list[Contact]) -> InMemoryContactSource:
    """In-memory contact source over the standard population."""
    return InMemoryContactSource(population, velocity=1.0, clock=lambda: NOW)
