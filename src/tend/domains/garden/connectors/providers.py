"""Concrete ContactSource implementations."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from tend.domains.garden.connectors.loader import load_contacts_file
from tend.domains.garden.connectors.mock_data import get_mock_contacts, get_mock_velocity
from tend.domains.garden.domain_logic.garden_models import Contact
from tend.domains.garden.domain_logic.health_classifier import utc_now

logger = logging.getLogger(__name__)


class InMemoryContactSource:
    """Keeps contacts in a dict. Recording an interaction stamps it with ``clock()``.

    ``fail_ids`` simulates a host that cannot persist interactions for some
    contacts; those calls return False and leave the record untouched.
    """

    def __init__(
        self,
        contacts: Iterable[Contact] = (),
        *,
        velocity: float = 0.0,
        fail_ids: Iterable[str] = (),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._contacts: dict[str, Contact] = {c.id: c for c in contacts}
        self._velocity = velocity
        self._fail_ids = set(fail_ids)
        self._clock = clock
        self.recorded: list[str] = []

    async def list_contacts(self) -> list[Contact]:
        return [replace(c) for c in self._contacts.values()]

    async def record_interaction_now(self, contact_id: str) -> bool:
        contact = self._contacts.get(contact_id)
        if contact is None:
            logger.warning("Cannot record interaction for unknown contact %s", contact_id)
            return False
        if contact_id in self._fail_ids:
            logger.warning("Recording interaction for %s failed", contact_id)
            return False
        self._contacts[contact_id] = replace(contact, last_interaction_date=self._clock())
        self.recorded.append(contact_id)
        return True

    async def estimate_historical_velocity(self, horizon_days: int) -> float:
        return self._velocity

    def __len__(self) -> int:
        return len(self._contacts)

    @property
    def data_source(self) -> str:
        return "memory"

    def get_provenance(self) -> dict[str, str]:
        return {
            "data_source": self.data_source,
            "data_source_note": f"{len(self._contacts)} contacts held in memory.",
        }


class MockContactSource(InMemoryContactSource):
    """Seeded with the mock garden. Always available."""

    def __init__(self, *, clock: Callable[[], datetime] = utc_now) -> None:
        super().__init__(get_mock_contacts(clock().date()), clock=clock)

    async def estimate_historical_velocity(self, horizon_days: int) -> float:
        return get_mock_velocity(horizon_days)

    @property
    def data_source(self) -> str:
        return "mock"

    def get_provenance(self) -> dict[str, str]:
        return {
            "data_source": self.data_source,
            "data_source_note": (
                "Using a simulated garden. "
                "Connect the contact store for real relationships."
            ),
        }


class FileContactSource(InMemoryContactSource):
    """Seeded from a YAML contacts file. Interactions are kept in memory only."""

    def __init__(
        self,
        path: str | Path,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._path = Path(path)
        contacts, velocity = load_contacts_file(self._path)
        super().__init__(contacts, velocity=velocity, clock=clock)

    @property
    def data_source(self) -> str:
        return "file"

    def get_provenance(self) -> dict[str, str]:
        return {
            "data_source": self.data_source,
            "data_source_note": f"{len(self)} contacts loaded from {self._path.name}.",
        }
