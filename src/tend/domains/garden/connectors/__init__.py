"""Contact connectors — the host-side collaborators the garden engine consumes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tend.domains.garden.domain_logic.garden_models import Contact


@runtime_checkable
class ContactSource(Protocol):
    """Abstract interface to the host application's contact store.

    The engine reads contacts, asks for a growth estimate, and triggers the
    single mutation it knows about: recording an interaction now.
    """

    async def list_contacts(self) -> list[Contact]:
        """All active contacts."""
        ...

    async def record_interaction_now(self, contact_id: str) -> bool:
        """Log an interaction dated now. True on success, False on failure."""
        ...

    async def estimate_historical_velocity(self, horizon_days: int) -> float:
        """Expected new or reactivated healthy contacts over ``horizon_days``."""
        ...

    @property
    def data_source(self) -> str:
        """Label for the active source: 'mock', 'memory' or 'file'."""
        ...

    def get_provenance(self) -> dict[str, str]:
        """Return provenance metadata suitable for merging into tool output."""
        ...
