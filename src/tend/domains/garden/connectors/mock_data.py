"""Mock contact data for development and testing.

A small, realistic garden: a few close friends in good shape, a handful of
relationships drifting, and a couple of people never contacted at all. Dates
are relative to ``now`` so the spread of health states is stable over time.
"""

from __future__ import annotations

from datetime import date, timedelta

from tend.domains.garden.domain_logic.garden_models import Contact

# (id, name, days ago or None, target days or None, importance)
_MOCK_GARDEN = [
    ("c-ada", "Ada Lovelace", 2, 14, "high"),
    ("c-alan", "Alan Turing", 9, 14, "high"),
    ("c-grace", "Grace Hopper", 20, 14, "high"),
    ("c-edsger", "Edsger Dijkstra", 40, 14, "medium"),
    ("c-barbara", "Barbara Liskov", 5, 30, "medium"),
    ("c-donald", "Donald Knuth", 27, 30, "medium"),
    ("c-margaret", "Margaret Hamilton", 45, 30, "medium"),
    ("c-ken", "Ken Thompson", 75, 30, "low"),
    ("c-frances", "Frances Allen", 60, 90, "low"),
    ("c-john", "John McCarthy", 200, 90, "low"),
    ("c-radia", "Radia Perlman", 1, 7, "high"),
    ("c-tim", "Tim Berners-Lee", 12, None, "medium"),
    ("c-katherine", "Katherine Johnson", None, None, "high"),
    ("c-dennis", "Dennis Ritchie", None, 60, "low"),
]


def get_mock_contacts(today: date) -> list[Contact]:
    """Return the mock garden with interaction dates relative to ``today``."""
    contacts = []
    for contact_id, name, days_ago, target, importance in _MOCK_GARDEN:
        last = today - timedelta(days=days_ago) if days_ago is not None else None
        contacts.append(Contact(
            id=contact_id,
            name=name,
            last_interaction_date=last,
            target_frequency_days=target,
            importance=importance,
        ))
    return contacts


def get_mock_velocity(horizon_days: int) -> float:
    """Roughly one reactivated relationship every ten days."""
    return round(horizon_days / 10, 1)
