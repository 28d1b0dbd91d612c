"""Deterministic relationship health classification.

A contact's health is the ratio of days since the last interaction to the
target cadence:

    r <= 0.5        blooming
    0.5 < r <= 1.0  nourished
    1.0 < r <= 2.0  thirsty
    r > 2.0         fading

Contacts never interacted with count as 999 days since contact. Missing or
non-positive targets default to 30 days. All functions are pure.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone

from tend.domains.garden.domain_logic.garden_models import (
    DEFAULT_TARGET_DAYS,
    HEALTH_COLORS,
    HEALTH_SCORE_WEIGHTS,
    HEALTH_STATES,
    NEVER_CONTACTED_DAYS,
    STATE_RATIO_BOUNDS,
    Contact,
    HealthSnapshot,
    HealthState,
)

_SECONDS_PER_DAY = 86400


def utc_now() -> datetime:
    """Current time, used whenever a caller does not pass ``now``."""
    return datetime.now(timezone.utc)


def effective_target_days(target_frequency_days: int | None) -> int:
    """Return the target cadence, falling back to 30 for missing or non-positive values."""
    if isinstance(target_frequency_days, bool):
        return DEFAULT_TARGET_DAYS
    if isinstance(target_frequency_days, int) and target_frequency_days > 0:
        return target_frequency_days
    return DEFAULT_TARGET_DAYS


def days_since(last_interaction: date | None, now: date) -> int:
    """Whole days elapsed between ``last_interaction`` and ``now``.

    Returns the never-contacted sentinel when ``last_interaction`` is None.
    Interactions dated in the future count as 0 days.
    """
    if last_interaction is None:
        return NEVER_CONTACTED_DAYS

    if (
        isinstance(last_interaction, datetime)
        and isinstance(now, datetime)
        and (last_interaction.tzinfo is None) == (now.tzinfo is None)
    ):
        elapsed = (now - last_interaction).total_seconds()
        days = math.floor(elapsed / _SECONDS_PER_DAY)
    else:
        # Mixed precision (or naive vs aware): compare calendar dates.
        days = (_as_date(now) - _as_date(last_interaction)).days

    return max(0, days)


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def state_for_ratio(ratio: float) -> HealthState:
    """Map days/target to a health state. Bounds are inclusive on the upper side."""
    for bound, state in STATE_RATIO_BOUNDS:
        if ratio <= bound:
            return state
    return "fading"


def classify(contact: Contact, now: date | None = None) -> HealthSnapshot:
    """Classify a single contact's relationship health at ``now``."""
    if now is None:
        now = utc_now()

    days = days_since(contact.last_interaction_date, now)
    target = effective_target_days(contact.target_frequency_days)
    ratio = days / target
    state = state_for_ratio(ratio)

    return HealthSnapshot(
        contact_id=contact.id,
        days_since_contact=days,
        state=state,
        color=HEALTH_COLORS[state],
        target_days=target,
        ratio=ratio,
    )


def classify_population(
    contacts: Iterable[Contact], now: date | None = None
) -> list[HealthSnapshot]:
    """Classify every contact against the same ``now``, preserving input order."""
    if now is None:
        now = utc_now()
    return [classify(contact, now) for contact in contacts]


def state_counts(snapshots: Iterable[HealthSnapshot]) -> dict[str, int]:
    """Count snapshots per state. All four states are always present."""
    counts = {state: 0 for state in HEALTH_STATES}
    for snap in snapshots:
        counts[snap.state] += 1
    return counts


def population_score(snapshots: Sequence[HealthSnapshot]) -> int | None:
    """Aggregate garden health on a 0-100 scale.

    Weighted average of per-state weights, rounded half up. An empty
    population has no meaningful score and returns None.
    """
    if not snapshots:
        return None
    total = sum(HEALTH_SCORE_WEIGHTS[snap.state] for snap in snapshots)
    return math.floor(total / len(snapshots) + 0.5)
