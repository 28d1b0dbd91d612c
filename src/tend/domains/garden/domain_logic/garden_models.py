"""Relationship garden models and domain constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal

from tend.domains.garden.domain_logic.errors import ContactParseError

HealthState = Literal["blooming", "nourished", "thirsty", "fading"]
Importance = Literal["high", "medium", "low"]
LayoutMode = Literal["frequency", "tier"]
WeatherState = Literal["sunny", "overcast", "stormy"]
CardStatus = Literal["pending", "watering", "watered", "snoozed"]
TriageOutcome = Literal["watered", "snoozed", "failed", "not_found", "invalid_state"]


# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# Ordered healthiest -> most neglected. Index doubles as severity rank.
HEALTH_STATES: list[HealthState] = ["blooming", "nourished", "thirsty", "fading"]
HEALTHY_STATES = frozenset({"blooming", "nourished"})

HEALTH_COLORS: dict[str, str] = {
    "blooming": "#10b981",
    "nourished": "#84cc16",
    "thirsty": "#fbbf24",
    "fading": "#f97316",
}

# Upper bounds (inclusive) on days/target for each state; anything above the
# last bound is fading.
STATE_RATIO_BOUNDS: list[tuple[float, HealthState]] = [
    (0.5, "blooming"),
    (1.0, "nourished"),
    (2.0, "thirsty"),
]

# Garden health score weights. Empirical values, tune freely.
HEALTH_SCORE_WEIGHTS: dict[str, int] = {
    "blooming": 100,
    "nourished": 70,
    "thirsty": 40,
    "fading": 10,
}

DEFAULT_TARGET_DAYS = 30
NEVER_CONTACTED_DAYS = 999

IMPORTANCE_LEVELS: list[Importance] = ["high", "medium", "low"]
DEFAULT_IMPORTANCE: Importance = "medium"
IMPORTANCE_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}

LAYOUT_MODES: tuple[str, ...] = ("frequency", "tier")


def severity_rank(state: str) -> int:
    """0 for blooming up to 3 for fading."""
    return HEALTH_STATES.index(state)


def importance_rank(importance: str) -> int:
    """Numeric importance, higher is more important (unknown values rank as medium)."""
    return IMPORTANCE_RANK.get(importance, IMPORTANCE_RANK[DEFAULT_IMPORTANCE])


# ---------------------------------------------------------------------------
# Input record
# ---------------------------------------------------------------------------

@dataclass
class Contact:
    """A contact record supplied by the host application."""

    id: str
    name: str = ""
    last_interaction_date: date | None = None
    target_frequency_days: int | None = None
    importance: Importance = DEFAULT_IMPORTANCE
    photo_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Contact:
        """Parse a raw host record.

        Accepts ISO 8601 date or datetime strings (a trailing ``Z`` is allowed)
        for ``last_interaction_date``. Blank or missing dates mean "never
        contacted". Unknown importance values fall back to medium.

        Raises:
            ContactParseError: Missing id, malformed date, or a target
                frequency that is not an integer.
        """
        contact_id = data.get("id")
        if contact_id is None or str(contact_id).strip() == "":
            raise ContactParseError("Contact record is missing an id")
        contact_id = str(contact_id)

        importance = str(data.get("importance") or DEFAULT_IMPORTANCE).lower()
        if importance not in IMPORTANCE_RANK:
            importance = DEFAULT_IMPORTANCE

        return cls(
            id=contact_id,
            name=str(data.get("name") or ""),
            last_interaction_date=_parse_date(
                data.get("last_interaction_date"), contact_id
            ),
            target_frequency_days=_parse_target(
                data.get("target_frequency_days"), contact_id
            ),
            importance=importance,  # type: ignore[arg-type]
            photo_url=data.get("photo_url") or None,
        )


def _parse_date(value: Any, contact_id: str) -> date | None:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text)
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ContactParseError(
            f"Contact {contact_id!r} has a malformed last_interaction_date: {value!r}"
        ) from exc


def _parse_target(value: Any, contact_id: str) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        # Not a cadence; treated as absent so the default applies.
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ContactParseError(
            f"Contact {contact_id!r} has a non-integer target_frequency_days: {value!r}"
        ) from exc


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HealthSnapshot:
    """Health classification of one contact at a point in time. Never persisted."""

    contact_id: str
    days_since_contact: int
    state: HealthState
    color: str
    target_days: int = DEFAULT_TARGET_DAYS
    ratio: float = 0.0

    @property
    def is_healthy(self) -> bool:
        return self.state in HEALTHY_STATES

    def as_dict(self) -> dict[str, Any]:
        return {
            "contact_id": self.contact_id,
            "days_since_contact": self.days_since_contact,
            "state": self.state,
            "color": self.color,
            "target_days": self.target_days,
            "ratio": round(self.ratio, 4),
        }


@dataclass(frozen=True)
class PositionedNode:
    """A contact placed on the garden spiral."""

    contact_id: str
    x: float
    y: float
    size: int
    color: str
    index: int = 0
    state: HealthState = "blooming"
    rotation: int = 0  # cosmetic only

    def as_dict(self) -> dict[str, Any]:
        return {
            "contact_id": self.contact_id,
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "color": self.color,
            "index": self.index,
            "state": self.state,
            "rotation": self.rotation,
        }


@dataclass(frozen=True)
class AtRiskContact:
    """A currently healthy contact expected to decay within the horizon."""

    contact_id: str
    days_until_decay: int
    importance: Importance = DEFAULT_IMPORTANCE
    name: str = ""


@dataclass
class ForecastResult:
    """Projected population health over a horizon."""

    horizon_days: int
    current_healthy_count: int
    velocity_resonance: float
    decay_count: int
    forecasted_healthy_count: float
    weather_state: WeatherState
    at_risk_contacts: list[AtRiskContact] = field(default_factory=list)

    def top_at_risk(self, limit: int = 10) -> list[AtRiskContact]:
        """The most urgent at-risk contacts, already in priority order."""
        return self.at_risk_contacts[: max(0, limit)]

    def as_dict(self, at_risk_limit: int | None = None) -> dict[str, Any]:
        at_risk = self.at_risk_contacts if at_risk_limit is None else self.top_at_risk(at_risk_limit)
        return {
            "horizon_days": self.horizon_days,
            "current_healthy_count": self.current_healthy_count,
            "velocity_resonance": self.velocity_resonance,
            "decay_count": self.decay_count,
            "forecasted_healthy_count": self.forecasted_healthy_count,
            "weather_state": self.weather_state,
            "at_risk_contacts": [
                {
                    "contact_id": c.contact_id,
                    "name": c.name,
                    "days_until_decay": c.days_until_decay,
                    "importance": c.importance,
                }
                for c in at_risk
            ],
        }


@dataclass
class TriageCard:
    """One entry of a triage session queue."""

    contact_id: str
    name: str
    days_since_contact: int
    state: HealthState
    importance: Importance = DEFAULT_IMPORTANCE
    photo_url: str | None = None
    status: CardStatus = "pending"

    def as_dict(self) -> dict[str, Any]:
        return {
            "contact_id": self.contact_id,
            "name": self.name,
            "days_since_contact": self.days_since_contact,
            "state": self.state,
            "importance": self.importance,
            "photo_url": self.photo_url,
            "status": self.status,
        }
