"""Social forecast: how many relationships will still be healthy in N days.

Healthy contacts (blooming or nourished) decay once their days since contact
pass the target cadence. Growth is not modelled here; the host supplies a
historical velocity (new or reactivated contacts per horizon) and the model
simply nets it against projected decay.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import date

from tend.domains.garden.domain_logic.errors import InvalidArgumentError
from tend.domains.garden.domain_logic.garden_models import (
    AtRiskContact,
    Contact,
    ForecastResult,
    WeatherState,
    importance_rank,
)
from tend.domains.garden.domain_logic.health_classifier import classify, utc_now

logger = logging.getLogger(__name__)

# Decay may exceed growth by up to this many contacts and still read as overcast.
DEFAULT_STORM_TOLERANCE = 1.0


def days_until_decay(days_since_contact: int, target_days: int) -> int:
    """Days left before a healthy contact crosses from nourished into thirsty."""
    return math.ceil(target_days - days_since_contact)


def weather_for(
    current_healthy: int,
    forecasted_healthy: float,
    velocity: float,
    decay: int,
    tolerance: float = DEFAULT_STORM_TOLERANCE,
) -> WeatherState:
    """Coarse summary of growth versus decay.

    sunny:    forecast holds or grows.
    stormy:   forecast shrinks and decay outpaces growth by more than ``tolerance``.
    overcast: anything else (roughly balanced).
    """
    if forecasted_healthy >= current_healthy:
        return "sunny"
    if decay - velocity > tolerance:
        return "stormy"
    return "overcast"


def forecast(
    contacts: Iterable[Contact],
    horizon_days: int,
    historical_velocity: float,
    *,
    now: date | None = None,
    storm_tolerance: float = DEFAULT_STORM_TOLERANCE,
) -> ForecastResult:
    """Project healthy-contact counts ``horizon_days`` ahead.

    Args:
        contacts: Full population.
        horizon_days: Forecast window in days, must be positive.
        historical_velocity: Host estimate of new/reactivated healthy
            contacts over the horizon. Used as-is.
        now: Evaluation time.
        storm_tolerance: Decay/growth deficit tolerated before the weather
            turns stormy.

    Raises:
        InvalidArgumentError: Non-positive horizon, negative velocity or
            negative tolerance.
    """
    if horizon_days <= 0:
        raise InvalidArgumentError(f"horizon_days must be positive, got {horizon_days}")
    if historical_velocity < 0:
        raise InvalidArgumentError(
            f"historical_velocity must be >= 0, got {historical_velocity}"
        )
    if storm_tolerance < 0:
        raise InvalidArgumentError(f"storm_tolerance must be >= 0, got {storm_tolerance}")
    if now is None:
        now = utc_now()

    current_healthy = 0
    at_risk: list[AtRiskContact] = []

    for contact in contacts:
        snap = classify(contact, now)
        if not snap.is_healthy:
            continue
        current_healthy += 1
        remaining = days_until_decay(snap.days_since_contact, snap.target_days)
        if remaining <= horizon_days:
            at_risk.append(AtRiskContact(
                contact_id=contact.id,
                days_until_decay=remaining,
                importance=contact.importance,
                name=contact.name,
            ))

    at_risk.sort(key=lambda c: (c.days_until_decay, -importance_rank(c.importance), c.contact_id))

    decay = len(at_risk)
    forecasted = max(0, current_healthy + historical_velocity - decay)
    weather = weather_for(current_healthy, forecasted, historical_velocity, decay, storm_tolerance)

    logger.debug(
        "Forecast over %d days: healthy=%d velocity=%s decay=%d forecast=%s weather=%s",
        horizon_days, current_healthy, historical_velocity, decay, forecasted, weather,
    )

    return ForecastResult(
        horizon_days=horizon_days,
        current_healthy_count=current_healthy,
        velocity_resonance=historical_velocity,
        decay_count=decay,
        forecasted_healthy_count=forecasted,
        weather_state=weather,
        at_risk_contacts=at_risk,
    )
