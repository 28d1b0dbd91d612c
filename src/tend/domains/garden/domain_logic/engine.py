"""Memoizing facade over the garden computations.

Layout and forecast sort the whole population, so repeated requests over an
unchanged population are served from a fingerprint cache. The fingerprint
covers each contact's id, last interaction, target cadence, importance and
name (forecasts carry names into their at-risk entries), plus the call
parameters and the evaluation time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date

from tend.core.memo.cache import FingerprintCache, fingerprint
from tend.domains.garden.domain_logic.decay_forecast import DEFAULT_STORM_TOLERANCE, forecast
from tend.domains.garden.domain_logic.garden_models import (
    Contact,
    ForecastResult,
    HealthSnapshot,
    LayoutMode,
    PositionedNode,
)
from tend.domains.garden.domain_logic.health_classifier import (
    classify,
    classify_population,
    population_score,
    utc_now,
)
from tend.domains.garden.domain_logic.spiral_layout import DEFAULT_MAX_NODES, layout
from tend.domains.garden.domain_logic.triage_queue import RecordInteraction, TriageQueueBuilder

logger = logging.getLogger(__name__)


def population_key(contacts: Iterable[Contact]) -> list[list]:
    """Order-independent description of every contact field a cached result holds."""
    rows = [
        [c.id, c.last_interaction_date, c.target_frequency_days, c.importance, c.name]
        for c in contacts
    ]
    return sorted(rows, key=lambda row: row[0])


class GardenEngine:
    """Entry point used by the tool layer.

    Usage::

        engine = GardenEngine(cache_size=32)
        nodes = engine.layout(contacts, "tier", now=now)
        outlook = engine.forecast(contacts, 30, 2.0, now=now)
    """

    def __init__(self, cache_size: int = 32) -> None:
        self._layouts = FingerprintCache(cache_size)
        self._forecasts = FingerprintCache(cache_size)

    @property
    def layout_cache(self) -> FingerprintCache:
        return self._layouts

    @property
    def forecast_cache(self) -> FingerprintCache:
        return self._forecasts

    def classify(self, contact: Contact, now: date | None = None) -> HealthSnapshot:
        return classify(contact, now)

    def classify_all(
        self, contacts: Iterable[Contact], now: date | None = None
    ) -> list[HealthSnapshot]:
        return classify_population(contacts, now)

    def score(self, snapshots: Sequence[HealthSnapshot]) -> int | None:
        return population_score(snapshots)

    def layout(
        self,
        contacts: Sequence[Contact],
        mode: LayoutMode = "frequency",
        max_nodes: int = DEFAULT_MAX_NODES,
        *,
        now: date | None = None,
    ) -> list[PositionedNode]:
        if now is None:
            now = utc_now()
        key = fingerprint({
            "op": "layout",
            "mode": mode,
            "max_nodes": max_nodes,
            "now": now,
            "population": population_key(contacts),
        })
        nodes = self._layouts.get_or_compute(
            key, lambda: layout(contacts, mode, max_nodes, now=now)
        )
        logger.debug("Layout memo: %d hits, %d misses", self._layouts.hits, self._layouts.misses)
        return list(nodes)

    def forecast(
        self,
        contacts: Sequence[Contact],
        horizon_days: int,
        historical_velocity: float,
        *,
        now: date | None = None,
        storm_tolerance: float = DEFAULT_STORM_TOLERANCE,
    ) -> ForecastResult:
        if now is None:
            now = utc_now()
        key = fingerprint({
            "op": "forecast",
            "horizon_days": horizon_days,
            "velocity": historical_velocity,
            "tolerance": storm_tolerance,
            "now": now,
            "population": population_key(contacts),
        })
        result = self._forecasts.get_or_compute(
            key,
            lambda: forecast(
                contacts,
                horizon_days,
                historical_velocity,
                now=now,
                storm_tolerance=storm_tolerance,
            ),
        )
        logger.debug(
            "Forecast memo: %d hits, %d misses", self._forecasts.hits, self._forecasts.misses
        )
        return replace(result, at_risk_contacts=list(result.at_risk_contacts))

    def triage_builder(
        self, record_interaction_now: RecordInteraction, *, now: date | None = None
    ) -> TriageQueueBuilder:
        return TriageQueueBuilder(record_interaction_now, now=now)
