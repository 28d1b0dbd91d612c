"""Triage queue: a short list of thirsty and fading contacts to act on now.

Each ``build_queue`` call opens a fresh session. Within a session every card
moves once from pending to watered or snoozed:

    pending --water--> watering --host ok--> watered
                           |
                           +--host failure--> pending (same position)
    pending --snooze--> snoozed

Watering is optimistic: the contact is reclassified as nourished and leaves
the active queue before the host confirms the interaction was recorded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from datetime import date

from tend.domains.garden.domain_logic.errors import InvalidArgumentError
from tend.domains.garden.domain_logic.garden_models import (
    HEALTH_COLORS,
    CardStatus,
    Contact,
    HealthSnapshot,
    TriageCard,
    TriageOutcome,
    importance_rank,
    severity_rank,
)
from tend.domains.garden.domain_logic.health_classifier import classify, utc_now

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 5
DEFAULT_NURTURE_LIMIT = 3

NEEDS_ATTENTION_STATES = frozenset({"thirsty", "fading"})

RecordInteraction = Callable[[str], Awaitable[bool]]


def _card(contact: Contact, snap: HealthSnapshot) -> TriageCard:
    return TriageCard(
        contact_id=contact.id,
        name=contact.name,
        days_since_contact=snap.days_since_contact,
        state=snap.state,
        importance=contact.importance,
        photo_url=contact.photo_url,
    )


def rank_candidates(
    contacts: Iterable[Contact], now: date
) -> list[tuple[Contact, HealthSnapshot]]:
    """Thirsty and fading contacts, most urgent first.

    Order: severity (fading before thirsty), days since contact, importance,
    all descending, then contact id.
    """
    candidates = []
    for contact in contacts:
        snap = classify(contact, now)
        if snap.state in NEEDS_ATTENTION_STATES:
            candidates.append((contact, snap))
    candidates.sort(key=lambda e: (
        -severity_rank(e[1].state),
        -e[1].days_since_contact,
        -importance_rank(e[0].importance),
        e[0].id,
    ))
    return candidates


def priority_nurtures(
    contacts: Iterable[Contact],
    limit: int = DEFAULT_NURTURE_LIMIT,
    *,
    now: date | None = None,
) -> list[TriageCard]:
    """Fading contacts for the daily briefing: most important, then longest neglected."""
    if limit < 0:
        raise InvalidArgumentError(f"limit must be >= 0, got {limit}")
    if now is None:
        now = utc_now()

    fading = []
    for contact in contacts:
        snap = classify(contact, now)
        if snap.state == "fading":
            fading.append((contact, snap))
    fading.sort(key=lambda e: (
        -importance_rank(e[0].importance),
        -e[1].days_since_contact,
        e[0].id,
    ))
    return [_card(contact, snap) for contact, snap in fading[:limit]]


class _TriageSession:
    """Cards and optimistic snapshots for one ``build_queue`` call."""

    def __init__(self, cards: list[TriageCard], snapshots: dict[str, HealthSnapshot]) -> None:
        self.cards = cards
        self.by_id = {card.contact_id: card for card in cards}
        self.snapshots = snapshots


class TriageQueueBuilder:
    """Builds triage sessions and applies water/snooze actions to them.

    Usage::

        builder = TriageQueueBuilder(source.record_interaction_now)
        cards = builder.build_queue(contacts)
        outcome = await builder.water(cards[0].contact_id)
    """

    def __init__(
        self,
        record_interaction_now: RecordInteraction,
        *,
        now: date | None = None,
    ) -> None:
        self._record_interaction_now = record_interaction_now
        self._now = now
        self._session = _TriageSession([], {})

    def build_queue(
        self,
        contacts: Iterable[Contact],
        max_size: int = DEFAULT_QUEUE_SIZE,
    ) -> list[TriageCard]:
        """Start a new session and return its pending cards.

        Raises:
            InvalidArgumentError: Negative ``max_size``.
        """
        if max_size < 0:
            raise InvalidArgumentError(f"max_size must be >= 0, got {max_size}")
        now = self._now if self._now is not None else utc_now()

        ranked = rank_candidates(contacts, now)[:max_size]
        cards = [_card(contact, snap) for contact, snap in ranked]
        snapshots = {snap.contact_id: snap for _, snap in ranked}
        self._session = _TriageSession(cards, snapshots)

        logger.debug("Triage session started with %d cards", len(cards))
        return self.active_queue()

    def active_queue(self) -> list[TriageCard]:
        """Pending cards of the current session, in queue order."""
        return [replace(card) for card in self._session.cards if card.status == "pending"]

    def card_status(self, contact_id: str) -> CardStatus | None:
        card = self._session.by_id.get(contact_id)
        return card.status if card is not None else None

    def snapshot_for(self, contact_id: str) -> HealthSnapshot | None:
        """Current (possibly optimistic) health of a queued contact."""
        return self._session.snapshots.get(contact_id)

    def _check_pending(self, session: _TriageSession, contact_id: str) -> TriageOutcome | None:
        card = session.by_id.get(contact_id)
        if card is None:
            logger.info("Triage action on unknown contact %s", contact_id)
            return "not_found"
        if card.status != "pending":
            logger.info("Triage action on %s card %s ignored", card.status, contact_id)
            return "invalid_state"
        return None

    async def water(self, contact_id: str) -> TriageOutcome:
        """Record an interaction now, optimistically.

        Returns ``"watered"`` on success and ``"failed"`` when the host reports
        failure, in which case the card is back in its original queue slot
        with its original health. If the host call raises, the same revert
        happens before the exception propagates.
        """
        session = self._session
        rejected = self._check_pending(session, contact_id)
        if rejected is not None:
            return rejected

        card = session.by_id[contact_id]
        previous = session.snapshots[contact_id]
        session.snapshots[contact_id] = HealthSnapshot(
            contact_id=contact_id,
            days_since_contact=0,
            state="nourished",
            color=HEALTH_COLORS["nourished"],
            target_days=previous.target_days,
            ratio=0.0,
        )
        card.status = "watering"

        try:
            recorded = await self._record_interaction_now(contact_id)
        except (Exception, asyncio.CancelledError):
            self._revert(session, contact_id, previous)
            logger.warning("Recording interaction for %s raised; watering reverted", contact_id)
            raise

        if not recorded:
            self._revert(session, contact_id, previous)
            logger.warning("Host failed to record interaction for %s; watering reverted", contact_id)
            return "failed"

        card.status = "watered"
        card.days_since_contact = 0
        card.state = "nourished"
        logger.info("Watered %s", contact_id)
        return "watered"

    def snooze(self, contact_id: str) -> TriageOutcome:
        """Drop a card from this session only. Health data is untouched."""
        rejected = self._check_pending(self._session, contact_id)
        if rejected is not None:
            return rejected
        self._session.by_id[contact_id].status = "snoozed"
        logger.info("Snoozed %s", contact_id)
        return "snoozed"

    @staticmethod
    def _revert(session: _TriageSession, contact_id: str, previous: HealthSnapshot) -> None:
        session.snapshots[contact_id] = previous
        session.by_id[contact_id].status = "pending"
