"""MCP tools for the relationship garden.

Thin wrappers over the garden engine: fetch contacts from the source,
compute, and return JSON. Domain errors propagate to FastMCP, which reports
them to the client as tool errors.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Literal

from fastmcp import Context, FastMCP

from tend.domains.garden.domain_logic.health_classifier import state_counts, utc_now
from tend.domains.garden.domain_logic.spiral_layout import layout_bounds
from tend.domains.garden.domain_logic.triage_queue import priority_nurtures as rank_nurtures

if TYPE_CHECKING:
    from tend.core.config.settings import Settings
    from tend.domains.garden.connectors import ContactSource
    from tend.domains.garden.domain_logic.engine import GardenEngine

logger = logging.getLogger(__name__)


def register_garden_tools(
    mcp: FastMCP,
    engine: GardenEngine,
    source: ContactSource,
    settings: Settings,
) -> None:
    """Register garden health, layout, forecast and triage tools on the MCP server."""

    # One triage session per server; each triage_queue call starts a new one.
    triage = engine.triage_builder(source.record_interaction_now)

    @mcp.tool
    async def garden_health(ctx: Context) -> str:
        """Classify every relationship and summarize overall garden health.

        Returns per-state counts (blooming, nourished, thirsty, fading), the
        0-100 garden score (null for an empty garden) and each contact's
        snapshot.
        """
        contacts = await source.list_contacts()
        snapshots = engine.classify_all(contacts, utc_now().date())
        return json.dumps({
            "contact_count": len(snapshots),
            "score": engine.score(snapshots),
            "counts": state_counts(snapshots),
            "snapshots": [s.as_dict() for s in snapshots],
            **source.get_provenance(),
        })

    @mcp.tool
    async def garden_layout(
        ctx: Context,
        mode: Literal["frequency", "tier"] | None = None,
        max_nodes: int | None = None,
    ) -> str:
        """Lay out the garden as a sunflower spiral.

        Args:
            mode: 'frequency' (most recently contacted in the center) or
                'tier' (most important in the center). Defaults to the
                configured mode.
            max_nodes: Maximum number of seeds to place.
        """
        contacts = await source.list_contacts()
        nodes = engine.layout(
            contacts,
            mode or settings.garden_layout_mode,
            max_nodes if max_nodes is not None else settings.garden_layout_max_nodes,
            now=utc_now().date(),
        )
        return json.dumps({
            "node_count": len(nodes),
            "omitted": len(contacts) - len(nodes),
            "bounds": round(layout_bounds(nodes), 4),
            "nodes": [n.as_dict() for n in nodes],
        })

    @mcp.tool
    async def social_forecast(
        ctx: Context,
        horizon_days: int | None = None,
        at_risk_limit: int = 10,
    ) -> str:
        """Forecast how many relationships will still be healthy after the horizon.

        Args:
            horizon_days: Days to look ahead (default from settings).
            at_risk_limit: Maximum number of at-risk contacts listed. The
                decay count always covers all of them.
        """
        horizon = horizon_days if horizon_days is not None else settings.forecast_horizon_days
        contacts = await source.list_contacts()
        velocity = await source.estimate_historical_velocity(horizon)
        result = engine.forecast(
            contacts,
            horizon,
            velocity,
            now=utc_now().date(),
            storm_tolerance=settings.forecast_storm_tolerance,
        )
        return json.dumps(result.as_dict(at_risk_limit))

    @mcp.tool
    async def triage_queue(ctx: Context, max_size: int | None = None) -> str:
        """Start a triage session with the thirstiest relationships first.

        Args:
            max_size: Maximum number of cards (default from settings).
        """
        contacts = await source.list_contacts()
        cards = triage.build_queue(
            contacts,
            max_size if max_size is not None else settings.triage_max_size,
        )
        return json.dumps({"cards": [c.as_dict() for c in cards]})

    @mcp.tool
    async def triage_water(ctx: Context, contact_id: str) -> str:
        """Log an interaction with a queued contact right now.

        Args:
            contact_id: Contact on a pending triage card.
        """
        outcome = await triage.water(contact_id)
        if outcome == "failed":
            await ctx.warning(f"Could not record the interaction with {contact_id}; try again.")
        return json.dumps({
            "contact_id": contact_id,
            "outcome": outcome,
            "queue": [c.as_dict() for c in triage.active_queue()],
        })

    @mcp.tool
    async def triage_snooze(ctx: Context, contact_id: str) -> str:
        """Skip a queued contact for this session without logging anything.

        Args:
            contact_id: Contact on a pending triage card.
        """
        outcome = triage.snooze(contact_id)
        return json.dumps({
            "contact_id": contact_id,
            "outcome": outcome,
            "queue": [c.as_dict() for c in triage.active_queue()],
        })

    @mcp.tool
    async def priority_nurtures(ctx: Context, limit: int = 3) -> str:
        """Fading relationships worth reviving today, most important first.

        Args:
            limit: Maximum number of contacts.
        """
        contacts = await source.list_contacts()
        cards = rank_nurtures(contacts, limit, now=utc_now().date())
        return json.dumps({"contacts": [c.as_dict() for c in cards]})
