"""Integration tests for the Relationship Garden MCP server."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from conftest import NOW, make_contact, run_async
from tend.core.server.app import create_app
from tend.domains.garden.connectors.providers import InMemoryContactSource
from tend.domains.garden.domain_logic.health_classifier import utc_now

ALL_EXPECTED_TOOLS = [
    "health_check",
    "garden_health",
    "garden_layout",
    "social_forecast",
    "triage_queue",
    "triage_water",
    "triage_snooze",
    "priority_nurtures",
]


def _payload(result) -> dict:
    """Decode the JSON text of a tool result across fastmcp result shapes."""
    content = getattr(result, "content", result)
    return json.loads(content[0].text)


def _recent(contact_id: str, days_ago: int | None, **kwargs):
    # Tools evaluate against the real clock, so dates are relative to it.
    contact = make_contact(contact_id, **kwargs)
    contact.last_interaction_date = (
        utc_now().date() - timedelta(days=days_ago) if days_ago is not None else None
    )
    return contact


@pytest.fixture
def source() -> InMemoryContactSource:
    contacts = [
        _recent("bloom", 2),
        _recent("nourish", 28, importance="high"),
        _recent("thirst", 45),
        _recent("fade", 120, importance="high"),
        _recent("never", None),
    ]
    return InMemoryContactSource(contacts, velocity=1.0, fail_ids={"never"}, clock=lambda: NOW)


@pytest.fixture
def client(source):
    mcp = create_app(contact_source_override=source)
    return Client(mcp)


def test_server_starts_and_lists_tools(client):
    """Server should start and expose all registered tools."""
    async def _check():
        async with client:
            tools = await client.list_tools()
            tool_names = [t.name for t in tools]
            for expected in ALL_EXPECTED_TOOLS:
                assert expected in tool_names, f"Missing tool: {expected}"
    run_async(_check())


def test_health_check_reports_source(client):
    async def _check():
        async with client:
            result = await client.call_tool("health_check", {})
            text = str(result)
            assert "ok" in text
            assert "memory" in text
    run_async(_check())


def test_garden_health_counts_states(client):
    async def _check():
        async with client:
            return _payload(await client.call_tool("garden_health", {}))
    data = run_async(_check())
    assert data["contact_count"] == 5
    assert data["counts"] == {"blooming": 1, "nourished": 1, "thirsty": 1, "fading": 2}
    # (100 + 70 + 40 + 10 + 10) / 5
    assert data["score"] == 46
    assert data["data_source"] == "memory"


def test_garden_health_empty_garden_has_null_score():
    client = Client(create_app(contact_source_override=InMemoryContactSource([])))

    async def _check():
        async with client:
            return _payload(await client.call_tool("garden_health", {}))
    data = run_async(_check())
    assert data["score"] is None
    assert data["contact_count"] == 0


def test_garden_layout(client):
    async def _check():
        async with client:
            default = _payload(await client.call_tool("garden_layout", {}))
            tier = _payload(await client.call_tool("garden_layout", {"mode": "tier", "max_nodes": 3}))
            return default, tier
    default, tier = run_async(_check())
    assert [n["contact_id"] for n in default["nodes"]] == ["bloom", "nourish", "thirst", "fade", "never"]
    assert default["omitted"] == 0
    assert default["bounds"] > 0
    assert [n["contact_id"] for n in tier["nodes"]] == ["nourish", "fade", "bloom"]
    assert tier["omitted"] == 2


def test_social_forecast(client):
    async def _check():
        async with client:
            return _payload(await client.call_tool("social_forecast", {"horizon_days": 5}))
    data = run_async(_check())
    assert data["current_healthy_count"] == 2
    assert data["decay_count"] == 1
    assert data["at_risk_contacts"][0]["contact_id"] == "nourish"
    assert data["velocity_resonance"] == 1.0
    assert data["forecasted_healthy_count"] == 2
    assert data["weather_state"] == "sunny"


def test_social_forecast_rejects_non_positive_horizon(client):
    async def _check():
        async with client:
            await client.call_tool("social_forecast", {"horizon_days": 0})
    with pytest.raises(ToolError):
        run_async(_check())


def test_triage_flow(client, source):
    async def _flow():
        async with client:
            queue = _payload(await client.call_tool("triage_queue", {}))
            watered = _payload(await client.call_tool("triage_water", {"contact_id": "fade"}))
            failed = _payload(await client.call_tool("triage_water", {"contact_id": "never"}))
            snoozed = _payload(await client.call_tool("triage_snooze", {"contact_id": "thirst"}))
            again = _payload(await client.call_tool("triage_snooze", {"contact_id": "thirst"}))
            return queue, watered, failed, snoozed, again

    queue, watered, failed, snoozed, again = run_async(_flow())
    assert [c["contact_id"] for c in queue["cards"]] == ["never", "fade", "thirst"]
    assert watered["outcome"] == "watered"
    assert [c["contact_id"] for c in watered["queue"]] == ["never", "thirst"]
    assert failed["outcome"] == "failed"
    assert [c["contact_id"] for c in failed["queue"]] == ["never", "thirst"]
    assert snoozed["outcome"] == "snoozed"
    assert [c["contact_id"] for c in snoozed["queue"]] == ["never"]
    assert again["outcome"] == "invalid_state"
    assert source.recorded == ["fade"]


def test_priority_nurtures(client):
    async def _check():
        async with client:
            return _payload(await client.call_tool("priority_nurtures", {"limit": 1}))
    data = run_async(_check())
    assert [c["contact_id"] for c in data["contacts"]] == ["fade"]


def test_social_forecast_limits_listed_contacts(client):
    async def _check():
        async with client:
            return _payload(await client.call_tool(
                "social_forecast", {"horizon_days": 60, "at_risk_limit": 1}
            ))
    data = run_async(_check())
    assert data["decay_count"] == 2
    assert [c["contact_id"] for c in data["at_risk_contacts"]] == ["nourish"]
