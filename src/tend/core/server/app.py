"""Relationship Garden MCP server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from tend.core.config.settings import get_settings
from tend.domains.garden.connectors import ContactSource
from tend.domains.garden.connectors.providers import FileContactSource, MockContactSource
from tend.domains.garden.domain_logic.engine import GardenEngine
from tend.domains.garden.tools.garden_tools import register_garden_tools

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(
    *,
    contact_source_override: ContactSource | None = None,
) -> FastMCP:
    """Create and configure the Relationship Garden MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Initializes the contact source (YAML seed file, or the mock garden)
    3. Creates the memoizing garden engine
    4. Registers all tools
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        "Relationship Garden",
        instructions=(
            "Relationship health engine for a personal CRM. Classifies how well "
            "each relationship is tended, lays the garden out as a sunflower "
            "spiral, forecasts decay, and runs a quick triage queue for "
            "contacts that need attention."
        ),
    )

    # --- Initialize contact source ---
    if contact_source_override is not None:
        source = contact_source_override
    elif settings.contacts_path:
        source = FileContactSource(settings.contacts_path)
        logger.info("Using contacts file %s", settings.contacts_path)
    else:
        source = MockContactSource()
        logger.info("Using mock contact source")

    # --- Initialize engine ---
    engine = GardenEngine(cache_size=settings.memo_cache_size)

    # --- Register tools ---
    @server.tool
    async def health_check() -> dict:
        """Check server health and return basic status information."""
        contacts = await source.list_contacts()
        return {
            "status": "ok",
            "server": "Relationship Garden",
            "version": VERSION,
            "data_source": source.data_source,
            "contact_count": len(contacts),
        }

    register_garden_tools(server, engine, source, settings)
    logger.info("Garden tools registered")

    return server


# Module-level instance for FastMCP discovery ("...app.py:mcp").
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
