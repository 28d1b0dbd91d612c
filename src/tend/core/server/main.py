"""Garden server entry point — ``python -m tend.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from tend.core.config.settings import Settings, get_settings
from tend.core.server.app import create_app

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def _check_bind(settings: Settings) -> None:
    """Contact data is personal and the server has no auth layer: stay on loopback."""
    if settings.tend_allow_insecure_bind or _is_loopback_host(settings.tend_host):
        return
    raise RuntimeError(
        f"Refusing to serve the garden on {settings.tend_host}: only loopback hosts "
        "are allowed. Set TEND_ALLOW_INSECURE_BIND=true to override."
    )


def run() -> None:
    """Start the garden MCP server over Streamable HTTP."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.tend_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _check_bind(settings)

    logger.info("Relationship Garden listening on %s:%d", settings.tend_host, settings.tend_port)
    create_app().run(
        transport="streamable-http",
        host=settings.tend_host,
        port=settings.tend_port,
    )


if __name__ == "__main__":
    run()
