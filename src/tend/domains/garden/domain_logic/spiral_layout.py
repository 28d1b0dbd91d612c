"""Phyllotactic (sunflower-seed) garden layout.

Contacts are sorted, truncated to ``max_nodes`` and placed on a golden-angle
spiral around the origin:

    C      = max(2.5, 4.0 * (30 / max(30, n)) ** 0.3)
    radius = C * sqrt(i + 1)
    angle  = i * 137.5deg

Position depends only on sorted index, so the same population always lands
in the same place. The per-node rotation is cosmetic and derived from the
contact id; it never moves a node.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from datetime import date

from tend.domains.garden.domain_logic.errors import InvalidArgumentError
from tend.domains.garden.domain_logic.garden_models import (
    LAYOUT_MODES,
    Contact,
    HealthSnapshot,
    LayoutMode,
    PositionedNode,
    importance_rank,
)
from tend.domains.garden.domain_logic.health_classifier import classify, utc_now

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = math.radians(137.5)
DEFAULT_MAX_NODES = 300

# Spiral density constants, empirically tuned.
SPIRAL_MIN_CONSTANT = 2.5
SPIRAL_BASE_CONSTANT = 4.0
SPIRAL_REFERENCE_COUNT = 30
SPIRAL_DENSITY_EXPONENT = 0.3

# Seed sizes: more contacts, smaller seeds.
SIZE_SMALL = 4   # n > 100
SIZE_MEDIUM = 5  # 50 < n <= 100
SIZE_LARGE = 6   # n <= 50

ROTATION_RANGE_DEGREES = 15

_Entry = tuple[Contact, HealthSnapshot]


def spiral_constant(count: int) -> float:
    """Spiral spacing for a population of ``count`` nodes."""
    scale = SPIRAL_REFERENCE_COUNT / max(SPIRAL_REFERENCE_COUNT, count)
    return max(SPIRAL_MIN_CONSTANT, SPIRAL_BASE_CONSTANT * scale ** SPIRAL_DENSITY_EXPONENT)


def node_size(count: int) -> int:
    """Pick one of three seed sizes from the number of laid-out nodes."""
    if count > 100:
        return SIZE_SMALL
    if count > 50:
        return SIZE_MEDIUM
    return SIZE_LARGE


def cosmetic_rotation(contact_id: str) -> int:
    """Stable pseudo-random tilt in [-15, 15] degrees from summed character codes."""
    span = 2 * ROTATION_RANGE_DEGREES + 1
    return sum(ord(ch) for ch in contact_id) % span - ROTATION_RANGE_DEGREES


def spiral_position(index: int, constant: float) -> tuple[float, float]:
    """(x, y) of the ``index``-th seed."""
    radius = constant * math.sqrt(index + 1)
    angle = index * GOLDEN_ANGLE
    return radius * math.cos(angle), radius * math.sin(angle)


def _sort_key(mode: LayoutMode) -> Callable[[_Entry], tuple]:
    if mode == "tier":
        return lambda e: (-importance_rank(e[0].importance), e[1].days_since_contact, e[0].id)
    return lambda e: (e[1].days_since_contact, e[0].id)


def layout(
    contacts: Iterable[Contact],
    mode: LayoutMode = "frequency",
    max_nodes: int = DEFAULT_MAX_NODES,
    *,
    now: date | None = None,
) -> list[PositionedNode]:
    """Place contacts on the garden spiral.

    Args:
        contacts: Population to lay out.
        mode: ``"frequency"`` sorts by days since contact; ``"tier"`` sorts
            by importance (high first) and then days since contact.
        max_nodes: Only the first ``max_nodes`` sorted contacts get a node.
        now: Evaluation time. Pass explicitly for reproducible output.

    Returns:
        Nodes in spiral order. Empty for an empty population.

    Raises:
        InvalidArgumentError: Unknown mode or negative ``max_nodes``.
    """
    if mode not in LAYOUT_MODES:
        raise InvalidArgumentError(
            f"Unknown layout mode {mode!r}; expected one of {', '.join(LAYOUT_MODES)}"
        )
    if max_nodes < 0:
        raise InvalidArgumentError(f"max_nodes must be >= 0, got {max_nodes}")

    population = list(contacts)
    if not population:
        return []
    if now is None:
        now = utc_now()

    entries: list[_Entry] = [(contact, classify(contact, now)) for contact in population]
    entries.sort(key=_sort_key(mode))

    if len(entries) > max_nodes:
        logger.debug("Garden layout truncated from %d to %d nodes", len(entries), max_nodes)
        entries = entries[:max_nodes]

    count = len(entries)
    constant = spiral_constant(count)
    size = node_size(count)

    nodes = []
    for i, (contact, snap) in enumerate(entries):
        x, y = spiral_position(i, constant)
        nodes.append(PositionedNode(
            contact_id=contact.id,
            x=x,
            y=y,
            size=size,
            color=snap.color,
            index=i,
            state=snap.state,
            rotation=cosmetic_rotation(contact.id),
        ))
    return nodes


def layout_bounds(nodes: Iterable[PositionedNode]) -> float:
    """Radius of the smallest origin-centered circle that contains every seed."""
    return max((math.hypot(n.x, n.y) + n.size / 2 for n in nodes), default=0.0)
