"""Capacity and usage counts for a bed."""

from __future__ import annotations

from collections.abc import Iterable

from bedplan.services.conflicts import PlacedGroup
from bedplan.services.geometry import Container
from bedplan.services.patterns import Pattern
from bedplan.services.placement import place_in_container


def calculate_bed_capacity(container: Container, spacing: float, pattern: Pattern | str | None = Pattern.GRID) -> int:
    """Plants an empty bed holds at full density for this spacing and pattern."""
    return len(place_in_container(container, spacing, pattern))


def calculate_used_space(groups: Iterable[PlacedGroup]) -> int:
    """Plants already placed across groups."""
    return sum(len(g.positions) for g in groups)


def remaining_capacity(
    container: Container,
    spacing: float,
    pattern: Pattern | str | None,
    groups: Iterable[PlacedGroup],
) -> int:
    """Capacity minus used slots, never negative."""
    return max(0, calculate_bed_capacity(container, spacing, pattern) - calculate_used_space(groups))
