"""
Flat-mode placement: a new group added to a bed that already holds other groups.

Groups co-exist without regions. Candidates come from the fill method, then the flat
conflict filter drops positions too close to existing plants, then:
- count(n): first n survivors.
- percentage(p): first floor(candidates * p / 100) survivors, normalised on the
  candidate count before filtering.
- rows(n): every survivor of the row-bounded lattice.
- auto: at most bed capacity minus plants already in the bed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bedplan.services.capacity import remaining_capacity
from bedplan.services.conflicts import PlacedGroup, SeparationRule, filter_flat
from bedplan.services.geometry import Container, Point
from bedplan.services.patterns import Pattern
from bedplan.services.placement import FillMethod, candidates_for_method, parse_fill_method, resolve_fill

logger = logging.getLogger(__name__)


def place_with_awareness(
    container: Container,
    spacing: float,
    pattern: Pattern | str | None,
    method: FillMethod | str | None,
    value: float | int | None,
    existing_groups: Sequence[PlacedGroup],
    *,
    separation: SeparationRule = SeparationRule.AVERAGE,
) -> list[Point]:
    """Place a group around existing groups of the same bed."""
    chosen = parse_fill_method(method)
    candidates = candidates_for_method(container, spacing, pattern, chosen, value)
    available = filter_flat(candidates, spacing, existing_groups, separation)
    logger.debug(
        "Flat placement: %d candidates, %d after conflicts with %d groups",
        len(candidates),
        len(available),
        len(existing_groups),
    )

    if chosen is FillMethod.COUNT:
        return resolve_fill(available, FillMethod.COUNT, value)
    if chosen is FillMethod.PERCENTAGE:
        return resolve_fill(available, FillMethod.PERCENTAGE, value, ideal_count=len(candidates))
    if chosen is FillMethod.ROWS:
        return available
    room = remaining_capacity(container, spacing, pattern, existing_groups)
    return available[:room]
