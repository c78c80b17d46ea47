"""
Minimum-distance filtering of candidates against plants already in a bed.

Two variants share one separation rule function:

- Flat (co-existing, unordered groups): a candidate is rejected when it is closer than
  the required separation to any point of another group. Default rule AVERAGE: the
  gap between two peers is shared, each contributes half of its own spacing.
- Layered (ordered groups, earlier layers immutable): rule MAX. A later layer keeps
  the full personal spacing of both plants and never encroaches on an earlier layer.

Walks candidates in emission order so survivors remain a subsequence of the input.
Brute force O(candidates × existing); beds hold at most a few thousand plants.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from bedplan.services.geometry import EPSILON, Point


class SeparationRule(str, Enum):
    """How two spacings combine into a required center-to-center distance."""

    AVERAGE = "average"
    MAX = "max"


@dataclass(frozen=True)
class PlacedGroup:
    """Points of one already placed group together with its spacing."""

    spacing: float
    positions: Sequence[Point]


def required_separation(spacing_a: float, spacing_b: float, rule: SeparationRule = SeparationRule.MAX) -> float:
    """Minimum allowed distance between plants of two groups under rule."""
    if rule is SeparationRule.AVERAGE:
        return (spacing_a + spacing_b) / 2.0
    return max(spacing_a, spacing_b)


def _conflicts(candidate: Point, spacing: float, groups: Iterable[PlacedGroup], rule: SeparationRule) -> bool:
    for group in groups:
        min_dist = required_separation(spacing, group.spacing, rule)
        for placed in group.positions:
            if candidate.distance_to(placed) < min_dist - EPSILON:
                return True
    return False


def filter_against(
    candidates: Sequence[Point],
    spacing: float,
    groups: Sequence[PlacedGroup],
    rule: SeparationRule,
) -> list[Point]:
    """Keep candidates that respect rule against every placed group."""
    placed = [g for g in groups if g.positions]
    if not placed:
        return list(candidates)
    return [c for c in candidates if not _conflicts(c, spacing, placed, rule)]


def filter_flat(
    candidates: Sequence[Point],
    spacing: float,
    existing_groups: Sequence[PlacedGroup],
    rule: SeparationRule = SeparationRule.AVERAGE,
) -> list[Point]:
    """Flat mode: drop candidates too close to any plant of the co-existing groups."""
    return filter_against(candidates, spacing, existing_groups, rule)


def filter_layered(
    candidates: Sequence[Point],
    spacing: float,
    earlier_layers: Sequence[PlacedGroup],
) -> list[Point]:
    """Layered mode: drop candidates closer than max(spacing, layer spacing) to earlier layers."""
    return filter_against(candidates, spacing, earlier_layers, SeparationRule.MAX)


def min_distance_between(a: Sequence[Point], b: Sequence[Point]) -> float:
    """Smallest pairwise distance between two point sets (inf when either is empty)."""
    best = math.inf
    for p in a:
        for q in b:
            d = p.distance_to(q)
            if d < best:
                best = d
    return best
