"""
Region partitioning: one exclusive fractional slice of a bed per plant group.

Boundaries are fractional cut points in (0, 1), one fewer than groups, strictly ascending
and clamped to [0.1, 0.9]. Group i owns [start, end) with
start = 0 for the first group, boundaries[i - 1] otherwise, and
end = 1 for the last group, boundaries[i] otherwise, so the regions always tile [0, 1].

The bed shape picks one partition variant, once per bed:
- HorizontalStrips (rectangle, width > height): strips stacked top -> bottom.
- VerticalStrips (rectangle, width <= height): strips side by side left -> right.
- ConcentricAnnuli (circle): rings between start * radius and end * radius.

Strips hold whichever of grid / hexagonal gives more plants, confined to and centered
in the strip itself. Annuli hold concentric rings of plants. Groups in different
regions are never checked against each other: each owns its slice.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Union

from bedplan.services.geometry import Bounds, Circle, Container, Point, in_circle
from bedplan.services.patterns import best_pattern, concentric_rings
from bedplan.services.placement import FillMethod, as_count, parse_fill_method, resolve_fill

MIN_BOUNDARY = 0.1
MAX_BOUNDARY = 0.9
# Smallest width a region keeps after clamping (fraction of the bed)
MIN_REGION_GAP = 0.01


@dataclass(frozen=True)
class RegionBounds:
    """Fractional slice [start, end] of a bed."""

    start: float
    end: float

    @property
    def fraction(self) -> float:
        return max(0.0, self.end - self.start)

    def clamped(self) -> RegionBounds:
        start = min(1.0, max(0.0, self.start))
        end = min(1.0, max(start, self.end))
        return RegionBounds(start, end)


WHOLE_BED = RegionBounds(0.0, 1.0)


def equal_boundaries(group_count: int) -> list[float]:
    """Evenly spaced cut points for group_count regions."""
    return [i / group_count for i in range(1, group_count)] if group_count > 1 else []


def normalize_boundaries(
    boundaries: Sequence[float] | None,
    group_count: int,
    lower: float = MIN_BOUNDARY,
    upper: float = MAX_BOUNDARY,
) -> list[float]:
    """
    Valid boundary set for group_count regions.

    - Wrong length (or None): equal division.
    - Each value clamped into [lower, upper], then sorted.
    - Neighbours pushed apart by at least MIN_REGION_GAP (less when that many gaps do
      not fit between lower and upper), first forward, then back from upper.
    """
    needed = max(0, group_count - 1)
    if needed == 0:
        return []
    values: list[float] = []
    if boundaries is not None and len(boundaries) == needed:
        for b in boundaries:
            value = float(b)
            values.append(value if math.isfinite(value) else 0.5)
    else:
        values = equal_boundaries(group_count)
    values = sorted(min(upper, max(lower, v)) for v in values)
    if needed == 1:
        return values

    gap = min(MIN_REGION_GAP, (upper - lower) / (needed - 1))
    for i in range(1, needed):
        values[i] = max(values[i], values[i - 1] + gap)
    for i in range(needed - 1, -1, -1):
        cap = upper if i == needed - 1 else values[i + 1] - gap
        values[i] = max(lower, min(values[i], cap))
    return values


def move_boundary(
    boundaries: Sequence[float] | None,
    index: int,
    delta: float,
    group_count: int,
    lower: float = MIN_BOUNDARY,
    upper: float = MAX_BOUNDARY,
) -> list[float]:
    """Shift one divider by a fractional delta; out-of-range indexes change nothing."""
    values = normalize_boundaries(boundaries, group_count, lower, upper)
    if not 0 <= index < len(values) or not math.isfinite(delta):
        return values
    values[index] = min(upper, max(lower, values[index] + delta))
    return normalize_boundaries(values, group_count, lower, upper)


def region_bounds(index: int, group_count: int, boundaries: Sequence[float]) -> RegionBounds:
    """Slice owned by group `index`; a lone group owns the whole bed."""
    if group_count <= 1:
        return WHOLE_BED
    start = 0.0 if index == 0 else boundaries[index - 1]
    end = 1.0 if index == group_count - 1 else boundaries[index]
    return RegionBounds(start, end)


def all_region_bounds(group_count: int, boundaries: Sequence[float]) -> list[RegionBounds]:
    return [region_bounds(i, group_count, boundaries) for i in range(group_count)]


@dataclass(frozen=True)
class HorizontalStrips:
    """Wide rectangle: regions are horizontal strips, first group on top."""

    width: float
    height: float

    kind: ClassVar[str] = "horizontal"
    fill_direction: ClassVar[str] = "top-to-bottom rows"

    def strip(self, region: RegionBounds) -> Bounds:
        r = region.clamped()
        top = -self.height / 2
        return Bounds(-self.width / 2, self.width / 2, top + r.start * self.height, top + r.end * self.height)

    def place(self, region: RegionBounds, spacing: float, max_lines: int | None = None) -> list[Point]:
        """Best lattice inside the strip; max_lines bounds its rows."""
        return best_pattern(self.width, self.height, spacing, self.strip(region), max_rows=max_lines)

    def drag_fraction(self, dx: float, dy: float) -> float:
        return dy / self.height if self.height > 0 else 0.0


@dataclass(frozen=True)
class VerticalStrips:
    """Tall (or square) rectangle: regions are vertical strips, first group on the left."""

    width: float
    height: float

    kind: ClassVar[str] = "vertical"
    fill_direction: ClassVar[str] = "left-to-right columns"

    def strip(self, region: RegionBounds) -> Bounds:
        r = region.clamped()
        left = -self.width / 2
        return Bounds(left + r.start * self.width, left + r.end * self.width, -self.height / 2, self.height / 2)

    def place(self, region: RegionBounds, spacing: float, max_lines: int | None = None) -> list[Point]:
        """Best lattice inside the strip; max_lines bounds its columns."""
        return best_pattern(self.width, self.height, spacing, self.strip(region), max_cols=max_lines)

    def drag_fraction(self, dx: float, dy: float) -> float:
        return dx / self.width if self.width > 0 else 0.0


@dataclass(frozen=True)
class ConcentricAnnuli:
    """Circle: regions are rings, first group innermost."""

    radius: float

    kind: ClassVar[str] = "circular"
    fill_direction: ClassVar[str] = "concentric rings"

    def radii(self, region: RegionBounds) -> tuple[float, float]:
        r = region.clamped()
        return (r.start * self.radius, r.end * self.radius)

    def place(self, region: RegionBounds, spacing: float, max_lines: int | None = None) -> list[Point]:
        """Rings of plants inside the annulus, kept only where the footprint is on the disc."""
        inner, outer = self.radii(region)
        rings = concentric_rings(inner, outer, spacing, max_rings=max_lines)
        return [p for p in rings if in_circle(p, self.radius, spacing)]

    def drag_fraction(self, dx: float, dy: float) -> float:
        """Radial drag: length of the move, signed by its direction (down/right grows)."""
        if self.radius <= 0:
            return 0.0
        sign = 1.0 if dx + dy > 0 else -1.0
        return sign * math.hypot(dx, dy) / self.radius


Partition = Union[HorizontalStrips, VerticalStrips, ConcentricAnnuli]


def partition_for(container: Container) -> Partition:
    """Partition variant for a bed shape."""
    if isinstance(container, Circle):
        return ConcentricAnnuli(container.radius)
    if container.is_horizontal:
        return HorizontalStrips(container.width, container.height)
    return VerticalStrips(container.width, container.height)


def place_in_partition(
    partition: Partition,
    spacing: float,
    region: RegionBounds,
    method: FillMethod | str | None = FillMethod.AUTO,
    value: float | int | None = None,
) -> list[Point]:
    """Positions for one region; rows bound the lattice before centering."""
    chosen = parse_fill_method(method)
    if chosen is FillMethod.ROWS:
        return partition.place(region, spacing, max_lines=as_count(value))
    return resolve_fill(partition.place(region, spacing), chosen, value)


def place_in_region(
    container: Container,
    spacing: float,
    region: RegionBounds = WHOLE_BED,
    method: FillMethod | str | None = FillMethod.AUTO,
    value: float | int | None = None,
) -> list[Point]:
    """Region-mode placement of one group inside its slice of a bed."""
    return place_in_partition(partition_for(container), spacing, region, method, value)
