"""
Whole-bed placement and fill-method resolution.

Placement functions are pure: (container, spacing, pattern, method, value) -> ordered
list of Points. Nothing here raises on bad geometry; spacing <= 0, empty beds or
out-of-range fill values give an empty (or shorter) list, which callers read as
"nothing fits".

Fill methods:
- auto: every candidate.
- count(n): first min(n, len) candidates.
- percentage(p): first floor(ideal * p / 100) candidates, where ideal is the candidate
  count before any conflict filtering so percentages are comparable across beds.
- rows(n): the generator itself runs with at most n rows (then clipped on circular
  beds); bounding rows changes centering, so this is never a slice.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from enum import Enum

from bedplan.services.geometry import EPSILON, Circle, Container, Point, in_circle, is_usable_spacing
from bedplan.services.patterns import Pattern, generate_pattern, parse_pattern


class FillMethod(str, Enum):
    """Policy controlling how many candidate positions are kept."""

    AUTO = "auto"
    COUNT = "count"
    ROWS = "rows"
    PERCENTAGE = "percentage"


def parse_fill_method(value: str | FillMethod | None) -> FillMethod:
    """Fill method from its name; unknown names mean auto."""
    if isinstance(value, FillMethod):
        return value
    if value is None:
        return FillMethod.AUTO
    try:
        return FillMethod(str(value).strip().lower())
    except ValueError:
        return FillMethod.AUTO


def as_count(value: float | int | None) -> int:
    """Non-negative integer from a user-supplied count; NaN, inf and None give 0."""
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return int(math.floor(number))


def _as_percentage(value: float | int | None) -> float:
    try:
        number = float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return min(100.0, max(0.0, number))


def percentage_count(ideal_count: int, percentage: float | int | None) -> int:
    """floor(ideal_count * percentage / 100) with percentage clamped to [0, 100]."""
    return int(math.floor(ideal_count * _as_percentage(percentage) / 100.0 + EPSILON))


def resolve_fill(
    candidates: Sequence[Point],
    method: FillMethod | str | None,
    value: float | int | None = None,
    *,
    ideal_count: int | None = None,
) -> list[Point]:
    """
    Truncate an ordered candidate list according to a fill method.

    Always returns a prefix of candidates. rows is resolved at generation time
    (see place_in_rows), so here it behaves like auto.
    """
    chosen = parse_fill_method(method)
    if chosen is FillMethod.COUNT:
        return list(candidates[: as_count(value)])
    if chosen is FillMethod.PERCENTAGE:
        base = len(candidates) if ideal_count is None else ideal_count
        return list(candidates[: percentage_count(base, value)])
    return list(candidates)


def place_in_rectangle(
    width: float,
    height: float,
    spacing: float,
    pattern: Pattern | str | None = Pattern.GRID,
    *,
    max_rows: int | None = None,
) -> list[Point]:
    """Full-density lattice for a rectangular bed."""
    if not is_usable_spacing(spacing) or width <= 0 or height <= 0:
        return []
    return generate_pattern(pattern, width, height, spacing, max_rows=max_rows)


def place_in_circle(
    radius: float,
    spacing: float,
    pattern: Pattern | str | None = Pattern.GRID,
    *,
    max_rows: int | None = None,
) -> list[Point]:
    """
    Lattice over the bed's bounding square, clipped to the disc.

    A plant is kept only when its whole footprint is on the disc: distance from center
    <= radius - spacing / 2. With auto, grid and hexagonal are compared after clipping.
    """
    if not is_usable_spacing(spacing) or radius <= 0:
        return []
    chosen = parse_pattern(pattern)
    if chosen is Pattern.AUTO:
        grid = place_in_circle(radius, spacing, Pattern.GRID, max_rows=max_rows)
        hexagonal = place_in_circle(radius, spacing, Pattern.HEXAGONAL, max_rows=max_rows)
        return hexagonal if len(hexagonal) > len(grid) else grid
    diameter = 2.0 * radius
    lattice = generate_pattern(chosen, diameter, diameter, spacing, max_rows=max_rows)
    return [p for p in lattice if in_circle(p, radius, spacing)]


def place_in_container(container: Container, spacing: float, pattern: Pattern | str | None = Pattern.GRID) -> list[Point]:
    """Full-density placement for either bed shape."""
    if isinstance(container, Circle):
        return place_in_circle(container.radius, spacing, pattern)
    return place_in_rectangle(container.width, container.height, spacing, pattern)


def place_specific_count(
    container: Container,
    spacing: float,
    count: int,
    pattern: Pattern | str | None = Pattern.GRID,
) -> list[Point]:
    """First min(count, capacity) positions of the full-density placement."""
    return resolve_fill(place_in_container(container, spacing, pattern), FillMethod.COUNT, count)


def place_in_rows(
    container: Container,
    spacing: float,
    rows: int,
    pattern: Pattern | str | None = Pattern.GRID,
) -> list[Point]:
    """
    Placement with at most `rows` lattice rows, re-centered for the reduced block.

    Circular beds bound the rows of the diameter-square lattice, then clip to the disc.
    """
    n = as_count(rows)
    if n == 0 or not is_usable_spacing(spacing):
        return []
    if isinstance(container, Circle):
        return place_in_circle(container.radius, spacing, pattern, max_rows=n)
    return place_in_rectangle(container.width, container.height, spacing, pattern, max_rows=n)


def place_by_percentage(
    container: Container,
    spacing: float,
    percentage: float,
    pattern: Pattern | str | None = Pattern.GRID,
) -> list[Point]:
    """First floor(capacity * percentage / 100) positions of the full-density placement."""
    return resolve_fill(place_in_container(container, spacing, pattern), FillMethod.PERCENTAGE, percentage)


def candidates_for_method(
    container: Container,
    spacing: float,
    pattern: Pattern | str | None,
    method: FillMethod | str | None,
    value: float | int | None = None,
) -> list[Point]:
    """Untruncated candidates a fill method starts from (rows bound the generator)."""
    if parse_fill_method(method) is FillMethod.ROWS:
        return place_in_rows(container, spacing, as_count(value), pattern)
    return place_in_container(container, spacing, pattern)


def place(
    container: Container,
    spacing: float,
    pattern: Pattern | str | None = Pattern.GRID,
    method: FillMethod | str | None = FillMethod.AUTO,
    value: float | int | None = None,
) -> list[Point]:
    """Single-group placement with a fill method and no other plants in the bed."""
    candidates = candidates_for_method(container, spacing, pattern, method, value)
    return resolve_fill(candidates, method, value)

