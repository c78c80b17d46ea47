"""
Lattice generators for plant candidates (rectangular lattices and concentric rings).

- Grid: rows = floor(h / spacing), cols = floor(w / spacing); lattice centered on both
  axes, emitted row-major starting from the most negative (top-left) coordinate.
- Hexagonal: row pitch = spacing * sqrt(3) / 2; odd rows shifted by spacing / 2 (brick
  pattern); per-row column count floor((w - offset) / spacing). Row block centered
  vertically, even rows centered horizontally, odd rows following their shift.
- Auto: whichever of grid / hexagonal yields more points (grid on ties).
- Rings: concentric circles of plants between two radii, used for annulus regions.

Emission order matters: count, percentage and desired-quantity truncation always keep a
prefix of it. Bounding rows (or columns) is not a slice: it changes centering, so the
generator takes the bound directly.

Grid and hexagonal generators accept optional sub-bounds (a strip of a bed) and then
confine and center the lattice inside those bounds instead of the whole bed.
"""

from __future__ import annotations

import math
from enum import Enum

from bedplan.services.geometry import EPSILON, Bounds, Point, is_usable_spacing

HEX_ROW_FACTOR = math.sqrt(3) / 2


class Pattern(str, Enum):
    """Lattice strategy for candidate positions."""

    GRID = "grid"
    HEXAGONAL = "hexagonal"
    AUTO = "auto"


def parse_pattern(value: str | Pattern | None, default: Pattern = Pattern.GRID) -> Pattern:
    """Pattern from its name; unknown or missing names fall back to default."""
    if isinstance(value, Pattern):
        return value
    if value is None:
        return default
    try:
        return Pattern(str(value).strip().lower())
    except ValueError:
        return default


def _line_count(length: float, pitch: float, limit: int | None = None) -> int:
    """How many lattice lines of this pitch fit along length, optionally bounded."""
    if pitch <= 0 or not math.isfinite(length) or length <= 0:
        return 0
    n = int(math.floor(length / pitch + EPSILON))
    if limit is not None:
        n = min(n, max(0, int(limit)))
    return n


def _area(width: float, height: float, bounds: Bounds | None) -> Bounds:
    return bounds if bounds is not None else Bounds.centered(width, height)


def grid_pattern(
    width: float,
    height: float,
    spacing: float,
    bounds: Bounds | None = None,
    *,
    max_rows: int | None = None,
    max_cols: int | None = None,
) -> list[Point]:
    """
    Regular row/column lattice centered in the bed (or in bounds when given).

    Points are emitted row by row from the most negative y, each row from the most
    negative x.
    """
    if not is_usable_spacing(spacing):
        return []
    area = _area(width, height, bounds)
    w, h = area.width, area.height
    cols = _line_count(w, spacing, max_cols)
    rows = _line_count(h, spacing, max_rows)
    if rows == 0 or cols == 0:
        return []

    offset_x = (w - (cols - 1) * spacing) / 2
    offset_y = (h - (rows - 1) * spacing) / 2
    points: list[Point] = []
    for row in range(rows):
        y = area.y_min + offset_y + row * spacing
        for col in range(cols):
            x = area.x_min + offset_x + col * spacing
            points.append(Point(x, y))
    return points


def hexagonal_pattern(
    width: float,
    height: float,
    spacing: float,
    bounds: Bounds | None = None,
    *,
    max_rows: int | None = None,
    max_cols: int | None = None,
) -> list[Point]:
    """
    Offset-row (brick) lattice, roughly 15% denser than grid on large beds.

    Odd rows are shifted by half a spacing and may hold one column less than even rows.
    """
    if not is_usable_spacing(spacing):
        return []
    area = _area(width, height, bounds)
    w, h = area.width, area.height
    pitch = spacing * HEX_ROW_FACTOR
    rows = _line_count(h, pitch, max_rows)
    even_cols = _line_count(w, spacing, max_cols)
    if rows == 0 or even_cols == 0:
        return []

    # Centered on the even rows; odd rows sit exactly half a spacing to the right
    offset_x = (w - (even_cols - 1) * spacing) / 2
    offset_y = (h - (rows - 1) * pitch) / 2
    points: list[Point] = []
    for row in range(rows):
        y = area.y_min + offset_y + row * pitch
        shift = (row % 2) * (spacing / 2)
        cols = _line_count(w - shift, spacing, max_cols)
        for col in range(cols):
            x = area.x_min + offset_x + shift + col * spacing
            points.append(Point(x, y))
    return points


def best_pattern(
    width: float,
    height: float,
    spacing: float,
    bounds: Bounds | None = None,
    *,
    max_rows: int | None = None,
    max_cols: int | None = None,
) -> list[Point]:
    """Generate both lattices and keep the one with more points (grid on ties)."""
    grid = grid_pattern(width, height, spacing, bounds, max_rows=max_rows, max_cols=max_cols)
    hexagonal = hexagonal_pattern(width, height, spacing, bounds, max_rows=max_rows, max_cols=max_cols)
    return hexagonal if len(hexagonal) > len(grid) else grid


def generate_pattern(
    pattern: Pattern | str | None,
    width: float,
    height: float,
    spacing: float,
    bounds: Bounds | None = None,
    *,
    max_rows: int | None = None,
    max_cols: int | None = None,
) -> list[Point]:
    """Dispatch to grid, hexagonal or auto-selected lattice."""
    chosen = parse_pattern(pattern)
    if chosen is Pattern.HEXAGONAL:
        return hexagonal_pattern(width, height, spacing, bounds, max_rows=max_rows, max_cols=max_cols)
    if chosen is Pattern.AUTO:
        return best_pattern(width, height, spacing, bounds, max_rows=max_rows, max_cols=max_cols)
    return grid_pattern(width, height, spacing, bounds, max_rows=max_rows, max_cols=max_cols)


def concentric_rings(
    inner_radius: float,
    outer_radius: float,
    spacing: float,
    *,
    max_rings: int | None = None,
) -> list[Point]:
    """
    Rings of plants between inner_radius and outer_radius, innermost ring first.

    Ring count = max(1, floor(ring_width / spacing)), optionally bounded. Radii step by
    ring_width / (rings + 1) so no ring touches either edge. Each ring holds
    max(1, floor(circumference / spacing)) plants at angles 2πi/n.
    """
    if not is_usable_spacing(spacing):
        return []
    inner = max(0.0, inner_radius)
    ring_width = outer_radius - inner
    if not math.isfinite(ring_width) or ring_width <= EPSILON:
        return []
    rings = max(1, _line_count(ring_width, spacing))
    if max_rings is not None:
        rings = min(rings, max(0, int(max_rings)))
    step = ring_width / (rings + 1)

    points: list[Point] = []
    for k in range(rings):
        r = inner + step * (k + 1)
        n = max(1, int(math.floor(2 * math.pi * r / spacing + EPSILON)))
        for i in range(n):
            angle = 2 * math.pi * i / n
            points.append(Point(r * math.cos(angle), r * math.sin(angle)))
    return points
