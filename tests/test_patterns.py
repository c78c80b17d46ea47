"""Tests for lattice generators: counts, centering, emission order, hexagonal offset, rings.

Coordinates are bed-centered, +y down (first row is the most negative y).
"""

from __future__ import annotations

import math

import pytest

from bedplan.services.geometry import Bounds, in_bounds, in_rectangle
from bedplan.services.patterns import (
    HEX_ROW_FACTOR,
    Pattern,
    best_pattern,
    concentric_rings,
    generate_pattern,
    grid_pattern,
    hexagonal_pattern,
    parse_pattern,
)


def _rows(points) -> dict[float, list[float]]:
    by_y: dict[float, list[float]] = {}
    for p in points:
        by_y.setdefault(round(p.y, 6), []).append(p.x)
    return by_y


def _min_self_distance(points) -> float:
    best = math.inf
    for i, p in enumerate(points):
        for q in points[i + 1 :]:
            best = min(best, p.distance_to(q))
    return best


# --- Grid ---


def test_grid_48_by_96_spacing_12() -> None:
    """4 columns × 8 rows = 32 points, all inside [-24, 24] × [-48, 48]."""
    points = grid_pattern(48.0, 96.0, 12.0)
    assert len(points) == 32
    assert len(_rows(points)) == 8
    for p in points:
        assert in_rectangle(p, 48.0, 96.0)
        assert -24.0 <= p.x <= 24.0
        assert -48.0 <= p.y <= 48.0


def test_grid_centered_row_major_from_top_left() -> None:
    """Leftover space is split on both sides; order is row by row, left to right."""
    points = grid_pattern(48.0, 96.0, 12.0)
    assert points[0].x == pytest.approx(-18.0)
    assert points[0].y == pytest.approx(-42.0)
    assert points[1].x == pytest.approx(-6.0)
    assert points[1].y == pytest.approx(-42.0)
    assert points[4].x == pytest.approx(-18.0)
    assert points[4].y == pytest.approx(-30.0)
    assert points[-1].x == pytest.approx(18.0)
    assert points[-1].y == pytest.approx(42.0)


def test_grid_bounded_rows_recentered() -> None:
    """Bounding rows re-centers the block instead of keeping the top rows."""
    points = grid_pattern(48.0, 96.0, 12.0, max_rows=2)
    assert len(points) == 8
    assert sorted(_rows(points)) == pytest.approx([-6.0, 6.0])


def test_grid_inside_strip_bounds() -> None:
    """With sub-bounds the lattice is confined to and centered in the strip."""
    strip = Bounds(-24.0, 24.0, -48.0, 0.0)
    points = grid_pattern(48.0, 96.0, 12.0, strip)
    assert len(points) == 16
    assert sorted(_rows(points)) == pytest.approx([-42.0, -30.0, -18.0, -6.0])
    assert all(in_bounds(p, strip) for p in points)


@pytest.mark.parametrize("spacing", [0.0, -12.0, math.nan])
def test_grid_degenerate_spacing_empty(spacing: float) -> None:
    assert grid_pattern(48.0, 96.0, spacing) == []


def test_grid_spacing_larger_than_bed_empty() -> None:
    assert grid_pattern(10.0, 10.0, 12.0) == []


# --- Hexagonal ---


def test_hexagonal_row_pitch_and_offset() -> None:
    """Rows are spacing·√3/2 apart; odd rows are shifted and share no x with even rows."""
    points = hexagonal_pattern(48.0, 96.0, 12.0)
    rows = _rows(points)
    ys = sorted(rows)
    assert len(ys) == math.floor(96.0 / (12.0 * HEX_ROW_FACTOR))
    for a, b in zip(ys, ys[1:]):
        assert b - a == pytest.approx(12.0 * HEX_ROW_FACTOR)
    even_xs = {round(x, 6) for x in rows[ys[0]]}
    odd_xs = {round(x, 6) for x in rows[ys[1]]}
    assert even_xs.isdisjoint(odd_xs)
    for xs in rows.values():
        xs_sorted = sorted(xs)
        for a, b in zip(xs_sorted, xs_sorted[1:]):
            assert b - a == pytest.approx(12.0)


def test_hexagonal_odd_rows_offset_half_spacing() -> None:
    """48×96 at 12: even rows start at -18, odd rows at -12."""
    rows = _rows(hexagonal_pattern(48.0, 96.0, 12.0))
    ys = sorted(rows)
    assert sorted(rows[ys[0]]) == pytest.approx([-18.0, -6.0, 6.0, 18.0])
    assert sorted(rows[ys[1]]) == pytest.approx([-12.0, 0.0, 12.0])
    for even, odd in zip(ys[::2], ys[1::2]):
        assert min(rows[odd]) - min(rows[even]) == pytest.approx(6.0)


@pytest.mark.parametrize(
    ("width", "height", "spacing", "bounds"),
    [
        (48.0, 96.0, 12.0, None),
        (50.0, 70.0, 7.0, None),
        (96.0, 96.0, 6.0, None),
        (60.0, 60.0, 10.0, None),
        (96.0, 48.0, 12.0, Bounds(-48.0, 48.0, -24.0, 0.0)),
        (48.0, 96.0, 6.0, Bounds(-24.0, 2.5, -48.0, 48.0)),
    ],
)
def test_hexagonal_keeps_spacing_between_neighbours(width, height, spacing, bounds) -> None:
    """No two plants of the lattice are closer than spacing, and all stay in their area."""
    points = hexagonal_pattern(width, height, spacing, bounds)
    assert len(points) > 1
    assert _min_self_distance(points) >= spacing - 1e-9
    area = bounds if bounds is not None else Bounds.centered(width, height)
    assert all(in_bounds(p, area) for p in points)


def test_hexagonal_inside_rectangle() -> None:
    for p in hexagonal_pattern(50.0, 70.0, 7.0):
        assert in_rectangle(p, 50.0, 70.0)


@pytest.mark.parametrize(
    ("width", "height", "spacing"),
    [(48.0, 96.0, 12.0), (96.0, 96.0, 6.0), (100.0, 100.0, 7.0)],
)
def test_hexagonal_at_least_grid_on_tall_beds(width: float, height: float, spacing: float) -> None:
    """height >= spacing·√3: hexagonal holds at least as many plants as grid."""
    assert height >= spacing * math.sqrt(3)
    assert len(hexagonal_pattern(width, height, spacing)) >= len(grid_pattern(width, height, spacing))


def test_hexagonal_denser_on_large_bed() -> None:
    """96×96 at spacing 6: 279 hexagonal vs 256 grid."""
    assert len(grid_pattern(96.0, 96.0, 6.0)) == 256
    assert len(hexagonal_pattern(96.0, 96.0, 6.0)) == 279


# --- Selection / dispatch ---


def test_best_pattern_prefers_grid_on_ties() -> None:
    """48×96 at 12: both lattices hold 32; grid is kept."""
    assert best_pattern(48.0, 96.0, 12.0) == grid_pattern(48.0, 96.0, 12.0)


def test_best_pattern_picks_hexagonal_when_denser() -> None:
    assert best_pattern(96.0, 96.0, 6.0) == hexagonal_pattern(96.0, 96.0, 6.0)


def test_generate_pattern_dispatch() -> None:
    assert generate_pattern(Pattern.GRID, 48.0, 96.0, 12.0) == grid_pattern(48.0, 96.0, 12.0)
    assert generate_pattern("hexagonal", 48.0, 96.0, 12.0) == hexagonal_pattern(48.0, 96.0, 12.0)
    assert generate_pattern(None, 48.0, 96.0, 12.0) == grid_pattern(48.0, 96.0, 12.0)
    assert generate_pattern("auto", 96.0, 96.0, 6.0) == hexagonal_pattern(96.0, 96.0, 6.0)


def test_parse_pattern_fallback() -> None:
    assert parse_pattern("Hexagonal") is Pattern.HEXAGONAL
    assert parse_pattern("triangular") is Pattern.GRID
    assert parse_pattern(None, default=Pattern.AUTO) is Pattern.AUTO


# --- Rings ---


def test_concentric_rings_full_disc() -> None:
    """Radius 24, spacing 6: 4 rings at 4.8, 9.6, 14.4, 19.2 holding 5 + 10 + 15 + 20."""
    points = concentric_rings(0.0, 24.0, 6.0)
    assert len(points) == 50
    radii = sorted({round(p.radius(), 6) for p in points})
    assert radii == pytest.approx([4.8, 9.6, 14.4, 19.2])


def test_concentric_rings_never_touch_edges() -> None:
    points = concentric_rings(12.0, 24.0, 6.0)
    for p in points:
        assert 12.0 < p.radius() < 24.0


def test_concentric_rings_bounded() -> None:
    """Two rings spread over the full width: radii 8 and 16."""
    points = concentric_rings(0.0, 24.0, 6.0, max_rings=2)
    radii = sorted({round(p.radius(), 6) for p in points})
    assert radii == pytest.approx([8.0, 16.0])


def test_concentric_rings_equal_angles() -> None:
    points = concentric_rings(0.0, 12.0, 6.0, max_rings=1)
    n = len(points)
    assert n == math.floor(2 * math.pi * 6.0 / 6.0)
    for i, p in enumerate(points):
        expected = 2 * math.pi * i / n
        assert math.atan2(p.y, p.x) % (2 * math.pi) == pytest.approx(expected % (2 * math.pi), abs=1e-9)


def test_concentric_rings_degenerate() -> None:
    assert concentric_rings(10.0, 10.0, 6.0) == []
    assert concentric_rings(0.0, 24.0, 0.0) == []
