"""Tests for whole-bed placement: fill methods, circle clipping, degenerate input."""

from __future__ import annotations

import math

import pytest

from bedplan.services.geometry import Circle, Point, Rectangle, in_circle, in_rectangle
from bedplan.services.patterns import Pattern, grid_pattern
from bedplan.services.placement import (
    FillMethod,
    as_count,
    parse_fill_method,
    percentage_count,
    place,
    place_by_percentage,
    place_in_circle,
    place_in_container,
    place_in_rectangle,
    place_in_rows,
    place_specific_count,
    resolve_fill,
)

BED = Rectangle(48.0, 96.0)


def _min_self_distance(points) -> float:
    best = math.inf
    for i, p in enumerate(points):
        for q in points[i + 1 :]:
            best = min(best, p.distance_to(q))
    return best


# --- Rectangle / circle ---


def test_rectangle_matches_grid_lattice() -> None:
    points = place_in_rectangle(48.0, 96.0, 12.0)
    assert points == grid_pattern(48.0, 96.0, 12.0)
    assert len(points) == 32


def test_circle_clips_to_margin() -> None:
    """Radius 24, spacing 6: fewer than the 64 lattice points; every center within 21."""
    points = place_in_circle(24.0, 6.0)
    assert 0 < len(points) < 64
    for p in points:
        assert p.radius() <= 21.0 + 1e-9
        assert in_circle(p, 24.0, 6.0)


def test_circle_auto_keeps_larger_clipped_lattice() -> None:
    grid = place_in_circle(30.0, 5.0, Pattern.GRID)
    hexagonal = place_in_circle(30.0, 5.0, Pattern.HEXAGONAL)
    auto = place_in_circle(30.0, 5.0, Pattern.AUTO)
    assert len(auto) == max(len(grid), len(hexagonal))


def test_circle_too_small_for_one_plant() -> None:
    assert place_in_circle(2.0, 6.0) == []


@pytest.mark.parametrize("spacing", [0.0, -6.0, math.nan, math.inf])
def test_degenerate_spacing_places_nothing(spacing: float) -> None:
    assert place_in_container(BED, spacing) == []
    assert place_in_container(Circle(24.0), spacing) == []
    assert place_in_rows(BED, spacing, 2) == []


def test_zero_size_bed_places_nothing() -> None:
    assert place_in_rectangle(0.0, 96.0, 12.0) == []
    assert place_in_circle(0.0, 6.0) == []


# --- Fill methods ---


def test_specific_count_is_prefix() -> None:
    full = place_in_container(BED, 12.0)
    assert place_specific_count(BED, 12.0, 5) == full[:5]
    assert place_specific_count(BED, 12.0, 1000) == full
    assert place_specific_count(BED, 12.0, -3) == []


def test_percentage_floors() -> None:
    """32 candidates: 50% -> 16, 33% -> 10, over 100% clamps, negative gives nothing."""
    full = place_in_container(BED, 12.0)
    assert place_by_percentage(BED, 12.0, 50) == full[:16]
    assert len(place_by_percentage(BED, 12.0, 33)) == 10
    assert len(place_by_percentage(BED, 12.0, 150)) == 32
    assert place_by_percentage(BED, 12.0, -10) == []


def test_percentage_count_uses_ideal_count() -> None:
    candidates = [Point(float(i), 0.0) for i in range(10)]
    assert percentage_count(32, 25) == 8
    assert resolve_fill(candidates, FillMethod.PERCENTAGE, 25, ideal_count=32) == candidates[:8]
    assert resolve_fill(candidates, FillMethod.PERCENTAGE, 100, ideal_count=32) == candidates


def test_rows_rectangle_recenters() -> None:
    """Two rows of a 48×96 bed sit around the middle, not at the top."""
    points = place_in_rows(BED, 12.0, 2)
    assert len(points) == 8
    assert {round(p.y, 6) for p in points} == {-6.0, 6.0}
    assert points != place_in_container(BED, 12.0)[:8]


def test_rows_circle_bounds_lattice_rows() -> None:
    """Radius 24, spacing 6, two rows: centered at y = ±3, clipped to |x| <= 15."""
    points = place_in_rows(Circle(24.0), 6.0, 2)
    assert len(points) == 12
    assert {round(p.y, 6) for p in points} == {-3.0, 3.0}
    assert sorted({round(p.x, 6) for p in points}) == pytest.approx([-15.0, -9.0, -3.0, 3.0, 9.0, 15.0])
    assert all(in_circle(p, 24.0, 6.0) for p in points)


@pytest.mark.parametrize("pattern", [Pattern.GRID, Pattern.HEXAGONAL, Pattern.AUTO])
@pytest.mark.parametrize("rows", [1, 2, 4, 50])
def test_rows_circle_keeps_spacing(pattern: Pattern, rows: int) -> None:
    points = place_in_rows(Circle(24.0), 6.0, rows, pattern)
    assert points
    assert len({round(p.y, 6) for p in points}) <= rows
    assert _min_self_distance(points) >= 6.0 - 1e-9
    assert all(in_circle(p, 24.0, 6.0) for p in points)


def test_rows_circle_follows_pattern() -> None:
    grid = place_in_rows(Circle(24.0), 6.0, 2, Pattern.GRID)
    hexagonal = place_in_rows(Circle(24.0), 6.0, 2, Pattern.HEXAGONAL)
    assert grid != hexagonal


def test_circle_hexagonal_keeps_spacing() -> None:
    points = place_in_circle(30.0, 5.0, Pattern.HEXAGONAL)
    assert _min_self_distance(points) >= 5.0 - 1e-9


def test_rows_zero_places_nothing() -> None:
    assert place_in_rows(BED, 12.0, 0) == []


def test_resolve_fill_auto_and_rows_keep_all() -> None:
    candidates = place_in_container(BED, 12.0)
    assert resolve_fill(candidates, FillMethod.AUTO) == candidates
    assert resolve_fill(candidates, "rows", 1) == candidates
    assert resolve_fill(candidates, None) == candidates


def test_place_dispatches_fill_method() -> None:
    assert len(place(BED, 12.0, Pattern.GRID, "count", 7)) == 7
    assert len(place(BED, 12.0, Pattern.GRID, "percentage", 25)) == 8
    assert len(place(BED, 12.0, Pattern.GRID, "rows", 3)) == 12
    assert len(place(BED, 12.0, Pattern.GRID, "auto")) == 32


def test_placement_stays_inside_bed() -> None:
    for spacing in (5.0, 7.5, 12.0, 30.0):
        for pattern in (Pattern.GRID, Pattern.HEXAGONAL):
            for p in place_in_container(Rectangle(50.0, 30.0), spacing, pattern):
                assert in_rectangle(p, 50.0, 30.0)


# --- Parsing ---


def test_parse_fill_method() -> None:
    assert parse_fill_method("COUNT") is FillMethod.COUNT
    assert parse_fill_method("everything") is FillMethod.AUTO
    assert parse_fill_method(None) is FillMethod.AUTO


@pytest.mark.parametrize(
    ("value", "expected"),
    [(5, 5), (5.9, 5), (-2, 0), (math.nan, 0), (math.inf, 0), (None, 0), ("3", 3), ("x", 0)],
)
def test_as_count(value, expected: int) -> None:
    assert as_count(value) == expected
