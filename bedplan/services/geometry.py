"""
Bed geometry: points, containers and containment predicates.

Coordinates are in bed units (inches in the planner UI) relative to the bed center.
Canvas convention: +x right, +y down, so the "top" of a bed is its most negative y.

Containers:
- Rectangle(width, height): valid region [-w/2, w/2] × [-h/2, h/2].
- Circle(radius): plant centers must keep a half-spacing margin from the rim so the
  plant footprint stays on the disc, not merely its center.

Rotation of a bed is applied by the renderer only and never reaches this module.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

# Tolerance for float comparisons at region edges
EPSILON = 1e-9


@dataclass(frozen=True)
class Point:
    """Plant center, bed-centered coordinates."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def radius(self) -> float:
        """Distance from bed center."""
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class Rectangle:
    """Rectangular bed."""

    width: float
    height: float

    @property
    def kind(self) -> str:
        return "rectangle"

    @property
    def is_horizontal(self) -> bool:
        """Wider than tall: regions are stacked as horizontal strips."""
        return self.width > self.height

    def bounds(self) -> Bounds:
        return Bounds(-self.width / 2, self.width / 2, -self.height / 2, self.height / 2)


@dataclass(frozen=True)
class Circle:
    """Circular bed."""

    radius: float

    @property
    def kind(self) -> str:
        return "circle"

    @property
    def diameter(self) -> float:
        return 2.0 * self.radius

    def bounds(self) -> Bounds:
        return Bounds(-self.radius, self.radius, -self.radius, self.radius)


Container = Union[Rectangle, Circle]


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned sub-region (x_min, x_max, y_min, y_max) in bed coordinates."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return max(0.0, self.x_max - self.x_min)

    @property
    def height(self) -> float:
        return max(0.0, self.y_max - self.y_min)

    @classmethod
    def centered(cls, width: float, height: float) -> Bounds:
        """Bounds of a width × height area centered on the origin."""
        return cls(-width / 2, width / 2, -height / 2, height / 2)


def in_rectangle(point: Point, width: float, height: float) -> bool:
    """True iff the point lies inside a bed-centered width × height rectangle."""
    return abs(point.x) <= width / 2 + EPSILON and abs(point.y) <= height / 2 + EPSILON


def in_circle(point: Point, radius: float, spacing: float) -> bool:
    """True iff a plant of this spacing fits on the disc (center within radius - spacing/2)."""
    return point.radius() <= radius - spacing / 2 + EPSILON


def in_bounds(point: Point, bounds: Bounds) -> bool:
    """True iff the point lies inside the sub-region (edges inclusive)."""
    return (
        bounds.x_min - EPSILON <= point.x <= bounds.x_max + EPSILON
        and bounds.y_min - EPSILON <= point.y <= bounds.y_max + EPSILON
    )


def in_container(point: Point, container: Container, spacing: float) -> bool:
    """Dispatch containment on the container variant."""
    if isinstance(container, Circle):
        return in_circle(point, container.radius, spacing)
    return in_rectangle(point, container.width, container.height)


def is_usable_spacing(spacing: float) -> bool:
    """Spacing must be a finite positive number; anything else places nothing."""
    try:
        value = float(spacing)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0
