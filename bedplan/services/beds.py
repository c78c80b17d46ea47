"""
Beds and their plant groups: full recomputation after every change.

A Bed is immutable. Every edit (add / remove / reorder a group, change spacing or
quantity, drag a divider, resize) returns a new Bed whose groups were all recomputed
in group order. There is no incremental update: the same geometry, spacings,
boundaries and group order always give the same positions.

Layouts:
- regions (default): each group owns one slice of the bed (see regions.py);
  max_quantity = plants at full density in that slice.
- layered: groups share the whole bed in order; each group avoids every earlier group
  by max(spacing, earlier spacing). max_quantity = full-density plants that survive
  the earlier layers.

desired_quantity None means "not chosen yet" and fills the group to max_quantity.
Otherwise positions hold min(desired_quantity, max_quantity) plants; the requested value
itself is kept so a region that shrinks and grows back restores it.

UI-only fields (id, name, x, y, rotation, group name and color) are carried through and
never read.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Literal

from bedplan.services.conflicts import PlacedGroup, filter_layered
from bedplan.services.geometry import Container, Point, Rectangle
from bedplan.services.placement import (
    FillMethod,
    as_count,
    candidates_for_method,
    parse_fill_method,
    place_in_container,
    resolve_fill,
)
from bedplan.services.regions import (
    RegionBounds,
    move_boundary,
    normalize_boundaries,
    partition_for,
    place_in_partition,
    region_bounds,
)
from bedplan.settings import DEFAULT_SETTINGS, PlacementSettings

logger = logging.getLogger(__name__)

Layout = Literal["regions", "layered"]

# Marks an update_plant_group argument that was not passed
_KEEP = object()


@dataclass(frozen=True)
class PlantGroup:
    """Plants of one kind sharing a spacing requirement."""

    spacing: float
    desired_quantity: int | None = None
    name: str = ""
    color: str | None = None
    fill_method: FillMethod = FillMethod.AUTO
    fill_value: float | None = None
    max_quantity: int = 0
    positions: tuple[Point, ...] = ()


@dataclass(frozen=True)
class Bed:
    """A bed shape, its ordered plant groups and the region boundaries between them."""

    container: Container
    plant_groups: tuple[PlantGroup, ...] = ()
    region_boundaries: tuple[float, ...] | None = None
    layout: Layout = "regions"
    id: str | int | None = None
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0


def _desired_limit(group: PlantGroup, max_quantity: int) -> int:
    if group.desired_quantity is None:
        return max_quantity
    return min(as_count(group.desired_quantity), max_quantity)


def _with_placement(group: PlantGroup, max_quantity: int, chosen: Sequence[Point]) -> PlantGroup:
    desired = max_quantity if group.desired_quantity is None else group.desired_quantity
    limit = _desired_limit(group, max_quantity)
    return replace(
        group,
        desired_quantity=desired,
        max_quantity=max_quantity,
        positions=tuple(chosen[:limit]),
    )


def _recompute_regions(bed: Bed, settings: PlacementSettings) -> Bed:
    groups = bed.plant_groups
    count = len(groups)
    boundaries = normalize_boundaries(bed.region_boundaries, count, settings.boundary_min, settings.boundary_max)
    partition = partition_for(bed.container)

    updated: list[PlantGroup] = []
    for index, group in enumerate(groups):
        region = region_bounds(index, count, boundaries)
        full = partition.place(region, group.spacing)
        method = parse_fill_method(group.fill_method)
        if method is FillMethod.ROWS:
            chosen = place_in_partition(partition, group.spacing, region, method, group.fill_value)
        else:
            chosen = resolve_fill(full, method, group.fill_value)
        updated.append(_with_placement(group, len(full), chosen))

    logger.debug(
        "Recomputed %s bed %r: %d groups, boundaries=%s, plants=%s",
        partition.kind,
        bed.name,
        count,
        boundaries,
        [len(g.positions) for g in updated],
    )
    return replace(bed, plant_groups=tuple(updated), region_boundaries=tuple(boundaries))


def _recompute_layered(bed: Bed, settings: PlacementSettings) -> Bed:
    pattern = settings.default_pattern
    earlier: list[PlacedGroup] = []
    updated: list[PlantGroup] = []
    for group in bed.plant_groups:
        full = filter_layered(place_in_container(bed.container, group.spacing, pattern), group.spacing, earlier)
        candidates = candidates_for_method(bed.container, group.spacing, pattern, group.fill_method, group.fill_value)
        available = filter_layered(candidates, group.spacing, earlier)
        chosen = resolve_fill(available, group.fill_method, group.fill_value, ideal_count=len(candidates))
        placed = _with_placement(group, len(full), chosen)
        updated.append(placed)
        earlier.append(PlacedGroup(spacing=placed.spacing, positions=placed.positions))

    logger.debug(
        "Recomputed layered bed %r: %d groups, plants=%s",
        bed.name,
        len(updated),
        [len(g.positions) for g in updated],
    )
    return replace(bed, plant_groups=tuple(updated))


def recompute_bed(bed: Bed, settings: PlacementSettings | None = None) -> Bed:
    """Recompute every group of a bed, in group order, for its layout."""
    settings = settings or DEFAULT_SETTINGS
    if bed.layout == "layered":
        return _recompute_layered(bed, settings)
    return _recompute_regions(bed, settings)


def recompute_bed_layered(bed: Bed, settings: PlacementSettings | None = None) -> Bed:
    """Ordered, region-independent recomputation regardless of bed.layout."""
    return _recompute_layered(bed, settings or DEFAULT_SETTINGS)


def recompute_garden(beds: Sequence[Bed], settings: PlacementSettings | None = None) -> list[Bed]:
    """Beds share nothing, so each is recomputed on its own."""
    return [recompute_bed(bed, settings) for bed in beds]


# --- Group editing ---


def _valid_index(bed: Bed, index: int) -> bool:
    return 0 <= index < len(bed.plant_groups)


def add_plant_group(bed: Bed, group: PlantGroup, settings: PlacementSettings | None = None) -> Bed:
    """Append a group; regions are re-divided equally."""
    groups = bed.plant_groups + (group,)
    return recompute_bed(replace(bed, plant_groups=groups, region_boundaries=None), settings)


def remove_plant_group(bed: Bed, index: int, settings: PlacementSettings | None = None) -> Bed:
    """Delete a group; regions are re-divided equally."""
    if not _valid_index(bed, index):
        return recompute_bed(bed, settings)
    groups = bed.plant_groups[:index] + bed.plant_groups[index + 1 :]
    return recompute_bed(replace(bed, plant_groups=groups, region_boundaries=None), settings)


def reorder_plant_group(bed: Bed, from_index: int, to_index: int, settings: PlacementSettings | None = None) -> Bed:
    """Move a group to another position; boundaries stay, so groups swap regions."""
    if not _valid_index(bed, from_index):
        return recompute_bed(bed, settings)
    groups = list(bed.plant_groups)
    moved = groups.pop(from_index)
    target = min(max(0, to_index), len(groups))
    groups.insert(target, moved)
    return recompute_bed(replace(bed, plant_groups=tuple(groups)), settings)


def update_plant_group(
    bed: Bed,
    index: int,
    *,
    spacing: float | None = None,
    name: str | None = None,
    color: str | None | object = _KEEP,
    fill_method: FillMethod | str | None = None,
    fill_value: float | None | object = _KEEP,
    settings: PlacementSettings | None = None,
) -> Bed:
    """
    Edit a group's properties; its requested quantity is kept.

    Omitted arguments leave the field as is. color and fill_value may be cleared
    by passing None.
    """
    if not _valid_index(bed, index):
        return recompute_bed(bed, settings)
    group = bed.plant_groups[index]
    changes: dict = {}
    if spacing is not None:
        changes["spacing"] = spacing
    if name is not None:
        changes["name"] = name
    if color is not _KEEP:
        changes["color"] = color
    if fill_method is not None:
        changes["fill_method"] = parse_fill_method(fill_method)
    if fill_value is not _KEEP:
        changes["fill_value"] = fill_value
    groups = list(bed.plant_groups)
    groups[index] = replace(group, **changes)
    return recompute_bed(replace(bed, plant_groups=tuple(groups)), settings)


def set_desired_quantity(bed: Bed, index: int, quantity: int, settings: PlacementSettings | None = None) -> Bed:
    """Request a plant count for a group, clamped to [0, max_quantity]."""
    current = recompute_bed(bed, settings)
    if not _valid_index(current, index):
        return current
    group = current.plant_groups[index]
    clamped = min(as_count(quantity), group.max_quantity)
    if clamped != quantity:
        logger.debug("Quantity %s for group %d clamped to %d", quantity, index, clamped)
    groups = list(current.plant_groups)
    groups[index] = replace(group, desired_quantity=clamped)
    return recompute_bed(replace(current, plant_groups=tuple(groups)), settings)


def drag_divider(bed: Bed, index: int, dx: float, dy: float, settings: PlacementSettings | None = None) -> Bed:
    """Move divider `index` by a displacement in bed units (radial for circles)."""
    settings = settings or DEFAULT_SETTINGS
    delta = partition_for(bed.container).drag_fraction(dx, dy)
    boundaries = move_boundary(
        bed.region_boundaries,
        index,
        delta,
        len(bed.plant_groups),
        settings.boundary_min,
        settings.boundary_max,
    )
    return recompute_bed(replace(bed, region_boundaries=tuple(boundaries)), settings)


def resize_bed(bed: Bed, container: Container, settings: PlacementSettings | None = None) -> Bed:
    """Replace the bed shape or dimensions, keeping groups and boundaries."""
    return recompute_bed(replace(bed, container=container), settings)


# --- Preview ---


@dataclass(frozen=True)
class GroupPreview:
    """What adding (or editing) a group would place, assuming an equal division."""

    positions: tuple[Point, ...]
    region: RegionBounds
    region_percent: int
    orientation: str
    fill_direction: str


def preview_group(bed: Bed, spacing: float, editing_index: int | None = None) -> GroupPreview:
    """
    Positions for a group being added (editing_index None) or edited.

    The preview divides the bed equally among the groups it would then hold.
    """
    count = len(bed.plant_groups)
    if editing_index is not None and _valid_index(bed, editing_index):
        index, total = editing_index, count
    else:
        index, total = count, count + 1
    region = RegionBounds(index / total, (index + 1) / total)
    partition = partition_for(bed.container)
    positions = partition.place(region, spacing)
    return GroupPreview(
        positions=tuple(positions),
        region=region,
        region_percent=round(region.fraction * 100),
        orientation=partition.kind,
        fill_direction=partition.fill_direction,
    )


# --- Reporting ---


@dataclass(frozen=True)
class GroupSummary:
    name: str
    spacing: float
    quantity: int
    color: str | None = None


@dataclass(frozen=True)
class BedSummary:
    name: str
    shape: str
    dimensions: str
    total_plants: int
    groups: list[GroupSummary] = field(default_factory=list)


@dataclass(frozen=True)
class GardenSummary:
    total_beds: int
    total_plants: int
    plant_types: int
    beds: list[BedSummary] = field(default_factory=list)


def describe_container(container: Container) -> str:
    """Short label for reports, e.g. '48" × 96"' or 'Radius: 24"'."""
    if isinstance(container, Rectangle):
        return f'{round(container.width)}" × {round(container.height)}"'
    return f'Radius: {round(container.radius)}"'


def garden_summary(beds: Sequence[Bed]) -> GardenSummary:
    """Totals per bed and for the whole garden, from already computed positions."""
    bed_rows: list[BedSummary] = []
    for bed in beds:
        groups = [
            GroupSummary(name=g.name, spacing=g.spacing, quantity=len(g.positions), color=g.color)
            for g in bed.plant_groups
        ]
        bed_rows.append(
            BedSummary(
                name=bed.name or "Unnamed Bed",
                shape=bed.container.kind,
                dimensions=describe_container(bed.container),
                total_plants=sum(g.quantity for g in groups),
                groups=groups,
            )
        )
    return GardenSummary(
        total_beds=len(beds),
        total_plants=sum(b.total_plants for b in bed_rows),
        plant_types=sum(len(b.groups) for b in bed_rows),
        beds=bed_rows,
    )
