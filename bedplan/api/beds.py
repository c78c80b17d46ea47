"""Record-level entry points: stored bed dicts in, recomputed bed dicts out."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from bedplan.schemas.beds import BedSchema, GardenSummarySchema, PointSchema
from bedplan.services.awareness import place_with_awareness
from bedplan.services.beds import garden_summary, preview_group, recompute_bed
from bedplan.services.placement import FillMethod
from bedplan.settings import PlacementSettings, load_placement_settings

logger = logging.getLogger(__name__)


def _settings(settings: PlacementSettings | None) -> PlacementSettings:
    return settings if settings is not None else load_placement_settings()


def recompute_bed_record(record: Mapping[str, Any], settings: PlacementSettings | None = None) -> dict[str, Any]:
    """Validate a stored bed, recompute all of its groups and return it in storage form."""
    payload = BedSchema.model_validate(record)
    bed = recompute_bed(payload.to_bed(), _settings(settings))
    return payload.with_placement(bed).model_dump(by_alias=True)


def recompute_garden_records(
    records: Iterable[Mapping[str, Any]], settings: PlacementSettings | None = None
) -> list[dict[str, Any]]:
    resolved = _settings(settings)
    return [recompute_bed_record(record, resolved) for record in records]


def place_group_record(
    record: Mapping[str, Any],
    spacing: float,
    fill_method: FillMethod | str = FillMethod.AUTO,
    fill_value: float | None = None,
    settings: PlacementSettings | None = None,
) -> list[dict[str, float]]:
    """
    Flat-mode positions for a new group in a stored bed, avoiding its existing groups.

    Uses the configured default pattern and flat separation rule.
    """
    resolved = _settings(settings)
    bed = BedSchema.model_validate(record).to_bed()
    positions = place_with_awareness(
        bed.container,
        spacing,
        resolved.default_pattern,
        fill_method,
        fill_value,
        bed.plant_groups,
        separation=resolved.flat_separation,
    )
    return [PointSchema(x=p.x, y=p.y).model_dump() for p in positions]


def preview_group_record(
    record: Mapping[str, Any], spacing: float, editing_index: int | None = None
) -> dict[str, Any]:
    """Preview for the add/edit plant form: count, region share and fill direction."""
    bed = BedSchema.model_validate(record).to_bed()
    preview = preview_group(bed, spacing, editing_index)
    return {
        "count": len(preview.positions),
        "positions": [PointSchema(x=p.x, y=p.y).model_dump() for p in preview.positions],
        "region_percent": preview.region_percent,
        "orientation": preview.orientation,
        "fill_direction": preview.fill_direction,
    }


def garden_report(records: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Summary over stored beds, counted from their stored positions."""
    beds = [BedSchema.model_validate(record).to_bed() for record in records]
    summary = GardenSummarySchema.from_summary(garden_summary(beds))
    logger.debug("Garden report: %d beds, %d plants", summary.total_beds, summary.total_plants)
    return summary.model_dump()
