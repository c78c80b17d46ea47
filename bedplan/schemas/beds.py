"""Pydantic schemas for bed records exchanged with the planner UI / local storage."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from bedplan.services.beds import Bed, GardenSummary, PlantGroup
from bedplan.services.geometry import Circle, Container, Point, Rectangle
from bedplan.services.placement import FillMethod

_RECORD_CONFIG = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class PointSchema(BaseModel):
    x: float
    y: float


class PlantGroupSchema(BaseModel):
    """One plant group of a stored bed (camelCase keys accepted)."""

    model_config = _RECORD_CONFIG

    name: str = ""
    color: str | None = None
    spacing: float
    desired_quantity: int | None = Field(None, alias="quantity")
    fill_method: Literal["auto", "count", "rows", "percentage"] = "auto"
    fill_value: float | None = None
    max_quantity: int = 0
    positions: list[PointSchema] = Field(default_factory=list)

    @field_validator("desired_quantity")
    @classmethod
    def non_negative_quantity(cls, value: int | None) -> int | None:
        if value is None:
            return None
        return max(0, value)

    def to_group(self) -> PlantGroup:
        return PlantGroup(
            spacing=self.spacing,
            desired_quantity=self.desired_quantity,
            name=self.name,
            color=self.color,
            fill_method=FillMethod(self.fill_method),
            fill_value=self.fill_value,
            max_quantity=self.max_quantity,
            positions=tuple(Point(p.x, p.y) for p in self.positions),
        )

    def with_placement(self, group: PlantGroup) -> PlantGroupSchema:
        """Copy with computed quantity and positions; name and color untouched."""
        return self.model_copy(
            update={
                "desired_quantity": group.desired_quantity,
                "max_quantity": group.max_quantity,
                "positions": [PointSchema(x=p.x, y=p.y) for p in group.positions],
            }
        )


class BedSchema(BaseModel):
    """
    Stored bed: shape and dimensions, UI placement fields and plant groups.

    Only type / width / height / radius, plant groups and region boundaries reach the
    engine. Unknown UI keys are ignored.
    """

    model_config = _RECORD_CONFIG

    id: str | int | None = None
    name: str = ""
    type: Literal["rectangle", "circle"] = "rectangle"
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    radius: float = 0.0
    rotation: float = 0.0
    layout: Literal["regions", "layered"] = "regions"
    plant_groups: list[PlantGroupSchema] = Field(default_factory=list)
    region_boundaries: list[float] | None = None

    def container(self) -> Container:
        if self.type == "circle":
            return Circle(radius=self.radius)
        return Rectangle(width=self.width, height=self.height)

    def to_bed(self) -> Bed:
        return Bed(
            container=self.container(),
            plant_groups=tuple(g.to_group() for g in self.plant_groups),
            region_boundaries=tuple(self.region_boundaries) if self.region_boundaries is not None else None,
            layout=self.layout,
            id=self.id,
            name=self.name,
            x=self.x,
            y=self.y,
            rotation=self.rotation,
        )

    def with_placement(self, bed: Bed) -> BedSchema:
        """
        Copy carrying a recomputed bed's groups and boundaries.

        Groups are matched by position; the record keeps its own UI fields.
        """
        groups = [
            schema.with_placement(group) for schema, group in zip(self.plant_groups, bed.plant_groups)
        ]
        boundaries = list(bed.region_boundaries) if bed.region_boundaries is not None else None
        return self.model_copy(update={"plant_groups": groups, "region_boundaries": boundaries})


class GroupSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    spacing: float
    quantity: int
    color: str | None = None


class BedSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    shape: str
    dimensions: str
    total_plants: int
    groups: list[GroupSummarySchema]


class GardenSummarySchema(BaseModel):
    """Garden report: totals and per-bed plant counts."""

    model_config = ConfigDict(from_attributes=True)

    total_beds: int
    total_plants: int
    plant_types: int
    beds: list[BedSummarySchema]

    @classmethod
    def from_summary(cls, summary: GardenSummary) -> GardenSummarySchema:
        return cls.model_validate(summary)
