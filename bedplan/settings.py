from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from bedplan.services.conflicts import SeparationRule
from bedplan.services.patterns import Pattern
from bedplan.services.regions import MAX_BOUNDARY, MIN_BOUNDARY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementSettings:
    default_pattern: Pattern = Pattern.GRID
    boundary_min: float = MIN_BOUNDARY
    boundary_max: float = MAX_BOUNDARY
    flat_separation: SeparationRule = SeparationRule.AVERAGE


DEFAULT_SETTINGS = PlacementSettings()


def load_placement_settings(env_file: str | Path | None = None) -> PlacementSettings:
    """Read BEDPLAN_* variables (after loading .env); invalid values fall back to defaults."""
    dotenv_path = env_file if env_file is not None else find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)

    default_pattern = _parse_pattern(os.environ.get("BEDPLAN_DEFAULT_PATTERN", Pattern.GRID.value))
    boundary_min = _parse_fraction("BEDPLAN_BOUNDARY_MIN", MIN_BOUNDARY)
    boundary_max = _parse_fraction("BEDPLAN_BOUNDARY_MAX", MAX_BOUNDARY)
    if not boundary_min < boundary_max:
        logger.warning(
            "BEDPLAN_BOUNDARY_MIN (%s) must be below BEDPLAN_BOUNDARY_MAX (%s). Falling back to %s-%s.",
            boundary_min,
            boundary_max,
            MIN_BOUNDARY,
            MAX_BOUNDARY,
        )
        boundary_min, boundary_max = MIN_BOUNDARY, MAX_BOUNDARY
    flat_separation = _parse_separation(os.environ.get("BEDPLAN_FLAT_SEPARATION", SeparationRule.AVERAGE.value))
    return PlacementSettings(
        default_pattern=default_pattern,
        boundary_min=boundary_min,
        boundary_max=boundary_max,
        flat_separation=flat_separation,
    )


def _parse_pattern(value: str) -> Pattern:
    try:
        return Pattern(value.strip().lower())
    except ValueError:
        logger.warning("Invalid BEDPLAN_DEFAULT_PATTERN value: %s. Falling back to 'grid'.", value)
        return Pattern.GRID


def _parse_separation(value: str) -> SeparationRule:
    try:
        return SeparationRule(value.strip().lower())
    except ValueError:
        logger.warning("Invalid BEDPLAN_FLAT_SEPARATION value: %s. Falling back to 'average'.", value)
        return SeparationRule.AVERAGE


def _parse_fraction(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s value: %s. Falling back to %s.", name, raw, default)
        return default
    if not math.isfinite(value) or not 0.0 < value < 1.0:
        logger.warning("%s must be inside (0, 1), got %s. Falling back to %s.", name, raw, default)
        return default
    return value
