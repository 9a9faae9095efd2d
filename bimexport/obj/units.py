"""Scene distance unit resolution."""

from typing import Any, Dict, Mapping, Optional

# Meters per scene unit, matched exactly (case-sensitive)
UNIT_SCALES: Dict[str, float] = {
    "centimeter": 0.01,
    "cm": 0.01,
    "millimeter": 0.001,
    "mm": 0.001,
    "foot": 0.3048,
    "ft": 0.3048,
    "inch": 0.0254,
    "in": 0.0254,
}

DISTANCE_UNIT_KEY = "distance unit"

# Target units accepted for output, in meters
TARGET_UNITS: Dict[str, float] = {"m": 1.0, "meter": 1.0, **UNIT_SCALES}


def _metadata_value(entry: Any) -> Optional[Any]:
    """Read the value of a metadata entry (MetadataValue or {"value": ...})."""
    if entry is None:
        return None
    if isinstance(entry, Mapping):
        return entry.get("value")
    return getattr(entry, "value", None)


def unit_to_meters(unit: Optional[str]) -> float:
    """Meters per unit; unknown or missing units are treated as meters."""
    if not isinstance(unit, str):
        return 1.0
    return UNIT_SCALES.get(unit, 1.0)


def resolve_unit_scale(metadata: Optional[Mapping[str, Any]], target_unit: str = "m") -> float:
    """
    Scale factor converting scene distances to the target unit.

    Args:
        metadata: Scene metadata mapping, may be None
        target_unit: Output unit token (default meters)

    Returns:
        Multiplier applied to every transformed vertex
    """
    if target_unit not in TARGET_UNITS:
        raise ValueError(f"Unknown target unit: {target_unit}. Available: {list(TARGET_UNITS.keys())}")

    distance_unit = _metadata_value((metadata or {}).get(DISTANCE_UNIT_KEY))
    scale = unit_to_meters(distance_unit)

    target = TARGET_UNITS[target_unit]
    if target == 1.0:
        return scale
    return scale / target
