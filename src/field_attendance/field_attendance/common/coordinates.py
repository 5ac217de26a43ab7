from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


def _is_number(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float))


def parse_coordinates(payload: Optional[Mapping[str, Any]]) -> Coordinates:
    """Build Coordinates from a ``{"latitude", "longitude"}`` mapping.

    Both keys must be present and numeric.
    """

    if not payload or not isinstance(payload, Mapping):
        raise ValidationError("location coordinates required")

    lat = payload.get("latitude")
    lng = payload.get("longitude")
    if not _is_number(lat) or not _is_number(lng):
        raise ValidationError("location coordinates required")
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValidationError("location coordinates out of range")

    return Coordinates(latitude=float(lat), longitude=float(lng))


def coordinates_or_none(latitude: Any, longitude: Any) -> Optional[Coordinates]:
    """Rebuild Coordinates from two nullable DB columns."""
    if latitude is None or longitude is None:
        return None
    return Coordinates(latitude=float(latitude), longitude=float(longitude))
