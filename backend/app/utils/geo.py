"""Coordinate disclosure controls.

Published positions are coarsened to one decimal degree (roughly 11 km of
latitude). Every export path and every public projection of an event goes
through ``round_coordinate``; authoritative precision stays in the database.
"""
from __future__ import annotations

import math
from typing import Optional

COORDINATE_DECIMALS: int = 1
_SCALE: float = 10.0 ** COORDINATE_DECIMALS


def round_coordinate(value: Optional[float]) -> Optional[float]:
    """Round to the nearest 0.1°, halves away from zero.

    None, NaN and infinities return None rather than 0.0.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    scaled = math.floor(abs(number) * _SCALE + 0.5)
    if scaled == 0:
        return 0.0
    return math.copysign(scaled / _SCALE, number)


def rounded_position(
    latitude: Optional[float], longitude: Optional[float]
) -> tuple[Optional[float], Optional[float]]:
    """Round a lat/lon pair; either side missing yields (None, None)."""
    lat = round_coordinate(latitude)
    lon = round_coordinate(longitude)
    if lat is None or lon is None:
        return None, None
    return lat, lon
