"""Spherical Web Mercator projection and its scale correction."""

import math

EARTH_RADIUS = 6378137.0  # WGS84 semi-major axis, meters
DEG_TO_RAD = math.pi / 180

# The log term diverges at the poles; latitudes are clamped to this band.
MAX_LATITUDE = 89.99


def _clamp_latitude(lat: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def to_web_mercator(lat: float, lon: float) -> tuple[float, float]:
    """Project a WGS84 coordinate in degrees to planar (x, y) in meters."""
    a = _clamp_latitude(lat) * DEG_TO_RAD
    x = EARTH_RADIUS * lon * DEG_TO_RAD
    y = EARTH_RADIUS * math.log((1.0 + math.sin(a)) / (1.0 - math.sin(a))) / 2
    return x, y


def scale_correction(lat: float) -> float:
    """
    Factor turning a projected distance at `lat` into a ground distance.

    Always in (0, 1], equal to 1 on the equator.
    """
    return math.cos(_clamp_latitude(lat) * DEG_TO_RAD)


class WebMercatorProjector:
    """Projector used by the conformance evaluator."""

    def convert(self, lat: float, lon: float) -> tuple[float, float]:
        return to_web_mercator(lat, lon)

    def scale_correction(self, lat: float) -> float:
        return scale_correction(lat)
