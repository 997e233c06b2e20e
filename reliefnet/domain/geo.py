"""
Great-circle geometry used by the responder search.

Assumption
----------
The Earth is modelled as a sphere of mean radius 6371 km and distances are
straight-line (Haversine) distances, not road distances.  Responders are
ranked by how far they are "as the crow flies" from the epicenter.

Two-phase search
----------------
``bounding_box`` turns a (center, radius) disc into a lat/lng rectangle that
the database can answer with plain ``BETWEEN`` predicates.  The rectangle is
only a cheap pre-filter; callers must re-check every candidate with
``distance_km`` (see ``ranking.rank_by_radius``).

Complexity: O(1) per call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6_371.0
KM_PER_DEGREE = 111.32  # approx. length of one degree of latitude

_POLE_EPSILON = 1e-12
_BOX_SLACK_DEG = 1e-9


# ── Value objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: Coordinate) -> bool:
        return is_within_bounds(point, self)


# ── Distance ──────────────────────────────────────────────────────────


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(a.latitude), math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


# ── Bounding boxes ────────────────────────────────────────────────────


def bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """
    Rectangle around *center* used for the coarse candidate query.

    Uses the flat ``111.32 km per degree`` approximation.  Longitude degrees
    shrink with ``cos(latitude)``, so ``lng_delta`` grows toward the poles
    and becomes unbounded at +/-90.  Boxes crossing the antimeridian are
    returned as-is (``min_lng < -180`` or ``max_lng > 180``).  Use
    ``guarded_bounding_box`` where either case matters.
    """
    lat_delta = radius_km / KM_PER_DEGREE
    lng_delta = radius_km / (KM_PER_DEGREE * math.cos(math.radians(center.latitude)))

    return BoundingBox(
        min_lat=center.latitude - lat_delta,
        max_lat=center.latitude + lat_delta,
        min_lng=center.longitude - lng_delta,
        max_lng=center.longitude + lng_delta,
    )


def guarded_bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """
    Spherical-cap bounding box that always contains the whole search disc.

    * latitude bounds are clamped to [-90, 90];
    * when the cap reaches a pole the full longitude range is returned;
    * when the longitude span crosses +/-180 the full longitude range is
      returned (a single rectangle cannot express the wrap);
    * a negative radius is treated as zero.
    """
    radius_km = max(radius_km, 0.0)
    angular = radius_km / EARTH_RADIUS_KM  # radians
    lat_delta = math.degrees(angular) + _BOX_SLACK_DEG

    min_lat = center.latitude - lat_delta
    max_lat = center.latitude + lat_delta

    if max_lat >= 90.0 or min_lat <= -90.0:
        return BoundingBox(
            min_lat=max(min_lat, -90.0),
            max_lat=min(max_lat, 90.0),
            min_lng=-180.0,
            max_lng=180.0,
        )

    cos_lat = math.cos(math.radians(center.latitude))
    ratio = math.sin(angular) / cos_lat if cos_lat > _POLE_EPSILON else 2.0
    if ratio >= 1.0:
        return BoundingBox(min_lat, max_lat, -180.0, 180.0)

    lng_delta = math.degrees(math.asin(ratio)) + _BOX_SLACK_DEG
    min_lng = center.longitude - lng_delta
    max_lng = center.longitude + lng_delta
    if min_lng < -180.0 or max_lng > 180.0:
        min_lng, max_lng = -180.0, 180.0

    return BoundingBox(min_lat, max_lat, min_lng, max_lng)


def is_within_bounds(point: Coordinate, box: BoundingBox) -> bool:
    """Inclusive on all four edges."""
    return (
        box.min_lat <= point.latitude <= box.max_lat
        and box.min_lng <= point.longitude <= box.max_lng
    )


# ── Display helpers ───────────────────────────────────────────────────


def format_distance(km: float) -> str:
    if km < 1:
        return f"{math.floor(km * 1000 + 0.5)} m"  # halves round up
    return f"{km:.1f} km"


def format_coordinates(lat: float, lng: float) -> str:
    lat_dir = "N" if lat >= 0 else "S"
    lng_dir = "E" if lng >= 0 else "W"
    return f"{abs(lat):.4f}°{lat_dir}, {abs(lng):.4f}°{lng_dir}"


def maps_url(lat: float, lng: float) -> str:
    return f"https://www.google.com/maps?q={lat},{lng}"


def directions_url(origin: Coordinate, destination: Coordinate) -> str:
    return (
        "https://www.google.com/maps/dir/"
        f"{origin.latitude},{origin.longitude}/"
        f"{destination.latitude},{destination.longitude}"
    )
