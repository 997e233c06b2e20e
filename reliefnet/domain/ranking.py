"""
Candidate ranking by true great-circle distance.

Takes the (superset) list returned by a bounding-box query, recomputes the
exact distance for every record and returns them nearest-first.  Records are
never inspected beyond their latitude / longitude; any other fields ride
along untouched in ``RankedCandidate.item``.

Records can be objects with ``latitude`` / ``longitude`` attributes (ORM
rows, dataclasses) or mappings with those keys.  A custom ``key`` callable
returning a ``Coordinate`` may be passed for anything else.

Tie order between equal distances is unspecified.

Complexity: O(n log n) for n candidates.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar

from .geo import Coordinate, distance_km

T = TypeVar("T")

CoordinateKey = Callable[[T], Coordinate]


@dataclass(frozen=True)
class RankedCandidate(Generic[T]):
    item: T
    distance_km: float


def coordinate_of(record) -> Coordinate:
    """Read the coordinate carried by *record*."""
    if isinstance(record, Coordinate):
        return record
    if isinstance(record, Mapping):
        return Coordinate(record["latitude"], record["longitude"])
    return Coordinate(record.latitude, record.longitude)


def _annotate(
    center: Coordinate,
    records: Iterable[T],
    key: Optional[CoordinateKey],
) -> list[RankedCandidate[T]]:
    get = key or coordinate_of
    return [RankedCandidate(r, distance_km(center, get(r))) for r in records]


def rank_by_radius(
    center: Coordinate,
    candidates: Iterable[T],
    radius_km: float,
    *,
    key: Optional[CoordinateKey] = None,
) -> list[RankedCandidate[T]]:
    """Keep candidates with ``distance <= radius_km``, nearest first."""
    within = [
        c for c in _annotate(center, candidates, key) if c.distance_km <= radius_km
    ]
    within.sort(key=lambda c: c.distance_km)
    return within


def sort_by_distance(
    reference: Coordinate,
    points: Iterable[T],
    *,
    key: Optional[CoordinateKey] = None,
) -> list[RankedCandidate[T]]:
    """Every point, nearest first.  No radius cut-off."""
    ranked = _annotate(reference, points, key)
    ranked.sort(key=lambda c: c.distance_km)
    return ranked
