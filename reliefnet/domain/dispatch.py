"""
Proximity Search
================

Two-phase search used by the panic-alert, issue-report and nearby-issue
flows:

1. **Coarse filter** -- derive a lat/lng bounding box around the epicenter
   and let the candidate source (a repository) return at most
   ``candidate_limit`` rows inside it.  Index friendly, but a rectangle is a
   superset of the search disc.
2. **Exact filter** -- recompute the great-circle distance for every row,
   drop anything beyond ``radius_km`` and sort nearest-first.

The box variant is selectable: the legacy flat-degree box, or the guarded
spherical-cap box that handles poles and the antimeridian.

Complexity: O(k log k) in-process for k = rows returned by the coarse query
(k <= candidate_limit).
"""

from __future__ import annotations

from typing import Protocol, Sequence

from .geo import BoundingBox, Coordinate, bounding_box, guarded_bounding_box
from .ranking import RankedCandidate, rank_by_radius


class CandidateSource(Protocol):
    async def find_in_bounds(self, box: BoundingBox, limit: int) -> Sequence: ...


class ProximitySearch:
    """Finds records within *radius_km* of an epicenter, nearest first."""

    def __init__(
        self,
        radius_km: float,
        candidate_limit: int,
        guarded: bool = False,
    ):
        self.radius_km = radius_km
        self.candidate_limit = candidate_limit
        self.guarded = guarded

    def search_box(self, epicenter: Coordinate) -> BoundingBox:
        if self.guarded:
            return guarded_bounding_box(epicenter, self.radius_km)
        return bounding_box(epicenter, self.radius_km)

    async def locate(
        self, source: CandidateSource, epicenter: Coordinate
    ) -> list[RankedCandidate]:
        box = self.search_box(epicenter)
        candidates = await source.find_in_bounds(box, self.candidate_limit)
        return rank_by_radius(epicenter, candidates, self.radius_km)
