"""Unit tests for radius filtering and nearest-first ordering."""

import random
from dataclasses import dataclass

import pytest

from reliefnet.domain.geo import Coordinate, distance_km
from reliefnet.domain.ranking import (
    RankedCandidate,
    coordinate_of,
    rank_by_radius,
    sort_by_distance,
)

CENTER = Coordinate(25.594, 85.1376)


@dataclass
class Responder:
    name: str
    latitude: float
    longitude: float


class TestRankByRadius:
    def test_near_kept_far_dropped(self):
        near = {"latitude": 25.60, "longitude": 85.14, "name": "near"}
        far = {"latitude": 26.80, "longitude": 87.0, "name": "far"}

        result = rank_by_radius(CENTER, [near, far], 20)

        assert [r.item["name"] for r in result] == ["near"]
        assert result[0].distance_km < 1.0

    def test_payload_passed_through_untouched(self):
        record = {"latitude": 25.60, "longitude": 85.14, "phone": "+91 1", "rank": "expert"}
        [match] = rank_by_radius(CENTER, [record], 5)
        assert match.item is record

    def test_boundary_is_inclusive(self):
        edge = Coordinate(25.70, 85.20)
        radius = distance_km(CENTER, edge)
        assert len(rank_by_radius(CENTER, [edge], radius)) == 1
        assert rank_by_radius(CENTER, [edge], radius - 1e-6) == []

    def test_sorted_nearest_first(self):
        rng = random.Random(3)
        points = [
            Coordinate(CENTER.latitude + rng.uniform(-0.3, 0.3),
                       CENTER.longitude + rng.uniform(-0.3, 0.3))
            for _ in range(100)
        ]
        result = rank_by_radius(CENTER, points, 25)
        distances = [r.distance_km for r in result]
        assert distances == sorted(distances)
        assert all(d <= 25 for d in distances)

    def test_result_is_exactly_the_points_within_radius(self):
        rng = random.Random(5)
        points = [
            Coordinate(rng.uniform(24, 27), rng.uniform(84, 87)) for _ in range(200)
        ]
        result = rank_by_radius(CENTER, points, 60)
        expected = {p for p in points if distance_km(CENTER, p) <= 60}
        assert {r.item for r in result} == expected

    def test_attribute_records(self):
        a = Responder("a", 25.62, 85.15)
        b = Responder("b", 25.595, 85.138)
        result = rank_by_radius(CENTER, [a, b], 10)
        assert [r.item.name for r in result] == ["b", "a"]

    def test_custom_key(self):
        rows = [("x", 25.60, 85.14), ("y", 25.90, 85.50)]
        result = rank_by_radius(
            CENTER, rows, 100, key=lambda row: Coordinate(row[1], row[2])
        )
        assert [r.item[0] for r in result] == ["x", "y"]

    def test_empty_input(self):
        assert rank_by_radius(CENTER, [], 20) == []

    def test_accepts_generator(self):
        gen = (Coordinate(25.6, 85.14) for _ in range(3))
        assert len(rank_by_radius(CENTER, gen, 5)) == 3

    def test_zero_radius_keeps_only_coincident_points(self):
        result = rank_by_radius(CENTER, [CENTER, Coordinate(25.6, 85.14)], 0)
        assert [r.item for r in result] == [CENTER]


class TestSortByDistance:
    def test_keeps_every_point(self):
        points = [Coordinate(0, 0), Coordinate(25.6, 85.14), Coordinate(-30, 150)]
        result = sort_by_distance(CENTER, points)
        assert len(result) == 3
        assert result[0].item == Coordinate(25.6, 85.14)

    def test_sorted(self):
        rng = random.Random(9)
        points = [Coordinate(rng.uniform(-80, 80), rng.uniform(-180, 180)) for _ in range(50)]
        distances = [r.distance_km for r in sort_by_distance(CENTER, points)]
        assert distances == sorted(distances)


class TestCoordinateOf:
    def test_coordinate(self):
        assert coordinate_of(CENTER) is CENTER

    def test_mapping(self):
        assert coordinate_of({"latitude": 1.5, "longitude": 2.5}) == Coordinate(1.5, 2.5)

    def test_object(self):
        assert coordinate_of(Responder("r", 3.0, 4.0)) == Coordinate(3.0, 4.0)

    def test_missing_fields(self):
        with pytest.raises(KeyError):
            coordinate_of({"lat": 1.0, "lng": 2.0})


def test_ranked_candidate_is_frozen():
    rc = RankedCandidate(item="x", distance_km=1.0)
    with pytest.raises(AttributeError):
        rc.distance_km = 2.0
