import pytest
from shapely.errors import GEOSException

from saferoute.domain.region import RegionCollection, SingleRegion
from saferoute.domain.severity import classify_severity
from saferoute.services import danger_region
from saferoute.services.danger_region import build_danger_region, buffer_distance_m
from saferoute.spatial.geometry import build_polygon
from saferoute.spatial.predicates import point_in_region
from fakes import FAR_SQUARE, SQUARE_A, SQUARE_B


def test_buffer_distance_law():
    assert buffer_distance_m(30) == 0.0
    assert buffer_distance_m(31) == pytest.approx(5.0)
    assert buffer_distance_m(80) == pytest.approx(250.0)
    assert buffer_distance_m(20) == 0.0


def test_buffer_distance_monotonic():
    values = [buffer_distance_m(r) for r in range(30, 200)]
    assert all(a <= b for a, b in zip(values, values[1:]))


@pytest.mark.parametrize("rain", [0, 10, 20, 29, 29.9])
def test_below_floor_is_never_dangerous(rain):
    assert build_danger_region(rain, [SQUARE_A, SQUARE_B]) is None


def test_scenario_a_light_rain_is_safe():
    assert build_danger_region(20, [SQUARE_A]) is None
    assert classify_severity(20).level == "safe"


def test_no_traces_or_only_invalid_traces_yield_none():
    assert build_danger_region(90, []) is None
    assert build_danger_region(90, [[(1, 2)], [("x", "y"), (1, 2), (3, 4), (1, 2)]]) is None


def test_scenario_b_threshold_rain_keeps_exact_polygon():
    region = build_danger_region(30, [SQUARE_A])
    assert isinstance(region, SingleRegion)
    assert region.geometry.equals(build_polygon(SQUARE_A))
    assert classify_severity(30).level == "advisory"


def test_scenario_c_overlapping_traces_merge_into_one_polygon():
    region = build_danger_region(80, [SQUARE_A, SQUARE_B])
    assert isinstance(region, SingleRegion)
    assert region.geometry.geom_type == "Polygon"
    assert classify_severity(80).level == "extreme"
    unbuffered = build_polygon(SQUARE_A).union(build_polygon(SQUARE_B))
    assert region.geometry.area > unbuffered.area
    # ~150 m south of square A lies inside the 250 m buffer, ~400 m does not
    assert point_in_region(37.74865, 126.775, region)
    assert not point_in_region(37.7464, 126.775, region)


def test_buffer_edges_are_smooth():
    region = build_danger_region(80, [SQUARE_A])
    # four rounded corners of 64 segments each
    assert len(region.geometry.exterior.coords) > 200


def test_disjoint_traces_union_to_multipolygon():
    region = build_danger_region(30, [SQUARE_A, FAR_SQUARE])
    assert isinstance(region, SingleRegion)
    assert region.geometry.geom_type == "MultiPolygon"
    assert point_in_region(37.805, 126.705, region)


def test_invalid_ring_does_not_abort_build():
    region = build_danger_region(50, [[(1, 2)], SQUARE_A])
    assert isinstance(region, SingleRegion)
    assert point_in_region(37.755, 126.775, region)


def test_build_is_deterministic():
    first = build_danger_region(65, [SQUARE_A, SQUARE_B, FAR_SQUARE])
    second = build_danger_region(65, [SQUARE_A, SQUARE_B, FAR_SQUARE])
    assert first.geometry.equals(second.geometry)


def test_union_failure_falls_back_to_unmerged_collection(monkeypatch):
    def failing_union(polygons):
        raise GEOSException("TopologyException: side location conflict")

    monkeypatch.setattr(danger_region, "union_polygons", failing_union)
    region = build_danger_region(80, [SQUARE_A, [(1, 2)], FAR_SQUARE])
    assert isinstance(region, RegionCollection)
    assert len(region.members) == 2
    assert point_in_region(37.755, 126.775, region)
    assert point_in_region(37.805, 126.705, region)
    assert not point_in_region(37.78, 126.75, region)


def test_region_geojson_shapes():
    single = build_danger_region(30, [SQUARE_A])
    assert single.to_geojson()["type"] == "Feature"
    collection = RegionCollection((build_polygon(SQUARE_A), build_polygon(FAR_SQUARE)))
    assert len(collection.to_geojson()["features"]) == 2


def test_buffering_builds_transformers_once_per_region(monkeypatch):
    from saferoute.spatial import geometry

    original = geometry.Transformer.from_crs
    calls = []

    def counting_from_crs(*args, **kwargs):
        calls.append(args)
        return original(*args, **kwargs)

    monkeypatch.setattr(geometry.Transformer, "from_crs", staticmethod(counting_from_crs))
    region = build_danger_region(80, [SQUARE_A, SQUARE_B, FAR_SQUARE])
    assert region is not None
    assert len(calls) == 2
