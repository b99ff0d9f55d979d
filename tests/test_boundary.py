import json

import pytest

geopandas = pytest.importorskip("geopandas")
pyproj = pytest.importorskip("pyproj")

from saferoute.exceptions import DataSourceError
from saferoute.ingestion.boundary import load_boundary_rings
from saferoute.spatial.predicates import point_in_boundary


def _write_geojson(path, rings_xy, geometry_type="Polygon"):
    if geometry_type == "Polygon":
        geometry = {"type": "Polygon", "coordinates": [rings_xy[0]]}
    else:
        geometry = {"type": "MultiPolygon", "coordinates": [[r] for r in rings_xy]}
    path.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"name": "zone"}, "geometry": geometry}],
    }), encoding="utf-8")


def test_projected_boundary_is_reprojected_to_wgs84(tmp_path):
    to_5179 = pyproj.Transformer.from_crs("EPSG:4326", "EPSG:5179", always_xy=True)
    square = [(126.70, 37.70), (126.85, 37.70), (126.85, 37.85), (126.70, 37.85), (126.70, 37.70)]
    projected = [list(to_5179.transform(x, y)) for x, y in square]
    path = tmp_path / "boundary.geojson"
    _write_geojson(path, [projected])

    rings = load_boundary_rings(str(path), source_crs="EPSG:5179")
    assert len(rings) == 1
    lat, lng = rings[0][0]
    assert lat == pytest.approx(37.70, abs=1e-6)
    assert lng == pytest.approx(126.70, abs=1e-6)
    assert point_in_boundary(37.76, 126.78, rings)
    assert not point_in_boundary(37.90, 126.78, rings)


def test_multipolygon_boundary_yields_one_ring_per_part(tmp_path):
    part_a = [[126.70, 37.70], [126.75, 37.70], [126.75, 37.75], [126.70, 37.70]]
    part_b = [[126.80, 37.80], [126.85, 37.80], [126.85, 37.85], [126.80, 37.80]]
    path = tmp_path / "multi.geojson"
    _write_geojson(path, [part_a, part_b], geometry_type="MultiPolygon")
    rings = load_boundary_rings(str(path), source_crs="EPSG:4326")
    assert len(rings) == 2


def test_missing_boundary_file_raises(tmp_path):
    with pytest.raises(DataSourceError):
        load_boundary_rings(str(tmp_path / "absent.geojson"))


def test_no_boundary_configured_means_no_rings(monkeypatch):
    from saferoute.ingestion import boundary as boundary_module
    monkeypatch.setattr(boundary_module.settings, "BOUNDARY_GEOJSON", None)
    assert load_boundary_rings() == []
