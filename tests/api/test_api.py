import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from saferoute.api.dependencies import get_context
from saferoute.api.routes import api_router
from saferoute.auth.auth import verify_token
from saferoute.ingestion.weather_client import LiveObservation
from saferoute.services.simulation import SimulationContext
from fakes import FakeOracle, FakeWeather, route_to

HEADERS = {"Authorization": "Bearer test-token"}


def _make_client(context):
    # Minimal app without the main.py lifespan so no upstream service is called
    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[verify_token] = lambda: "test-token"
    app.dependency_overrides[get_context] = lambda: context
    return TestClient(app)


@pytest.fixture
def context(square_a, boundary, shelters):
    oracle = FakeOracle({
        (37.735, 126.775): route_to([(37.74, 126.775), (37.738, 126.775), (37.735, 126.775)], 640),
    })
    return SimulationContext(flood_traces=[square_a], boundary_rings=boundary,
                             shelters=shelters, oracle=oracle,
                             weather_source=FakeWeather(LiveObservation(12.0, "rain")))


@pytest.fixture
def client(context):
    with _make_client(context) as c:
        yield c


def test_simulate_builds_region(client):
    resp = client.post("/api/v1/simulate", json={"rainfall_mm": 85}, headers=HEADERS)
    assert resp.status_code == 200
    body = resp.json()
    assert body["generation"] == 1
    assert body["severity"] == "extreme"
    assert body["buffer_m"] == pytest.approx(275.0)
    assert body["region"]["type"] == "Feature"
    assert body["region_style"]["fill_color"] == "#d32f2f"
    assert [s["name"] for s in body["flooded"]] == ["Inside A"]


def test_simulate_rejects_negative_rainfall(client):
    resp = client.post("/api/v1/simulate", json={"rainfall_mm": -5}, headers=HEADERS)
    assert resp.status_code == 422


def test_region_reflects_latest_cycle(client):
    client.post("/api/v1/simulate", json={"rainfall_mm": 20}, headers=HEADERS)
    body = client.get("/api/v1/region", headers=HEADERS).json()
    assert body["severity"] == "safe"
    assert body["region"] is None
    assert len(body["reachable"]) == 4


def test_live_uses_weather_observation(client):
    body = client.post("/api/v1/live", headers=HEADERS).json()
    assert body["source_mode"] == "live"
    assert body["rainfall_mm"] == 12.0
    assert body["weather_description"] == "rain"
    assert body["degraded"] is False


def test_route_returns_safe_route(client):
    client.post("/api/v1/simulate", json={"rainfall_mm": 60}, headers=HEADERS)
    resp = client.post("/api/v1/route", json={"lat": 37.74, "lng": 126.775}, headers=HEADERS)
    assert resp.status_code == 200
    body = resp.json()
    assert body["mode"] == "safe"
    assert body["shelter_name"] == "South school"
    assert body["summary"] == "Safe route (0.6km) - target: South school"
    assert body["path"][0] == [37.74, 126.775]
    assert body["generation"] == 1


def test_route_outside_boundary_is_unprocessable(client):
    resp = client.post("/api/v1/route", json={"lat": 37.95, "lng": 126.775}, headers=HEADERS)
    assert resp.status_code == 422


def test_route_without_any_oracle_answer_is_not_found(square_a, boundary, shelters):
    context = SimulationContext(flood_traces=[square_a], boundary_rings=boundary,
                                shelters=shelters, oracle=FakeOracle())
    with _make_client(context) as client:
        resp = client.post("/api/v1/route", json={"lat": 37.74, "lng": 126.775}, headers=HEADERS)
    assert resp.status_code == 404
    assert resp.json()["detail"]["reason"] == "search failed"


def test_route_without_shelters_is_conflict(square_a, boundary):
    context = SimulationContext(flood_traces=[square_a], boundary_rings=boundary,
                                shelters=[], oracle=FakeOracle())
    with _make_client(context) as client:
        resp = client.post("/api/v1/route", json={"lat": 37.74, "lng": 126.775}, headers=HEADERS)
    assert resp.status_code == 409
    assert resp.json()["detail"]["reason"] == "unavailable"


def test_point_reports_danger_membership(client):
    client.post("/api/v1/simulate", json={"rainfall_mm": 40}, headers=HEADERS)
    body = client.post("/api/v1/point", json={"lat": 37.755, "lng": 126.775}, headers=HEADERS).json()
    assert body["in_boundary"] is True
    assert body["in_danger"] is True
    outside = client.post("/api/v1/point", json={"lat": 37.95, "lng": 126.775}, headers=HEADERS).json()
    assert outside["in_boundary"] is False
    assert outside["in_danger"] is False
