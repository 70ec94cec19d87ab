"""API tests for the KPI and partner endpoints."""

import pytest
import uvicorn
from fastapi.testclient import TestClient

from partner_dashboard.core.config import settings
from partner_dashboard.core.dependencies import get_kpi_service, get_partner_service
from partner_dashboard.main import app, run
from partner_dashboard.services.kpi_service import KpiService
from partner_dashboard.services.partner_service import PartnerService
from partner_dashboard.utils.exceptions import SheetsAPIError

from conftest import FakeGeocodingClient

API = settings.api_v1_str


class FailingKpiService:
    def __init__(self, error: Exception):
        self.error = error

    async def get_kpis(self, spec, now=None):
        raise self.error


@pytest.fixture()
def geocoder(berlin_geocode):
    return FakeGeocodingClient(result=berlin_geocode)


@pytest.fixture()
def client(fake_sheets, geocoder):
    app.dependency_overrides[get_kpi_service] = lambda: KpiService(fake_sheets)
    app.dependency_overrides[get_partner_service] = lambda: PartnerService(fake_sheets, geocoder)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").json()["version"] == settings.version
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["sheets"]["tables"]["pending_leads"] == "listing_requests"


class TestKpiEndpoint:
    def test_unfiltered(self, client):
        response = client.get(f"{API}/kpis")
        assert response.status_code == 200
        assert response.headers["cache-control"] == settings.kpi_cache_control

        body = response.json()
        assert body["totals"] == {"vehicles": 4, "owners": 3, "inquiries": 15, "rentals": 6}
        assert body["byCountry"]["vehicles"] == {"Deutschland": 3, "Österreich": 1}
        assert body["meta"]["availableCountries"] == ["Deutschland", "Österreich"]
        assert body["meta"]["totalInventoryRows"] == 4
        assert body["inventory"][0]["ownerPhone"] == "+49 89 1"
        assert [lead["ownerName"] for lead in body["pendingLeads"]][0] == "Alster Camper"

    def test_query_filters(self, client):
        body = client.get(f"{API}/kpis", params={"country": "Deutschland", "vehicleType": "Camper"}).json()
        assert body["totals"]["vehicles"] == 1
        assert body["inventory"][0]["vehicleLabel"] == "California"

    def test_radius(self, client):
        body = client.get(f"{API}/kpis", params={"city": "Hamburg", "radius": 650}).json()
        assert body["totals"]["vehicles"] == 3
        assert body["meta"]["filteredInventoryRows"] == 3

    def test_custom_location(self, client):
        params = {"radius": 10, "customLat": 48.137, "customLng": 11.575, "customLabel": "Marienplatz"}
        body = client.get(f"{API}/kpis", params=params).json()
        assert body["totals"]["vehicles"] == 2
        assert body["meta"]["customLocation"]["label"] == "Marienplatz"

    def test_custom_location_out_of_range(self, client):
        response = client.get(f"{API}/kpis", params={"radius": 10, "customLat": 95, "customLng": 11})
        assert response.status_code == 400

    def test_negative_radius(self, client):
        assert client.get(f"{API}/kpis", params={"radius": -5}).status_code == 422

    def test_sheet_failure_is_bad_gateway(self, client):
        app.dependency_overrides[get_kpi_service] = lambda: FailingKpiService(SheetsAPIError("quota exceeded"))
        response = client.get(f"{API}/kpis")
        assert response.status_code == 502
        assert response.json()["detail"] == "quota exceeded"

    def test_unexpected_failure(self, client):
        app.dependency_overrides[get_kpi_service] = lambda: FailingKpiService(RuntimeError("boom"))
        response = client.get(f"{API}/kpis")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to load KPIs"


class TestPartnerEndpoints:
    def test_create_partner(self, client, fake_sheets):
        payload = {
            "owner": {"name": "Nordlicht", "country": "Deutschland", "city": "Berlin", "postalCode": "10178"},
            "vehicles": [{"label": "Crafter", "vehicleType": "Transporter"}],
        }
        response = client.post(f"{API}/partners", json=payload)
        assert response.status_code == 200
        assert response.json()["coordinates"]["latitude"] == 52.5219
        assert [name for name, _ in fake_sheets.appended] == ["inventory", "owners"]

    def test_create_partner_validation(self, client):
        payload = {"owner": {"name": "Nordlicht", "country": "Deutschland", "city": "Berlin"}, "vehicles": []}
        assert client.post(f"{API}/partners", json=payload).status_code == 400

    def test_delete_partner(self, client, fake_sheets):
        response = client.request("DELETE", f"{API}/partners", json={"ownerName": "Meyer Mobil"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "removedInventoryRows": 2, "removedOwnerRows": 1}
        assert fake_sheets.deleted == [("inventory", [3, 2]), ("owners", [2])]

    def test_delete_unknown_partner(self, client):
        response = client.request("DELETE", f"{API}/partners", json={"ownerName": "Niemand"})
        assert response.status_code == 404

    def test_delete_vehicle(self, client, fake_sheets):
        assert client.request("DELETE", f"{API}/inventory", json={"rowIndex": 3}).status_code == 200
        assert fake_sheets.deleted == [("inventory", [3])]
        assert client.request("DELETE", f"{API}/inventory", json={"rowIndex": 1}).status_code == 400

    def test_missing_inventory(self, client, fake_sheets):
        payload = {"city": "Leipzig", "vehicleType": "Camper", "count": 2}
        assert client.post(f"{API}/missing-inventory", json=payload).json() == {"success": True}
        assert fake_sheets.appended[0][0] == "missing inventory"

    def test_listing_request(self, client, fake_sheets):
        payload = {
            "lead": {"landlord": "Havel Vans", "city": "Potsdam"},
            "vehicles": [{"vehicleType": "Camper"}, {"vehicleType": "Transporter"}],
        }
        assert client.post(f"{API}/listing-requests", json=payload).status_code == 200
        assert len(fake_sheets.appended[0][1]) == 2

    def test_geocode(self, client):
        response = client.post(f"{API}/geocode", json={"country": "Deutschland", "city": "Berlin"})
        assert response.status_code == 200
        assert response.json()["label"] == "Alexanderplatz, Berlin"
        assert client.post(f"{API}/geocode", json={"country": "Deutschland"}).status_code == 400

    def test_geocode_not_found(self, client, geocoder):
        geocoder.result = None
        response = client.post(f"{API}/geocode", json={"country": "Deutschland", "city": "Atlantis"})
        assert response.status_code == 404

    def test_unexpected_failure(self, client, geocoder):
        geocoder.result = "not a geocode result"
        response = client.post(f"{API}/geocode", json={"country": "Deutschland", "city": "Berlin"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Operation failed"


class TestRun:
    def test_serves_app_on_configured_address(self, monkeypatch):
        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
        run()
        assert calls == [(app, {"host": settings.host, "port": settings.port, "log_level": settings.log_level.lower()})]
