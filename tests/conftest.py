"""Shared test fixtures: raw workbook tables, a fixed clock and in-memory collaborators."""

from datetime import datetime
from typing import Dict, List, Optional

import pytest

from partner_dashboard.external.geocoding.models import GeocodeResult
from partner_dashboard.utils.exceptions import GeocodingError

INVENTORY_HEADER = [
    "Vermieter_ID", "Vermieter_Name", "Fahrzeug_Label", "Fahrzeugtyp", "Hersteller",
    "Stadt", "Region", "Land", "Status", "listed_at", "Latitude", "Longitude", "Standort",
]
OWNERS_HEADER = ["Vermieter_ID", "Vermieter_Name", "Land", "Region", "Telefon", "Email", "Adresse"]
INQUIRIES_HEADER = ["Fahrzeug_ID", "Fahrzeugtyp", "Stadt", "Anfragen", "Mieten", "Datum"]
MISSING_HEADER = ["Stadt", "Fahrzeugtyp", "Anzahl_fehlend", "Prio", "Kommentar", "Land"]
LEADS_HEADER = [
    "Datum", "Kanal", "Region", "Vermieter_Name", "Fahrzeug_Label", "Fahrzeugtyp",
    "Stadt", "Land", "Status", "Status_Updated_At",
]


@pytest.fixture()
def now() -> datetime:
    return datetime(2024, 6, 15, 12, 0)


@pytest.fixture()
def inventory_rows() -> List[List[str]]:
    return [
        INVENTORY_HEADER,
        ["V1", "Meyer Mobil", "Sprinter 1", "Transporter", "Mercedes", "München", "Bayern",
         "Deutschland", "aktiv", "2024-06-10", "48.137154", "11.576124", ""],
        ["V1", "Meyer Mobil", "Sprinter 2", "Transporter", "Mercedes", "München", "Bayern",
         "Deutschland", "aktiv", "2024-05-01", "48,137154", "11,576124", ""],
        ["", "Nordwind", "California", "Camper", "VW", "Hamburg", "Hamburg",
         "Deutschland", "aktiv", "", "", "", "Hafenstr. 1"],
        ["V3", "Alpen Camper", "Nugget", "Camper", "Ford", "Wien", "Wien",
         "Österreich", "aktiv", "2024-06-15", "", "", ""],
    ]


@pytest.fixture()
def owner_rows() -> List[List[str]]:
    return [
        OWNERS_HEADER,
        ["V1", "Meyer Mobil", "Deutschland", "Oberbayern", "+49 89 1", "info@meyer.de",
         "Leopoldstr. 1, München"],
        ["", "nordwind", "Deutschland", "", "+49 40 2", "", ""],
    ]


@pytest.fixture()
def inquiry_rows() -> List[List[str]]:
    return [
        INQUIRIES_HEADER,
        ["F1", "Transporter", "München", "10", "3", "2024-06-01"],
        ["F2", "Camper", "Hamburg", "5", "1", ""],
        ["F3", "Camper", "Wien", "abc", "2", ""],
        ["", "", "Berlin", "7", "7", ""],
    ]


@pytest.fixture()
def missing_inventory_rows() -> List[List[str]]:
    return [
        MISSING_HEADER,
        ["Berlin", "Camper", "3", "hoch", "", "Deutschland"],
        ["Köln", "Transporter", "0", "", "", ""],
        ["", "", "2", "", "", ""],
    ]


@pytest.fixture()
def pending_lead_rows() -> List[List[str]]:
    return [
        LEADS_HEADER,
        ["2024-06-12", "Messe", "Bayern", "Meyer Mobil", "", "", "", "", "Angefragt", ""],
        ["2024-06-14", "Web", "Berlin", "Spree Rent", "Crafter", "Transporter", "Berlin",
         "Deutschland", "In Verhandlung", ""],
        ["2024-06-01", "Web", "", "Elbe Vans", "", "", "", "", "Contract Signed", "2024-06-09"],
        ["2024-05-01", "Web", "", "Rhein Mobil", "", "", "", "", "Rejected", "2024-06-07"],
        ["", "Telefon", "", "Alster Camper", "", "", "", "", "", ""],
        ["", "", "", "  ", "", "", "", "", "", ""],
    ]


@pytest.fixture()
def workbook(inventory_rows, owner_rows, inquiry_rows, missing_inventory_rows, pending_lead_rows):
    """All tables keyed by their configured sheet names"""
    return {
        "inventory": inventory_rows,
        "owners": owner_rows,
        "inquiries": inquiry_rows,
        "missing inventory": missing_inventory_rows,
        "listing_requests": pending_lead_rows,
    }


class FakeSheetsClient:
    """In-memory stand-in for SheetsClient that records writes"""

    def __init__(self, tables: Dict[str, List[List[str]]], error: Optional[Exception] = None):
        self.tables = tables
        self.error = error
        self.fetched: List[str] = []
        self.appended: List[tuple] = []
        self.deleted: List[tuple] = []

    async def fetch_table(self, name: str, range: Optional[str] = None) -> List[List[str]]:
        if self.error is not None:
            raise self.error
        self.fetched.append(name)
        return [list(row) for row in self.tables.get(name, [])]

    async def get_header_row(self, name: str) -> List[str]:
        rows = self.tables.get(name) or []
        return list(rows[0]) if rows else []

    async def append_rows(self, range: str, rows) -> dict:
        self.appended.append((range, [list(row) for row in rows]))
        return {}

    async def delete_rows(self, name: str, row_indices) -> int:
        indices = sorted(set(row_indices), reverse=True)
        if indices:
            self.deleted.append((name, indices))
        return len(indices)


class FakeGeocodingClient:
    """Stand-in for GeocodingClient returning a fixed result"""

    def __init__(self, result: Optional[GeocodeResult] = None, error: bool = False):
        self.result = result
        self.error = error
        self.calls: List[dict] = []

    async def resolve_address(self, street, city, region, country) -> Optional[GeocodeResult]:
        self.calls.append({"street": street, "city": city, "region": region, "country": country})
        if self.error:
            raise GeocodingError("geocoder down")
        return self.result


@pytest.fixture()
def fake_sheets(workbook) -> FakeSheetsClient:
    return FakeSheetsClient(workbook)


@pytest.fixture()
def berlin_geocode() -> GeocodeResult:
    return GeocodeResult(latitude=52.5219, longitude=13.4132, label="Alexanderplatz, Berlin")
