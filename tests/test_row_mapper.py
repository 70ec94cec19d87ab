"""Tests for header-keyed row mapping."""

from datetime import datetime, timezone

import pytest

from partner_dashboard.core.constants import INVENTORY_WRITE_SYNONYMS
from partner_dashboard.schemas.entities import LeadStatus
from partner_dashboard.services.row_mapper import (
    HeaderLookup,
    build_row,
    map_inquiries,
    map_inventory,
    map_missing_inventory,
    map_owners,
    map_pending_leads,
    normalize_header,
    parse_count,
    parse_date,
    parse_lead_status,
    parse_number,
)


class TestNormalizeHeader:
    def test_lowercases_and_joins_with_underscores(self):
        assert normalize_header("Fahrzeug Label") == "fahrzeug_label"
        assert normalize_header("  Vermieter-Name ") == "vermieter_name"

    def test_strips_diacritics(self):
        assert normalize_header("Längengrad") == "langengrad"
        assert normalize_header("Priorität") == "prioritat"

    def test_eszett_is_not_alphanumeric(self):
        assert normalize_header("Straße") == "stra_e"

    def test_strips_byte_order_mark(self):
        assert normalize_header("\ufeffLand") == "land"

    def test_empty(self):
        assert normalize_header("") == ""
        assert normalize_header(None) == ""


class TestHeaderLookup:
    def test_first_candidate_wins(self):
        lookup = HeaderLookup(["Typ", "Fahrzeugtyp"])
        assert lookup.find(["fahrzeugtyp", "typ"]) == 1

    def test_missing_candidate(self):
        assert HeaderLookup(["Stadt"]).find(["land", "country"]) == -1


class TestParsers:
    def test_parse_number_accepts_decimal_comma(self):
        assert parse_number("48,137") == pytest.approx(48.137)
        assert parse_number(" 11.5 ") == pytest.approx(11.5)

    @pytest.mark.parametrize("raw", ["", "abc", "inf", "nan", None])
    def test_parse_number_rejects_garbage(self, raw):
        assert parse_number(raw) is None

    def test_parse_count_default(self):
        assert parse_count("7") == 7
        assert parse_count("x") == 0
        assert parse_count("", default=1) == 1

    def test_parse_date(self):
        assert parse_date("2024-06-01") == datetime(2024, 6, 1)
        assert parse_date("2024-06-01T10:00:00Z") == datetime(2024, 6, 1, 10, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw", ["", "31.12.2024", "morgen", None])
    def test_parse_date_invalid(self, raw):
        assert parse_date(raw) is None

    def test_parse_lead_status_accepts_both_vocabularies(self):
        assert parse_lead_status("Vertrag unterschrieben") is LeadStatus.CONTRACT_SIGNED
        assert parse_lead_status("in negotiation") is LeadStatus.IN_NEGOTIATION
        assert parse_lead_status("Abgelehnt") is LeadStatus.REJECTED
        assert parse_lead_status("") is LeadStatus.REQUESTED
        assert parse_lead_status("irgendwas") is LeadStatus.REQUESTED


class TestEmptyTables:
    @pytest.mark.parametrize(
        "mapper",
        [map_inventory, map_owners, map_inquiries, map_missing_inventory, map_pending_leads],
    )
    def test_header_only(self, mapper):
        assert mapper([["Stadt", "Land"]]) == []

    @pytest.mark.parametrize(
        "mapper",
        [map_inventory, map_owners, map_inquiries, map_missing_inventory, map_pending_leads],
    )
    def test_no_rows(self, mapper):
        assert mapper([]) == []


class TestMapInventory:
    def test_maps_by_header(self, inventory_rows):
        entries = map_inventory(inventory_rows)
        assert len(entries) == 4

        first = entries[0]
        assert first.owner_id == "V1"
        assert first.owner_name == "Meyer Mobil"
        assert first.vehicle_label == "Sprinter 1"
        assert first.vehicle_type == "Transporter"
        assert first.manufacturer == "Mercedes"
        assert first.city == "München"
        assert first.country == "Deutschland"
        assert first.listed_at == datetime(2024, 6, 10)
        assert first.latitude == pytest.approx(48.137154)
        assert first.sheet_row_index == 2

    def test_decimal_comma_coordinates(self, inventory_rows):
        second = map_inventory(inventory_rows)[1]
        assert second.latitude == pytest.approx(48.137154)
        assert second.longitude == pytest.approx(11.576124)

    def test_missing_coordinates_use_city_centroid(self, inventory_rows):
        entries = map_inventory(inventory_rows)
        hamburg, vienna = entries[2], entries[3]
        assert (hamburg.latitude, hamburg.longitude) == (53.551086, 9.993682)
        assert (vienna.latitude, vienna.longitude) == (48.208174, 16.373819)

    def test_inventory_address_column(self, inventory_rows):
        assert map_inventory(inventory_rows)[2].owner_address == "Hafenstr. 1"

    def test_label_fallback_chain(self):
        rows = [
            ["Vermieter_Name", "Fahrzeug_ID", "Fahrzeugtyp", "Fahrzeug_Label"],
            ["A", "ID-1", "Camper", ""],
            ["B", "", "Camper", ""],
            ["", "", "", ""],
        ]
        entries = map_inventory(rows)
        assert [entry.vehicle_label for entry in entries] == ["ID-1", "Camper", "Fahrzeug 3"]
        assert entries[2].owner_name == "Unbekannter Vermieter 3"
        assert [entry.sheet_row_index for entry in entries] == [2, 3, 4]

    def test_positional_fallback_for_unknown_headers(self):
        rows = [
            ["a", "b", "c", "d", "e", "f", "g", "h"],
            ["Owner X", "Grand California", "VW", "Camper", "Berlin", "Berlin", "Deutschland", "aktiv"],
        ]
        entry = map_inventory(rows)[0]
        assert entry.owner_name == "Owner X"
        assert entry.vehicle_label == "Grand California"
        assert entry.manufacturer == "VW"
        assert entry.vehicle_type == "Camper"
        assert entry.city == "Berlin"
        assert entry.country == "Deutschland"
        assert entry.status == "aktiv"
        assert (entry.latitude, entry.longitude) == (52.520008, 13.404954)

    def test_ragged_rows_are_padded(self):
        rows = [["Vermieter_Name", "Fahrzeug_Label", "Stadt"], ["A", "Van"]]
        entry = map_inventory(rows)[0]
        assert entry.city == ""
        assert entry.latitude is None

    def test_unformatted_cell_values(self):
        rows = [["Vermieter_Name", "Fahrzeug_Label", "Latitude", "Longitude"], ["A", 2024.0, 48.137154, 11.576124]]
        entry = map_inventory(rows)[0]
        assert entry.vehicle_label == "2024"
        assert entry.latitude == pytest.approx(48.137154)
        assert entry.longitude == pytest.approx(11.576124)

    def test_unparsable_date_becomes_none(self):
        rows = [["Vermieter_Name", "Fahrzeug_Label", "listed_at"], ["A", "Van", "gestern"]]
        assert map_inventory(rows)[0].listed_at is None


class TestMapOwners:
    def test_drops_rows_without_name(self):
        rows = [["Vermieter_ID", "Vermieter_Name"], ["V1", "Meyer"], ["V2", "  "]]
        owners = map_owners(rows)
        assert [owner.owner_name for owner in owners] == ["Meyer"]
        assert owners[0].sheet_row_index == 2

    def test_blank_optional_fields_are_none(self, owner_rows):
        nordwind = map_owners(owner_rows)[1]
        assert nordwind.owner_id is None
        assert nordwind.region is None
        assert nordwind.phone == "+49 40 2"


class TestMapInquiries:
    def test_counts_and_required_fields(self, inquiry_rows):
        inquiries = map_inquiries(inquiry_rows)
        assert [inquiry.vehicle_id for inquiry in inquiries] == ["F1", "F2", "F3"]
        assert inquiries[0].requests == 10
        assert inquiries[0].bookings == 3
        assert inquiries[0].created_at == datetime(2024, 6, 1)
        assert inquiries[2].requests == 0

    def test_numeric_counts(self):
        rows = [["Fahrzeug_ID", "Anfragen", "Mieten"], ["F9", 7.0, None]]
        inquiry = map_inquiries(rows)[0]
        assert (inquiry.requests, inquiry.bookings) == (7, 0)


class TestMapMissingInventory:
    def test_keeps_positive_counts_with_defaults(self, missing_inventory_rows):
        missing = map_missing_inventory(missing_inventory_rows)
        assert len(missing) == 2
        assert missing[0].city == "Berlin"
        assert missing[0].count == 3
        assert missing[0].priority == "hoch"
        assert missing[0].comment is None
        assert missing[1].city == "Unbekannt"
        assert missing[1].vehicle_type == "Unbekannt"
        assert missing[1].country == "Deutschland"


class TestMapPendingLeads:
    def test_statuses_and_required_name(self, pending_lead_rows):
        leads = map_pending_leads(pending_lead_rows)
        assert [lead.owner_name for lead in leads] == [
            "Meyer Mobil", "Spree Rent", "Elbe Vans", "Rhein Mobil", "Alster Camper",
        ]
        assert leads[0].status is LeadStatus.REQUESTED
        assert leads[1].status is LeadStatus.IN_NEGOTIATION
        assert leads[2].status is LeadStatus.CONTRACT_SIGNED
        assert leads[2].status_updated_at == "2024-06-09"
        assert leads[4].date is None
        assert leads[4].channel == "Telefon"

    def test_closed_leads_are_not_filtered_when_mapping(self, pending_lead_rows):
        leads = map_pending_leads(pending_lead_rows)
        assert any(lead.owner_name == "Rhein Mobil" for lead in leads)


class TestBuildRow:
    def test_aligns_values_to_header(self):
        header = ["Vermieter", "Fahrzeug Label", "Typ", "PLZ", "Unbekannte Spalte", "Latitude"]
        row = build_row(
            header,
            {
                "vermieter_name": "Nordlicht",
                "fahrzeug_label": "Crafter",
                "fahrzeugtyp": "Transporter",
                "plz": "10178",
                "latitude": 52.52,
            },
            INVENTORY_WRITE_SYNONYMS,
        )
        assert row == ["Nordlicht", "Crafter", "Transporter", "10178", "", 52.52]

    def test_none_values_become_blank(self):
        row = build_row(["Latitude", "Longitude"], {"latitude": None, "longitude": 13.4}, {})
        assert row == ["", 13.4]
