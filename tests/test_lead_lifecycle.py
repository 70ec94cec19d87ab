"""Tests for pending lead selection."""

from datetime import datetime

import pytest

from partner_dashboard.schemas.entities import LeadStatus, OwnerContact, PendingLeadEntry
from partner_dashboard.services.lead_lifecycle import (
    is_closed,
    open_pending_leads,
    sort_leads,
    within_retention,
)
from partner_dashboard.services.row_mapper import map_inventory, map_owners, map_pending_leads


def make_lead(**overrides) -> PendingLeadEntry:
    values = {"owner_name": "Spree Rent", "sheet_row_index": 2}
    values.update(overrides)
    return PendingLeadEntry(**values)


class TestRetention:
    def test_closed_statuses(self):
        assert is_closed(LeadStatus.CONTRACT_SIGNED)
        assert is_closed(LeadStatus.REJECTED)
        assert not is_closed(LeadStatus.IN_NEGOTIATION)
        assert not is_closed(None)

    @pytest.mark.parametrize(
        "updated_at, kept",
        [("2024-06-09", True), ("2024-06-08", True), ("2024-06-07", False)],
    )
    def test_closed_lead_window(self, now, updated_at, kept):
        lead = make_lead(status=LeadStatus.CONTRACT_SIGNED, status_updated_at=updated_at)
        assert within_retention(lead, now) is kept

    def test_falls_back_to_lead_date(self, now):
        lead = make_lead(status=LeadStatus.REJECTED, date="2024-05-01")
        assert not within_retention(lead, now)

    def test_missing_or_invalid_date_keeps_lead(self, now):
        assert within_retention(make_lead(status=LeadStatus.REJECTED), now)
        assert within_retention(make_lead(status=LeadStatus.REJECTED, status_updated_at="letzte Woche"), now)

    def test_open_leads_never_expire(self, now):
        assert within_retention(make_lead(status=LeadStatus.REQUESTED, date="2020-01-01"), now)


class TestSortLeads:
    def test_undated_first_then_newest_then_name(self):
        leads = [
            make_lead(owner_name="Beta", date="2024-06-01"),
            make_lead(owner_name="Zulu"),
            make_lead(owner_name="Alpha", date="2024-06-01"),
            make_lead(owner_name="Gamma", date="2024-06-10"),
            make_lead(owner_name="Äpfel"),
        ]
        assert [lead.owner_name for lead in sort_leads(leads)] == ["Äpfel", "Zulu", "Gamma", "Alpha", "Beta"]


class TestOpenPendingLeads:
    def test_fixture_workbook(self, pending_lead_rows, owner_rows, inventory_rows, now):
        leads = open_pending_leads(
            map_pending_leads(pending_lead_rows),
            map_owners(owner_rows),
            map_inventory(inventory_rows),
            now,
        )
        assert [lead.owner_name for lead in leads] == ["Alster Camper", "Spree Rent", "Elbe Vans"]

    def test_open_lead_of_existing_owner_is_dropped(self, now):
        owners = [OwnerContact(owner_name="Meyer Mobil", sheet_row_index=2)]
        leads = [make_lead(owner_name="MEYER MOBIL ", status=LeadStatus.REQUESTED)]
        assert open_pending_leads(leads, owners, [], now) == []

    def test_owner_known_from_inventory_only(self, inventory_rows, now):
        leads = [make_lead(owner_name="Alpen Camper", status=LeadStatus.IN_NEGOTIATION)]
        assert open_pending_leads(leads, [], map_inventory(inventory_rows), now) == []

    def test_closed_lead_of_existing_owner_is_kept(self, now):
        owners = [OwnerContact(owner_name="Meyer Mobil", sheet_row_index=2)]
        leads = [
            make_lead(owner_name="Meyer Mobil", status=LeadStatus.CONTRACT_SIGNED, status_updated_at="2024-06-09")
        ]
        assert len(open_pending_leads(leads, owners, [], now)) == 1

    @pytest.mark.parametrize("days_ago, expected", [(6, 1), (8, 0)])
    def test_contract_signed_ages_out(self, days_ago, expected):
        now = datetime(2024, 6, 15)
        updated_at = datetime(2024, 6, 15 - days_ago).date().isoformat()
        leads = [make_lead(status=LeadStatus.CONTRACT_SIGNED, status_updated_at=updated_at)]
        assert len(open_pending_leads(leads, [], [], now)) == expected

    def test_names_are_trimmed(self, now):
        leads = open_pending_leads([make_lead(owner_name="  Havel Vans ")], [], [], now)
        assert leads[0].owner_name == "Havel Vans"
