"""
Open-lead selection for the pending leads panel
"""
from typing import List, Optional, Sequence
from datetime import datetime

from partner_dashboard.core.constants import CLOSED_LEAD_RETENTION_DAYS
from partner_dashboard.schemas.entities import (
    InventoryEntry,
    LeadStatus,
    OwnerContact,
    PendingLeadEntry,
)
from partner_dashboard.services.aggregator import calendar_days_between
from partner_dashboard.services.row_mapper import parse_date
from partner_dashboard.utils.helpers import collation_key, normalize_value


def is_closed(status: Optional[LeadStatus]) -> bool:
    return status is not None and status.is_closed


def within_retention(lead: PendingLeadEntry, now: datetime) -> bool:
    """
    Whether a lead is still inside its visibility window.

    Open leads always are. Closed leads stay for seven calendar days after
    their status change (or their own date); a missing or unparsable
    reference date keeps the lead.
    """
    if not is_closed(lead.status):
        return True
    reference = parse_date(lead.status_updated_at or lead.date)
    if reference is None:
        return True
    return calendar_days_between(now, reference) <= CLOSED_LEAD_RETENTION_DAYS


def sort_leads(leads: Sequence[PendingLeadEntry]) -> List[PendingLeadEntry]:
    """Undated leads first, then most recent first; ties by owner name"""
    ordered = sorted(leads, key=lambda lead: collation_key(lead.owner_name))
    ordered.sort(key=lambda lead: lead.date or "", reverse=True)
    ordered.sort(key=lambda lead: bool(lead.date))
    return ordered


def open_pending_leads(
    leads: Sequence[PendingLeadEntry],
    owners: Sequence[OwnerContact],
    inventory: Sequence[InventoryEntry],
    now: datetime,
) -> List[PendingLeadEntry]:
    """
    Leads that should still be shown as pending.

    An open lead whose owner already exists as a partner (in the owners
    table or on a vehicle) has converted and is dropped. Closed leads skip
    that check but age out after the retention window.

    Args:
        leads: Mapped pending leads
        owners: Mapped owner contacts
        inventory: Inventory entries, unfiltered
        now: Reference time for the retention window

    Returns:
        Remaining leads in display order
    """
    known_owners = {normalize_value(owner.owner_name) for owner in owners}
    known_owners.update(normalize_value(entry.owner_name) for entry in inventory)
    known_owners.discard("")

    remaining = []
    for lead in leads:
        name = lead.owner_name.strip()
        key = normalize_value(name)
        if not key:
            continue
        if not is_closed(lead.status) and key in known_owners:
            continue
        if not within_retention(lead, now):
            continue
        remaining.append(lead if name == lead.owner_name else lead.model_copy(update={"owner_name": name}))
    return sort_leads(remaining)
