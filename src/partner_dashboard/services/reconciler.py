"""
Joins inventory rows to owner contacts
"""
from typing import Dict, List, Optional, Sequence

from partner_dashboard.schemas.entities import InventoryEntry, OwnerContact
from partner_dashboard.utils.helpers import normalize_value


def owner_key(entry: InventoryEntry) -> str:
    """Grouping key of a vehicle's owner: trimmed id, else normalized name"""
    if entry.owner_id and entry.owner_id.strip():
        return entry.owner_id.strip()
    return normalize_value(entry.owner_name)


class OwnerIndex:
    """Owner contacts indexed by id and by normalized name"""

    def __init__(self, by_id: Dict[str, OwnerContact], by_name: Dict[str, OwnerContact]):
        self.by_id = by_id
        self.by_name = by_name

    @classmethod
    def from_owners(cls, owners: Sequence[OwnerContact]) -> "OwnerIndex":
        # Later rows win on duplicate ids or names
        by_id: Dict[str, OwnerContact] = {}
        by_name: Dict[str, OwnerContact] = {}
        for owner in owners:
            if owner.owner_id and owner.owner_id.strip():
                by_id[owner.owner_id.strip()] = owner
            by_name[normalize_value(owner.owner_name)] = owner
        return cls(by_id, by_name)

    def resolve(self, entry: InventoryEntry) -> Optional[OwnerContact]:
        """Owner of ``entry``; an id match takes priority over a name match"""
        if entry.owner_id:
            owner = self.by_id.get(entry.owner_id.strip())
            if owner is not None:
                return owner
        return self.by_name.get(normalize_value(entry.owner_name))

    def has_name(self, name: Optional[str]) -> bool:
        return normalize_value(name) in self.by_name


def attach_owner(entry: InventoryEntry, owner: OwnerContact) -> InventoryEntry:
    """Copy of ``entry`` carrying the owner's contact snapshot"""
    owner_region = (owner.region or "").strip()
    return entry.model_copy(
        update={
            "region": owner_region or entry.region.strip(),
            "owner_phone": owner.phone,
            "owner_email": owner.email,
            "owner_website": owner.website,
            "owner_address": owner.address or entry.owner_address,
            "owner_international_customers": owner.international_customers,
            "owner_commission": owner.commission,
            "owner_ranking": owner.ranking,
            "owner_experience_years": owner.experience_years,
            "owner_notes": owner.notes,
            "owner_last_change": owner.last_change_date,
            "owner_region": owner.region,
            "owner_city": owner.city,
            "owner_postal_code": owner.postal_code,
            "owner_street": owner.street,
            "owner_sheet_row_index": owner.sheet_row_index,
        }
    )


def reconcile_inventory(
    inventory: Sequence[InventoryEntry],
    owners: Sequence[OwnerContact],
    index: Optional[OwnerIndex] = None,
) -> List[InventoryEntry]:
    """
    Attach owner contacts to every vehicle.

    Vehicles without a matching owner are returned unchanged; none are
    dropped. The inputs are never modified.

    Args:
        inventory: Mapped inventory rows
        owners: Mapped owner rows
        index: Prebuilt index over ``owners``, built when omitted

    Returns:
        New list of inventory entries
    """
    index = index or OwnerIndex.from_owners(owners)
    reconciled = []
    for entry in inventory:
        owner = index.resolve(entry)
        reconciled.append(attach_owner(entry, owner) if owner is not None else entry)
    return reconciled
