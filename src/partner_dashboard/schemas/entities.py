"""
Typed records mapped from the partner workbook tables
"""
from enum import Enum
from typing import Optional
from datetime import datetime
from partner_dashboard.schemas.base import EntitySchema


class LeadStatus(str, Enum):
    """Acquisition state of a pending lead"""
    REQUESTED = "Requested"
    IN_NEGOTIATION = "In Negotiation"
    CONTRACT_SIGNED = "Contract Signed"
    REJECTED = "Rejected"

    @property
    def is_closed(self) -> bool:
        return self in (LeadStatus.CONTRACT_SIGNED, LeadStatus.REJECTED)


class Coordinate(EntitySchema):
    """A WGS84 point"""
    latitude: float
    longitude: float


class InventoryEntry(EntitySchema):
    """One listed vehicle, optionally enriched with its owner's contact data"""
    country: str = ""
    region: str = ""
    owner_id: Optional[str] = None
    owner_name: str
    vehicle_id: Optional[str] = None
    vehicle_label: str
    vehicle_type: str = ""
    city: str = ""
    manufacturer: Optional[str] = None
    listed_at: Optional[datetime] = None
    offboarded_at: Optional[datetime] = None
    status: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None
    sheet_row_index: int

    # Owner snapshot, filled in by the reconciler
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    owner_website: Optional[str] = None
    owner_address: Optional[str] = None
    owner_international_customers: Optional[str] = None
    owner_commission: Optional[str] = None
    owner_ranking: Optional[str] = None
    owner_experience_years: Optional[str] = None
    owner_notes: Optional[str] = None
    owner_last_change: Optional[str] = None
    owner_region: Optional[str] = None
    owner_city: Optional[str] = None
    owner_postal_code: Optional[str] = None
    owner_street: Optional[str] = None
    owner_sheet_row_index: Optional[int] = None


class OwnerContact(EntitySchema):
    """One rental partner"""
    owner_id: Optional[str] = None
    owner_name: str
    country: str = ""
    region: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    street: Optional[str] = None
    international_customers: Optional[str] = None
    commission: Optional[str] = None
    ranking: Optional[str] = None
    experience_years: Optional[str] = None
    notes: Optional[str] = None
    last_change_date: Optional[str] = None
    partner_since: Optional[str] = None
    status: Optional[str] = None
    sheet_row_index: int


class InquiryEntry(EntitySchema):
    """Request and booking counts for one vehicle"""
    vehicle_id: str = ""
    vehicle_type: str = ""
    city: str = ""
    requests: int = 0
    bookings: int = 0
    created_at: Optional[datetime] = None


class MissingInventoryEntry(EntitySchema):
    """Unmet demand for a vehicle type in a city"""
    country: str
    region: str = ""
    city: str
    vehicle_type: str
    count: int
    priority: Optional[str] = None
    comment: Optional[str] = None


class PendingLeadEntry(EntitySchema):
    """A prospective partner in acquisition"""
    date: Optional[str] = None
    channel: Optional[str] = None
    region: Optional[str] = None
    owner_name: str
    vehicle_label: Optional[str] = None
    manufacturer: Optional[str] = None
    vehicle_type: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    comment: Optional[str] = None
    street: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    international_customers: Optional[str] = None
    commission: Optional[str] = None
    ranking: Optional[str] = None
    experience_years: Optional[str] = None
    owner_notes: Optional[str] = None
    status: LeadStatus = LeadStatus.REQUESTED
    status_updated_at: Optional[str] = None
    sheet_row_index: int
