"""
KPI request and response schemas
"""
from typing import Dict, List, Optional
from pydantic import Field
from partner_dashboard.schemas.base import BaseSchema
from partner_dashboard.schemas.entities import (
    InventoryEntry,
    MissingInventoryEntry,
    PendingLeadEntry,
)


class CustomLocation(BaseSchema):
    """Operator supplied radius center"""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    label: Optional[str] = None


class KpiFilterSpec(BaseSchema):
    """Filters applied to the KPI view; unset dimensions match everything"""
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    vehicle_type: Optional[str] = None
    manufacturer: Optional[str] = None
    radius_km: Optional[float] = Field(default=None, ge=0)
    custom_location: Optional[CustomLocation] = None


class Totals(BaseSchema):
    vehicles: int = 0
    owners: int = 0
    inquiries: int = 0
    rentals: int = 0


class CountryAverage(BaseSchema):
    country: str
    average: float


class CountryBreakdown(BaseSchema):
    """Vehicle and owner counts keyed by country label"""
    vehicles: Dict[str, int] = {}
    owners: Dict[str, int] = {}
    average_vehicles_per_owner: List[CountryAverage] = []
    vehicles_by_region: Dict[str, Dict[str, int]] = {}


class Deltas(BaseSchema):
    vehicles: int = 0
    owners: int = 0


class OnboardingRow(BaseSchema):
    """A vehicle listed within the onboarding window"""
    vehicle_id: Optional[str] = None
    vehicle_label: str
    owner_name: str
    country: str
    city: str
    vehicle_type: str
    manufacturer: Optional[str] = None
    age_days: int
    listed_at: str


class InquiryTotals(BaseSchema):
    requests: int = 0
    bookings: int = 0


class InquirySummary(BaseSchema):
    by_vehicle_type: Dict[str, InquiryTotals] = {}


class LocationOwner(BaseSchema):
    key: str
    id: Optional[str] = None
    name: str


class GeoLocationPoint(BaseSchema):
    """Vehicles sharing a rounded coordinate"""
    latitude: float
    longitude: float
    city: str
    country: str
    vehicles: int
    owners: List[LocationOwner]
    owner_count: int


class GeoSummary(BaseSchema):
    locations: List[GeoLocationPoint] = []


class KpiMeta(BaseSchema):
    """Filter facets and row-count diagnostics"""
    available_countries: List[str] = []
    available_regions: List[str] = []
    available_cities: List[str] = []
    available_vehicle_types: List[str] = []
    available_manufacturers: List[str] = []
    total_inventory_rows: int = 0
    filtered_inventory_rows: int = 0
    custom_location: Optional[CustomLocation] = None


class KpiPayload(BaseSchema):
    """Response envelope of the KPI endpoint"""
    totals: Totals
    by_country: CountryBreakdown
    deltas: Deltas = Deltas()
    onboarding: List[OnboardingRow] = []
    inquiries: InquirySummary
    inventory: List[InventoryEntry] = []
    geo: GeoSummary
    missing_inventory: List[MissingInventoryEntry] = []
    pending_leads: List[PendingLeadEntry] = []
    meta: KpiMeta
