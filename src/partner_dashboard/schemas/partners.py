"""
Write-path request and response schemas
"""
from typing import List, Optional
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from partner_dashboard.external.geocoding.models import GeocodeResult
from partner_dashboard.schemas.base import BaseSchema


class RequestSchema(BaseSchema):
    """Request body: camelCase keys, surrounding whitespace stripped"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class OwnerInput(RequestSchema):
    name: str = ""
    country: str = ""
    region: str = ""
    city: str = ""
    street: str = ""
    postal_code: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    international_customers: str = ""
    commission: str = ""
    ranking: str = ""
    experience_years: str = ""
    notes: str = ""
    last_change_iso: Optional[str] = None


class VehicleInput(RequestSchema):
    label: str = ""
    vehicle_type: str = ""
    manufacturer: str = ""
    status: str = ""
    notes: str = ""


class PartnerCreate(RequestSchema):
    """A new partner with the vehicles it lists"""
    owner: OwnerInput
    vehicles: List[VehicleInput] = []


class PartnerDelete(RequestSchema):
    owner_name: str = ""


class VehicleDelete(RequestSchema):
    row_index: int


class MissingInventoryCreate(RequestSchema):
    """A demand gap reported for a city"""
    city: str = ""
    vehicle_type: str = ""
    count: Optional[int] = None
    priority: str = ""
    comment: str = ""
    region: str = ""
    country: str = ""


class LeadInput(RequestSchema):
    landlord: str = ""
    city: str = ""
    date: str = ""
    channel: str = ""
    region: str = ""
    country: str = ""
    comment: str = ""


class LeadVehicleInput(RequestSchema):
    vehicle_label: str = ""
    manufacturer: str = ""
    vehicle_type: str = ""
    comment: str = ""


class ListingRequestCreate(RequestSchema):
    """A prospective partner and the vehicles they offer"""
    lead: LeadInput
    vehicles: List[LeadVehicleInput] = []


class GeocodeRequest(RequestSchema):
    country: str = ""
    city: str = ""
    postal_code: str = ""
    region: str = ""


class WriteResponse(BaseSchema):
    success: bool = True


class PartnerCreateResponse(WriteResponse):
    coordinates: Optional[GeocodeResult] = None


class PartnerDeleteResponse(WriteResponse):
    removed_inventory_rows: int = 0
    removed_owner_rows: int = 0


class GeocodeResponse(BaseSchema):
    latitude: float
    longitude: float
    label: str
    city: str
    postal_code: str = ""
    country: str
    region: str = ""
