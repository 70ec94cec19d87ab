"""
Pydantic schemas for entities, KPI payloads and request/response validation
"""
from partner_dashboard.schemas.base import BaseSchema, EntitySchema
from partner_dashboard.schemas.entities import (
    Coordinate,
    InquiryEntry,
    InventoryEntry,
    LeadStatus,
    MissingInventoryEntry,
    OwnerContact,
    PendingLeadEntry,
)
from partner_dashboard.schemas.kpis import (
    CustomLocation,
    GeoLocationPoint,
    KpiFilterSpec,
    KpiMeta,
    KpiPayload,
)
from partner_dashboard.schemas.partners import (
    GeocodeRequest,
    GeocodeResponse,
    ListingRequestCreate,
    MissingInventoryCreate,
    PartnerCreate,
    PartnerCreateResponse,
    PartnerDelete,
    PartnerDeleteResponse,
    VehicleDelete,
    WriteResponse,
)

__all__ = [
    # Base schemas
    "BaseSchema",
    "EntitySchema",
    # Sheet entities
    "Coordinate",
    "InquiryEntry",
    "InventoryEntry",
    "LeadStatus",
    "MissingInventoryEntry",
    "OwnerContact",
    "PendingLeadEntry",
    # KPI schemas
    "CustomLocation",
    "GeoLocationPoint",
    "KpiFilterSpec",
    "KpiMeta",
    "KpiPayload",
    # Write-path schemas
    "GeocodeRequest",
    "GeocodeResponse",
    "ListingRequestCreate",
    "MissingInventoryCreate",
    "PartnerCreate",
    "PartnerCreateResponse",
    "PartnerDelete",
    "PartnerDeleteResponse",
    "VehicleDelete",
    "WriteResponse",
]
