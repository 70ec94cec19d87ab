"""
Partner workbook write endpoints
"""
from fastapi import APIRouter, Depends, HTTPException

from partner_dashboard.core.dependencies import get_partner_service
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
from partner_dashboard.services.partner_service import PartnerService
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


async def _run(action: str, call):
    try:
        return await call
    except HTTPException as e:
        if e.status_code >= 500:
            logger.error(f"[red]Error during {action}:[/red] {e.detail}")
        raise
    except Exception as e:
        logger.error(f"[red]Error during {action}:[/red] {e}")
        raise HTTPException(status_code=500, detail="Operation failed")


@router.post("/partners", response_model=PartnerCreateResponse)
async def create_partner(
    payload: PartnerCreate,
    service: PartnerService = Depends(get_partner_service),
):
    """Create a partner with its vehicles"""
    return await _run("partner creation", service.create_partner(payload))


@router.delete("/partners", response_model=PartnerDeleteResponse)
async def delete_partner(
    payload: PartnerDelete,
    service: PartnerService = Depends(get_partner_service),
):
    """Delete every vehicle and owner row of a partner"""
    return await _run("partner deletion", service.delete_partner(payload.owner_name))


@router.delete("/inventory", response_model=WriteResponse)
async def delete_vehicle(
    payload: VehicleDelete,
    service: PartnerService = Depends(get_partner_service),
):
    """Delete a single vehicle row"""
    return await _run("vehicle deletion", service.delete_vehicle(payload.row_index))


@router.post("/missing-inventory", response_model=WriteResponse)
async def add_missing_inventory(
    payload: MissingInventoryCreate,
    service: PartnerService = Depends(get_partner_service),
):
    """Report unmet demand for a vehicle type in a city"""
    return await _run("missing inventory entry", service.add_missing_inventory(payload))


@router.post("/listing-requests", response_model=WriteResponse)
async def add_listing_request(
    payload: ListingRequestCreate,
    service: PartnerService = Depends(get_partner_service),
):
    """Record a new pending lead"""
    return await _run("listing request", service.add_listing_request(payload))


@router.post("/geocode", response_model=GeocodeResponse)
async def geocode(
    payload: GeocodeRequest,
    service: PartnerService = Depends(get_partner_service),
):
    """Resolve a city to coordinates"""
    return await _run("geocoding", service.geocode(payload))
