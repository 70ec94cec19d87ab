"""
KPI API endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from partner_dashboard.core.config import settings
from partner_dashboard.core.dependencies import get_kpi_service
from partner_dashboard.schemas.kpis import CustomLocation, KpiFilterSpec, KpiPayload
from partner_dashboard.services.kpi_service import KpiService
from partner_dashboard.utils.exceptions import InvalidRequestError
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


def parse_filter_spec(
    country: Optional[str] = Query(None),
    region: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    vehicle_type: Optional[str] = Query(None, alias="vehicleType"),
    manufacturer: Optional[str] = Query(None),
    radius: Optional[float] = Query(None, ge=0),
    custom_lat: Optional[float] = Query(None, alias="customLat"),
    custom_lng: Optional[float] = Query(None, alias="customLng"),
    custom_label: Optional[str] = Query(None, alias="customLabel"),
) -> KpiFilterSpec:
    """
    Build the filter spec from query parameters.
    A custom location is only used when both coordinates are given.
    """
    custom_location = None
    if custom_lat is not None and custom_lng is not None:
        if not (-90 <= custom_lat <= 90 and -180 <= custom_lng <= 180):
            raise InvalidRequestError("Custom location is out of range")
        custom_location = CustomLocation(
            latitude=custom_lat, longitude=custom_lng, label=custom_label or None
        )

    return KpiFilterSpec(
        country=country or None,
        region=region or None,
        city=city or None,
        vehicle_type=vehicle_type or None,
        manufacturer=manufacturer or None,
        radius_km=radius or None,
        custom_location=custom_location,
    )


@router.get("/kpis", response_model=KpiPayload, response_model_by_alias=True)
async def get_kpis(
    response: Response,
    spec: KpiFilterSpec = Depends(parse_filter_spec),
    service: KpiService = Depends(get_kpi_service),
):
    """
    Get the KPI payload for the requested view.

    Args:
        response: Outgoing response, used to set cache headers
        spec: Filters parsed from the query string
        service: KPI service

    Returns:
        KpiPayload
    """
    try:
        payload = await service.get_kpis(spec)
        response.headers["Cache-Control"] = settings.kpi_cache_control
        return payload
    except HTTPException as e:
        logger.error(f"[red]Error loading KPIs:[/red] {e.detail}")
        raise
    except Exception as e:
        logger.error(f"[red]Error loading KPIs:[/red] {e}")
        raise HTTPException(status_code=500, detail="Failed to load KPIs")
