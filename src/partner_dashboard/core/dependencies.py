"""
Shared dependencies for FastAPI routes
"""
from fastapi import Depends, Request

from partner_dashboard.external.geocoding.client import GeocodingClient
from partner_dashboard.external.sheets.client import SheetsClient
from partner_dashboard.services.kpi_service import KpiService
from partner_dashboard.services.partner_service import PartnerService


def get_sheets_client(request: Request) -> SheetsClient:
    """Process-wide Sheets client created in the application lifespan"""
    return request.app.state.sheets_client


def get_geocoding_client(request: Request) -> GeocodingClient:
    """Process-wide geocoding client created in the application lifespan"""
    return request.app.state.geocoding_client


def get_kpi_service(sheets_client: SheetsClient = Depends(get_sheets_client)) -> KpiService:
    return KpiService(sheets_client)


def get_partner_service(
    sheets_client: SheetsClient = Depends(get_sheets_client),
    geocoding_client: GeocodingClient = Depends(get_geocoding_client),
) -> PartnerService:
    return PartnerService(sheets_client, geocoding_client)
