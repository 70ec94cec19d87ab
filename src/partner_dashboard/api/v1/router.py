"""
Main API router for v1 endpoints
"""
from fastapi import APIRouter

from partner_dashboard.api.v1.endpoints import kpis, partners

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(kpis.router, tags=["kpis"])
api_router.include_router(partners.router, tags=["partners"])
