"""
FastAPI Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from partner_dashboard.core.config import settings
from partner_dashboard.api.v1.router import api_router
from partner_dashboard.external.geocoding.client import GeocodingClient
from partner_dashboard.external.sheets.client import SheetsClient
from partner_dashboard.utils.logging import get_logger, app_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Creates the shared Sheets and geocoding clients on startup and closes
    them on shutdown.
    """
    # Startup
    app_logger.info("🚀 [bold green]Initializing application...[/bold green]")
    app.state.sheets_client = SheetsClient()
    app.state.geocoding_client = GeocodingClient()
    if not settings.sheets.spreadsheet_id:
        app_logger.warning("⚠️ [yellow]sheets.spreadsheet_id is not set, KPI requests will fail[/yellow]")
    app_logger.info("✅ [bold green]Application initialized successfully[/bold green]")

    yield

    # Shutdown
    app_logger.info("🛑 [yellow]Shutting down application...[/yellow]")
    try:
        await app.state.sheets_client.aclose()
        await app.state.geocoding_client.aclose()
        app_logger.info("✅ [bold green]Application shut down successfully[/bold green]")
    except Exception as e:
        app_logger.error(f"❌ [bold red]Error during application shutdown:[/bold red] {e}")


app = FastAPI(
    title=settings.project_name,
    version=settings.version,
    description=settings.description,
    openapi_url=f"{settings.api_v1_str}/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
if settings.backend_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.backend_cors_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include API router
app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "API is running", "version": settings.version}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "sheets": {
            "spreadsheet_configured": bool(settings.sheets.spreadsheet_id),
            "tables": settings.sheets.tables.model_dump(),
        },
        "geocoding": {"enabled": settings.geocoding.enabled},
    }


def run():
    """Serve the API with uvicorn on the configured host and port"""
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
