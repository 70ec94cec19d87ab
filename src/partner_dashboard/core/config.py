"""
Application configuration settings loaded from config.yaml
"""
import os
import yaml
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, field_validator


class SheetTablesConfig(BaseModel):
    """Names of the spreadsheet tabs backing each table"""
    inventory: str = "inventory"
    inquiries: str = "inquiries"
    owners: str = "owners"
    missing_inventory: str = "missing inventory"
    pending_leads: str = "listing_requests"


class SheetRangesConfig(BaseModel):
    """Optional A1 ranges restricting a table read (e.g. "A:R")"""
    inventory: Optional[str] = None
    inquiries: Optional[str] = None
    owners: Optional[str] = None
    missing_inventory: Optional[str] = None
    pending_leads: Optional[str] = None


class SheetsConfig(BaseModel):
    """Google Sheets REST API configuration"""
    base_url: str = "https://sheets.googleapis.com/v4"
    spreadsheet_id: Optional[str] = None
    api_key: Optional[str] = None  # Read-only access to shared sheets
    access_token: Optional[str] = None  # OAuth bearer token, required for writes
    timeout: int = 30
    tables: SheetTablesConfig = SheetTablesConfig()
    ranges: SheetRangesConfig = SheetRangesConfig()


class GeocodingConfig(BaseModel):
    """Nominatim geocoder configuration"""
    enabled: bool = True
    base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "partner-dashboard (ops@example.com)"
    contact_email: Optional[str] = None
    accept_language: str = "de,en"
    timeout: int = 15


class Settings(BaseModel):
    """Application settings loaded from config.yaml"""

    # Project settings
    project_name: str = "Partner Dashboard API"
    version: str = "1.0.0"
    description: str = "KPI aggregation for the rental partner network"
    api_v1_str: str = "/api/v1"

    # Spreadsheet datastore
    sheets: SheetsConfig = SheetsConfig()

    # Live geocoding
    geocoding: GeocodingConfig = GeocodingConfig()

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS settings
    backend_cors_origins: List[str] = []

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # Response cache header for the KPI endpoint
    kpi_cache_control: str = "s-maxage=300, stale-while-revalidate=60"

    # Logging
    log_level: str = "INFO"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml file. If None, looks for it in:
                    1. The PARTNER_DASHBOARD_CONFIG environment variable
                    2. Current directory
                    3. Project root (src/../config.yaml)

    Returns:
        Settings: Loaded and validated settings
    """
    if config_path is None:
        env_path = os.environ.get("PARTNER_DASHBOARD_CONFIG")
        current_dir = Path.cwd() / "config.yaml"
        project_root = Path(__file__).parent.parent.parent.parent / "config.yaml"
        if env_path:
            config_path = env_path
        elif current_dir.exists():
            config_path = str(current_dir)
        elif project_root.exists():
            config_path = str(project_root)
        else:
            raise FileNotFoundError(
                "config.yaml not found. Please create config.yaml in the project root."
            )

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f)

    if config_data is None:
        raise ValueError("Configuration file is empty or invalid")

    return Settings(**config_data)


# Load settings on module import
settings = load_config()
