"""
Pydantic models for geocoder responses
"""
from pydantic import BaseModel


class GeocodeResult(BaseModel):
    """A resolved address"""
    latitude: float
    longitude: float
    label: str
