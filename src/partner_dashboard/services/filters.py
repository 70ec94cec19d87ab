"""
Dimension and radius filters over reconciled inventory and inquiries
"""
from typing import List, Optional, Sequence

from partner_dashboard.schemas.entities import Coordinate, InquiryEntry, InventoryEntry
from partner_dashboard.schemas.kpis import KpiFilterSpec
from partner_dashboard.services.geo import (
    fallback_countries,
    haversine_km,
    item_coordinates,
    resolve_city_with_fallback,
)
from partner_dashboard.utils.helpers import normalize_value
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


def matches(source: Optional[str], target: Optional[str]) -> bool:
    """Case and diacritic insensitive equality; an unset target matches anything"""
    if not target:
        return True
    return normalize_value(source) == normalize_value(target)


def resolve_radius_center(
    inventory: Sequence[InventoryEntry], spec: KpiFilterSpec
) -> Optional[Coordinate]:
    """
    Anchor point of the radius filter.

    Priority: the custom location, then the first vehicle in the selected
    country and city with resolvable coordinates, then the gazetteer entry
    of the selected city. Returns None when no radius is requested or no
    anchor can be found.
    """
    if not spec.radius_km:
        return None
    if spec.custom_location is not None:
        return Coordinate(
            latitude=spec.custom_location.latitude,
            longitude=spec.custom_location.longitude,
        )
    if not spec.city:
        return None

    countries = fallback_countries(spec.country)
    for entry in inventory:
        if not matches(entry.city, spec.city) or not matches(entry.country, spec.country):
            continue
        coordinates = item_coordinates(entry, countries)
        if coordinates is not None:
            logger.debug(f"Radius center from vehicle row {entry.sheet_row_index}")
            return coordinates

    return resolve_city_with_fallback(spec.city, countries)


def radius_active(spec: KpiFilterSpec, center: Optional[Coordinate]) -> bool:
    return bool(spec.radius_km) and center is not None


def filter_inventory(
    inventory: Sequence[InventoryEntry],
    spec: KpiFilterSpec,
    center: Optional[Coordinate] = None,
) -> List[InventoryEntry]:
    """
    Reduce the inventory to the requested view.

    With an active radius the city equality is replaced by a distance test
    and vehicles without resolvable coordinates are excluded.

    Args:
        inventory: Reconciled inventory
        spec: Requested filters
        center: Radius anchor from ``resolve_radius_center``

    Returns:
        Matching entries in input order
    """
    use_radius = radius_active(spec, center)
    countries = fallback_countries(spec.country)

    kept = []
    for entry in inventory:
        if not matches(entry.country, spec.country):
            continue
        if not matches(entry.region, spec.region):
            continue
        if not matches(entry.vehicle_type, spec.vehicle_type):
            continue
        if not matches(entry.manufacturer, spec.manufacturer):
            continue
        if use_radius:
            coordinates = item_coordinates(entry, countries)
            if coordinates is None or haversine_km(coordinates, center) > spec.radius_km:
                continue
        elif not matches(entry.city, spec.city):
            continue
        kept.append(entry)
    return kept


def filter_inquiries(
    inquiries: Sequence[InquiryEntry],
    spec: KpiFilterSpec,
    use_radius: bool = False,
) -> List[InquiryEntry]:
    """Inquiries matching the vehicle type, and the city unless a radius applies"""
    kept = []
    for inquiry in inquiries:
        if not matches(inquiry.vehicle_type, spec.vehicle_type):
            continue
        if not use_radius and not matches(inquiry.city, spec.city):
            continue
        kept.append(inquiry)
    return kept
