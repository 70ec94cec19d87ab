"""
KPI reductions over the filtered view.

Every function here is a pure reduction: inputs are read, never modified,
and results are fresh schema objects.
"""
from typing import Dict, Iterable, List, Optional, Sequence
from datetime import datetime

from partner_dashboard.core.constants import (
    GEO_BUCKET_PRECISION,
    ONBOARDING_WINDOW_DAYS,
    UNKNOWN_LABEL,
    UNKNOWN_OWNER_LABEL,
)
from partner_dashboard.schemas.entities import InquiryEntry, InventoryEntry
from partner_dashboard.schemas.kpis import (
    CountryAverage,
    CountryBreakdown,
    GeoLocationPoint,
    InquiryTotals,
    LocationOwner,
    OnboardingRow,
    Totals,
)
from partner_dashboard.services.filters import matches
from partner_dashboard.services.reconciler import owner_key
from partner_dashboard.utils.helpers import collation_key


def compute_totals(inventory: Sequence[InventoryEntry], inquiries: Sequence[InquiryEntry]) -> Totals:
    return Totals(
        vehicles=len(inventory),
        owners=len({owner_key(entry) for entry in inventory}),
        inquiries=sum(inquiry.requests for inquiry in inquiries),
        rentals=sum(inquiry.bookings for inquiry in inquiries),
    )


def group_by_country(inventory: Sequence[InventoryEntry]) -> CountryBreakdown:
    """
    Vehicle and distinct owner counts per country, and vehicles per region.

    Blank countries and regions are grouped under "Unbekannt".
    """
    vehicles: Dict[str, int] = {}
    owners: Dict[str, set] = {}
    by_region: Dict[str, Dict[str, int]] = {}

    for entry in inventory:
        country = entry.country or UNKNOWN_LABEL
        region = entry.region or UNKNOWN_LABEL
        vehicles[country] = vehicles.get(country, 0) + 1
        regions = by_region.setdefault(country, {})
        regions[region] = regions.get(region, 0) + 1
        owners.setdefault(country, set()).add(owner_key(entry))

    averages = [
        CountryAverage(
            country=country,
            average=round(vehicles.get(country, 0) / len(keys), 2) if keys else 0,
        )
        for country, keys in owners.items()
    ]
    return CountryBreakdown(
        vehicles=vehicles,
        owners={country: len(keys) for country, keys in owners.items()},
        average_vehicles_per_owner=averages,
        vehicles_by_region=by_region,
    )


def calendar_days_between(now: datetime, then: datetime) -> int:
    """Whole calendar days from ``then`` to ``now``"""
    return (now.date() - then.date()).days


def compute_onboarding(inventory: Sequence[InventoryEntry], now: datetime) -> List[OnboardingRow]:
    """Vehicles listed within the onboarding window, newest first"""
    rows = []
    for entry in inventory:
        if entry.listed_at is None:
            continue
        age = calendar_days_between(now, entry.listed_at)
        if not 0 <= age < ONBOARDING_WINDOW_DAYS:
            continue
        rows.append(
            OnboardingRow(
                vehicle_id=entry.vehicle_id,
                vehicle_label=entry.vehicle_label,
                owner_name=entry.owner_name,
                country=entry.country,
                city=entry.city,
                vehicle_type=entry.vehicle_type,
                manufacturer=entry.manufacturer,
                age_days=age,
                listed_at=entry.listed_at.isoformat(),
            )
        )
    rows.sort(key=lambda row: row.age_days)
    return rows


def inquiries_by_vehicle_type(inquiries: Sequence[InquiryEntry]) -> Dict[str, InquiryTotals]:
    sums: Dict[str, InquiryTotals] = {}
    for inquiry in inquiries:
        key = inquiry.vehicle_type or UNKNOWN_LABEL
        current = sums.get(key, InquiryTotals())
        sums[key] = InquiryTotals(
            requests=current.requests + inquiry.requests,
            bookings=current.bookings + inquiry.bookings,
        )
    return sums


def geo_key(latitude: float, longitude: float) -> str:
    return f"{latitude:.{GEO_BUCKET_PRECISION}f}|{longitude:.{GEO_BUCKET_PRECISION}f}"


def cluster_locations(inventory: Sequence[InventoryEntry]) -> List[GeoLocationPoint]:
    """
    Bucket vehicles by rounded coordinate.

    A bucket keeps the coordinate of its first vehicle; its city and country
    labels follow the last vehicle that carries a non-empty value. Owners are
    listed once per owner key.
    """
    buckets: Dict[str, dict] = {}
    for entry in inventory:
        if entry.latitude is None or entry.longitude is None:
            continue
        bucket = buckets.setdefault(
            geo_key(entry.latitude, entry.longitude),
            {
                "latitude": entry.latitude,
                "longitude": entry.longitude,
                "city": entry.city,
                "country": entry.country,
                "vehicles": 0,
                "owners": {},
            },
        )
        bucket["vehicles"] += 1
        if entry.city:
            bucket["city"] = entry.city
        if entry.country:
            bucket["country"] = entry.country

        key = owner_key(entry)
        bucket["owners"][key] = LocationOwner(
            key=key,
            id=(entry.owner_id or "").strip() or None,
            name=entry.owner_name.strip() or UNKNOWN_OWNER_LABEL,
        )

    points = []
    for bucket in buckets.values():
        owners = list(bucket.pop("owners").values())
        points.append(GeoLocationPoint(owners=owners, owner_count=len(owners), **bucket))
    return points


def unique_sorted(values: Iterable[Optional[str]]) -> List[str]:
    """Distinct non-blank values in German collation order"""
    distinct = {value for value in values if value and value.strip()}
    return sorted(distinct, key=collation_key)


def build_facets(inventory: Sequence[InventoryEntry], country: Optional[str], region: Optional[str]) -> Dict[str, List[str]]:
    """
    Filter values available for the current selection.

    Countries are global; regions, vehicle types and manufacturers are
    scoped to the selected country; cities to the selected country and
    region. City, type and manufacturer selections do not narrow anything.
    """
    country_scoped = [entry for entry in inventory if matches(entry.country, country)]
    region_scoped = [entry for entry in country_scoped if matches(entry.region, region)]
    return {
        "available_countries": unique_sorted(entry.country for entry in inventory),
        "available_regions": unique_sorted(entry.region for entry in country_scoped),
        "available_cities": unique_sorted(entry.city for entry in region_scoped),
        "available_vehicle_types": unique_sorted(entry.vehicle_type for entry in country_scoped),
        "available_manufacturers": unique_sorted(entry.manufacturer for entry in country_scoped),
    }
