"""
Offline coordinate resolution.

Country and city names are normalized to a gazetteer key and looked up in the
static city table from ``core.constants``. This is the fallback used when a
row carries no explicit coordinate; live lookups go through the geocoding
client instead.
"""
import math
import re
from typing import Iterable, List, Optional

from partner_dashboard.core.constants import (
    CITY_COORDINATES,
    COUNTRY_RULES,
    EARTH_RADIUS_KM,
    FALLBACK_COUNTRY_CODES,
)
from partner_dashboard.schemas.entities import Coordinate, InventoryEntry

_CITY_PUNCTUATION_RE = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_country(country: Optional[str]) -> str:
    """
    Map a country label to its two-letter gazetteer code.

    Localized spellings are matched by substring ("Deutschland" -> "de",
    "Österreich" -> "at"). Unknown labels fall back to their first two
    characters.
    """
    value = (country or "").strip().lower()
    for needles, code in COUNTRY_RULES:
        if any(needle in value for needle in needles):
            return code
    return value[:2]


def normalize_city(city: Optional[str]) -> str:
    """Gazetteer key for a city name ("Schloß Holte" -> "schloss holte")"""
    value = (city or "").strip().lower().replace("ß", "ss")
    value = _CITY_PUNCTUATION_RE.sub("", value)
    return _WHITESPACE_RE.sub(" ", value).strip()


def resolve_city_coordinates(city: Optional[str], country: Optional[str]) -> Optional[Coordinate]:
    """Look up a city centroid, None when the gazetteer has no entry"""
    if not city:
        return None
    point = CITY_COORDINATES.get(f"{normalize_country(country)}:{normalize_city(city)}")
    if point is None:
        return None
    return Coordinate(latitude=point[0], longitude=point[1])


def resolve_city_with_fallback(
    city: Optional[str], countries: Iterable[Optional[str]]
) -> Optional[Coordinate]:
    """
    Try ``city`` against each candidate country in turn.

    Blank candidates are skipped and candidates normalizing to an already
    tried code are not looked up twice.

    Args:
        city: City label as found in the sheet
        countries: Country labels or codes, in priority order

    Returns:
        First centroid found, or None
    """
    if not city:
        return None
    seen = set()
    for candidate in countries:
        if not candidate:
            continue
        code = normalize_country(candidate)
        if code in seen:
            continue
        seen.add(code)
        resolved = resolve_city_coordinates(city, candidate)
        if resolved is not None:
            return resolved
    return None


def fallback_countries(selected: Optional[str] = None) -> List[str]:
    """Selected country first, then the supported countries, deduplicated by code"""
    ordered: List[str] = []
    codes = set()
    for candidate in [selected, *FALLBACK_COUNTRY_CODES]:
        if not candidate:
            continue
        code = normalize_country(candidate)
        if code in codes:
            continue
        codes.add(code)
        ordered.append(candidate)
    return ordered


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points in kilometers"""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lng = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def item_coordinates(entry: InventoryEntry, countries: Iterable[str]) -> Optional[Coordinate]:
    """Explicit coordinates of a vehicle, else its city centroid"""
    if entry.latitude is not None and entry.longitude is not None:
        if math.isfinite(entry.latitude) and math.isfinite(entry.longitude):
            return Coordinate(latitude=entry.latitude, longitude=entry.longitude)
    if entry.city:
        return resolve_city_with_fallback(entry.city, [entry.country, *countries])
    return None
