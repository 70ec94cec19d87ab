"""
Nominatim geocoding client
"""
import math
import httpx
from typing import List, Optional

from partner_dashboard.core.config import GeocodingConfig, settings
from partner_dashboard.external.geocoding.models import GeocodeResult
from partner_dashboard.services.geo import resolve_city_coordinates
from partner_dashboard.utils.exceptions import GeocodingError
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


def build_query_variants(
    street: Optional[str],
    city: Optional[str],
    region: Optional[str],
    country: Optional[str],
) -> List[List[str]]:
    """
    Search queries from most to least specific.

    Street variants are only tried when a street is given; every variant
    needs at least two non-blank parts besides the street. Case-insensitive
    duplicates are removed.
    """
    def parts(*values: Optional[str]) -> List[str]:
        return [value.strip() for value in values if value and value.strip()]

    city_country = parts(city, country)
    city_region_country = parts(city, region, country)
    street = (street or "").strip()

    queries: List[List[str]] = []
    if street:
        if len(city_region_country) >= 2:
            queries.append([street, *city_region_country])
        if len(city_country) >= 2:
            queries.append([street, *city_country])
    if len(city_region_country) >= 2:
        queries.append(city_region_country)
    if len(city_country) >= 2:
        queries.append(city_country)

    seen = set()
    unique = []
    for query in queries:
        key = "|".join(value.lower() for value in query)
        if key in seen:
            continue
        seen.add(key)
        unique.append(query)
    return unique


class GeocodingClient:
    """
    Client for the Nominatim search API.
    Shares one ``httpx.AsyncClient`` per process; call ``aclose`` on shutdown.
    """

    def __init__(
        self,
        config: Optional[GeocodingConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or settings.geocoding
        self.base_url = self.config.base_url.rstrip("/")
        self.http_client = http_client or httpx.AsyncClient(timeout=self.config.timeout)

    async def aclose(self) -> None:
        await self.http_client.aclose()

    def _get_headers(self):
        return {
            "User-Agent": self.config.user_agent,
            "Accept-Language": self.config.accept_language,
        }

    async def search(self, parts: List[str]) -> Optional[GeocodeResult]:
        """
        Run one free-text search.

        Returns:
            Best match, or None when nothing was found

        Raises:
            GeocodingError: If the geocoder answers with an error or is unreachable
        """
        query = ", ".join(parts)
        params = {"format": "json", "limit": 1, "addressdetails": 1, "q": query}
        if self.config.contact_email:
            params["email"] = self.config.contact_email

        try:
            response = await self.http_client.get(
                f"{self.base_url}/search", params=params, headers=self._get_headers()
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GeocodingError(
                f"Geocoding failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GeocodingError(f"Geocoding request failed: {str(e)}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise GeocodingError("Geocoder returned an unreadable response") from e
        if not isinstance(payload, list) or not payload:
            return None

        candidate = payload[0]
        if not isinstance(candidate, dict):
            return None
        try:
            latitude = float(candidate.get("lat"))
            longitude = float(candidate.get("lon"))
        except (TypeError, ValueError):
            return None
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            return None

        label = candidate.get("display_name")
        return GeocodeResult(
            latitude=latitude,
            longitude=longitude,
            label=label if isinstance(label, str) else query,
        )

    async def resolve_address(
        self,
        street: Optional[str],
        city: str,
        region: Optional[str],
        country: str,
    ) -> Optional[GeocodeResult]:
        """
        Resolve an address to a coordinate.

        Query variants are tried in order; a failing variant is logged and
        skipped. When no live lookup succeeds the offline gazetteer is used.

        Args:
            street: Street and house number, or a postal code
            city: City name
            region: State or region
            country: Country label

        Returns:
            GeocodeResult, or None if the address cannot be resolved
        """
        variants = build_query_variants(street, city, region, country)
        if not variants:
            return None

        if self.config.enabled:
            for variant in variants:
                try:
                    result = await self.search(variant)
                except GeocodingError as e:
                    logger.error(
                        f"[red]❌ Geocoding query failed:[/red] [cyan]{', '.join(variant)}[/cyan] - {e.detail}"
                    )
                    continue
                if result is not None:
                    logger.debug(f"Geocoded [cyan]{', '.join(variant)}[/cyan] -> {result.label}")
                    return result

        resolved = resolve_city_coordinates(city, country)
        if resolved is not None:
            logger.info(f"[yellow]Using gazetteer coordinates for[/yellow] {city}, {country}")
            return GeocodeResult(
                latitude=resolved.latitude,
                longitude=resolved.longitude,
                label=f"{city or ''}, {country or ''}".strip(),
            )
        return None
