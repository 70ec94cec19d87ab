"""
Partner service: write paths into the partner workbook
"""
from typing import Dict, List, Sequence, Union
from datetime import date

from partner_dashboard.core.config import settings
from partner_dashboard.core.constants import (
    INVENTORY_WRITE_SYNONYMS,
    MISSING_INVENTORY_WRITE_SYNONYMS,
    OWNER_NAME_COLUMNS,
    OWNER_WRITE_SYNONYMS,
    PENDING_LEAD_WRITE_SYNONYMS,
    HEADER_ROW_OFFSET,
)
from partner_dashboard.external.geocoding.client import GeocodingClient
from partner_dashboard.external.sheets.client import SheetsClient
from partner_dashboard.schemas.entities import LeadStatus
from partner_dashboard.schemas.partners import (
    GeocodeRequest,
    GeocodeResponse,
    ListingRequestCreate,
    MissingInventoryCreate,
    PartnerCreate,
    PartnerCreateResponse,
    PartnerDeleteResponse,
    WriteResponse,
)
from partner_dashboard.services.row_mapper import HeaderLookup, build_row, map_owners
from partner_dashboard.utils.exceptions import InvalidRequestError, NotFoundError, SheetsAPIError
from partner_dashboard.utils.helpers import normalize_value
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_VEHICLE_STATUS = "aktiv"


def today_iso() -> str:
    return date.today().isoformat()


def matching_row_indices(rows: Sequence[Sequence[str]], owner_name: str) -> List[int]:
    """
    Sheet row indexes whose owner column equals ``owner_name``.

    Raises:
        SheetsAPIError: If the table has no header or no owner column
    """
    if not rows:
        raise SheetsAPIError("Sheet could not be loaded (no header row)")
    header, *entries = rows
    column = HeaderLookup(header).find(OWNER_NAME_COLUMNS)
    if column == -1:
        raise SheetsAPIError("Owner name column not found in sheet")

    # Trim and case only; diacritics stay significant
    target = owner_name.strip().lower()
    return [
        index + HEADER_ROW_OFFSET
        for index, row in enumerate(entries)
        if column < len(row) and row[column].strip().lower() == target
    ]


class PartnerService:
    """Creates and removes partners, vehicles, demand gaps and leads"""

    def __init__(self, sheets_client: SheetsClient, geocoding_client: GeocodingClient):
        self.sheets_client = sheets_client
        self.geocoding_client = geocoding_client
        self.tables = settings.sheets.tables

    async def _header(self, name: str) -> List[str]:
        header = await self.sheets_client.get_header_row(name)
        if not header:
            raise SheetsAPIError(f"Sheet '{name}' has no header row")
        return header

    async def create_partner(self, payload: PartnerCreate) -> PartnerCreateResponse:
        """
        Append a partner's vehicles and, for a new name, its owner row.

        The owner address is geocoded first (live, then gazetteer); vehicles
        are written without coordinates when that fails.

        Args:
            payload: Owner details and at least one labelled vehicle

        Returns:
            PartnerCreateResponse with the coordinates used, if any
        """
        owner = payload.owner
        vehicles = [vehicle for vehicle in payload.vehicles if vehicle.label]
        if not owner.name or not owner.country or not owner.city or not vehicles:
            raise InvalidRequestError(
                "Owner name, country, city and at least one vehicle are required"
            )

        address = owner.address or ", ".join(
            part for part in (owner.street, owner.postal_code, owner.city) if part
        )
        geocode = await self.geocoding_client.resolve_address(
            street=" ".join(part for part in (owner.street, owner.postal_code) if part) or owner.address,
            city=owner.city,
            region=owner.region,
            country=owner.country,
        )
        if geocode is None:
            logger.warning(
                f"[yellow]Geocoding failed for {owner.city}, {owner.country};[/yellow] "
                f"vehicles of {owner.name} are stored without coordinates"
            )

        listed_at = today_iso()
        inventory_header = await self._header(self.tables.inventory)
        rows = [
            build_row(
                inventory_header,
                {
                    "vermieter_name": owner.name,
                    "fahrzeug_label": vehicle.label,
                    "manufacturer": vehicle.manufacturer,
                    "fahrzeugtyp": vehicle.vehicle_type,
                    "stadt": owner.city,
                    "region": owner.region,
                    "standort": address,
                    "land": owner.country,
                    "status": vehicle.status or DEFAULT_VEHICLE_STATUS,
                    "notizen": vehicle.notes,
                    "latitude": geocode.latitude if geocode else None,
                    "longitude": geocode.longitude if geocode else None,
                    "plz": owner.postal_code,
                    "strasse": owner.street,
                    "listed_at": listed_at,
                    "letzte_aenderung": listed_at,
                },
                INVENTORY_WRITE_SYNONYMS,
            )
            for vehicle in vehicles
        ]
        await self.sheets_client.append_rows(self.tables.inventory, rows)

        existing = map_owners(await self.sheets_client.fetch_table(self.tables.owners))
        if any(normalize_value(contact.owner_name) == normalize_value(owner.name) for contact in existing):
            logger.info(f"Owner [cyan]{owner.name}[/cyan] already listed, owner row skipped")
        else:
            owners_header = await self.sheets_client.get_header_row(self.tables.owners)
            if owners_header:
                values: Dict[str, Union[str, float, None]] = {
                    "vermieter_name": owner.name,
                    "land": owner.country,
                    "region": owner.region,
                    "stadt": owner.city,
                    "adresse": address,
                    "telefon": owner.phone,
                    "email": owner.email,
                    "domain": owner.website,
                    "plz": owner.postal_code,
                    "strasse": owner.street,
                    "internationale_kunden": owner.international_customers,
                    "provision": owner.commission,
                    "ranking": owner.ranking,
                    "erfahrung_jahre": owner.experience_years,
                    "notizen": owner.notes,
                    "letzte_aenderung": (owner.last_change_iso or "").split("T")[0] or listed_at,
                }
                await self.sheets_client.append_rows(
                    self.tables.owners, [build_row(owners_header, values, OWNER_WRITE_SYNONYMS)]
                )

        logger.info(f"[green]✅ Created partner[/green] [cyan]{owner.name}[/cyan] with {len(rows)} vehicle(s)")
        return PartnerCreateResponse(success=True, coordinates=geocode)

    async def delete_partner(self, owner_name: str) -> PartnerDeleteResponse:
        """
        Remove every inventory and owner row of a partner.

        Raises:
            InvalidRequestError: If no name is given
            NotFoundError: If neither table lists the partner
        """
        if not owner_name:
            raise InvalidRequestError("Owner name is required")

        inventory_rows = await self.sheets_client.fetch_table(self.tables.inventory)
        owner_rows = await self.sheets_client.fetch_table(self.tables.owners)
        inventory_indices = matching_row_indices(inventory_rows, owner_name)
        owner_indices = matching_row_indices(owner_rows, owner_name)

        if not inventory_indices and not owner_indices:
            raise NotFoundError(f"No partner named '{owner_name}' found")

        await self.sheets_client.delete_rows(self.tables.inventory, inventory_indices)
        await self.sheets_client.delete_rows(self.tables.owners, owner_indices)
        logger.info(
            f"[green]✅ Deleted partner[/green] [cyan]{owner_name}[/cyan]: "
            f"{len(inventory_indices)} vehicle row(s), {len(owner_indices)} owner row(s)"
        )
        return PartnerDeleteResponse(
            success=True,
            removed_inventory_rows=len(inventory_indices),
            removed_owner_rows=len(owner_indices),
        )

    async def delete_vehicle(self, row_index: int) -> WriteResponse:
        """Delete one inventory row by its sheet index (data starts at row 2)"""
        if row_index < HEADER_ROW_OFFSET:
            raise InvalidRequestError("Invalid row index")
        await self.sheets_client.delete_rows(self.tables.inventory, [row_index])
        return WriteResponse(success=True)

    async def add_missing_inventory(self, payload: MissingInventoryCreate) -> WriteResponse:
        if not payload.city or not payload.vehicle_type or not payload.count or payload.count <= 0:
            raise InvalidRequestError("City, vehicle type and a positive count are required")

        header = await self._header(self.tables.missing_inventory)
        row = build_row(
            header,
            {
                "stadt": payload.city,
                "region": payload.region,
                "land": payload.country,
                "fahrzeugtyp": payload.vehicle_type,
                "anzahl_fehlend": payload.count,
                "prio": payload.priority,
                "kommentar": payload.comment,
            },
            MISSING_INVENTORY_WRITE_SYNONYMS,
        )
        await self.sheets_client.append_rows(self.tables.missing_inventory, [row])
        return WriteResponse(success=True)

    async def add_listing_request(self, payload: ListingRequestCreate) -> WriteResponse:
        """
        Record a prospective partner as pending leads, one row per vehicle.

        New leads start as Requested and are dated today unless a date is
        given.
        """
        lead = payload.lead
        if not lead.landlord or not lead.city or not payload.vehicles:
            raise InvalidRequestError("Owner, city and at least one vehicle are required")

        vehicles = [vehicle for vehicle in payload.vehicles if vehicle.vehicle_type or vehicle.vehicle_label]
        if not vehicles:
            raise InvalidRequestError("At least one vehicle with a type is required")

        header = await self._header(self.tables.pending_leads)
        lead_date = lead.date or today_iso()
        rows = [
            build_row(
                header,
                {
                    "datum": lead_date,
                    "kanal": lead.channel,
                    "region": lead.region,
                    "vermieter_name": lead.landlord,
                    "fahrzeug_label": vehicle.vehicle_label,
                    "manufacturer": vehicle.manufacturer,
                    "fahrzeugtyp": vehicle.vehicle_type,
                    "stadt": lead.city,
                    "land": lead.country,
                    "kommentar": vehicle.comment or lead.comment,
                    "status": LeadStatus.REQUESTED.value,
                },
                PENDING_LEAD_WRITE_SYNONYMS,
            )
            for vehicle in vehicles
        ]
        await self.sheets_client.append_rows(self.tables.pending_leads, rows)
        logger.info(f"[green]✅ Recorded lead[/green] [cyan]{lead.landlord}[/cyan] ({len(rows)} vehicle(s))")
        return WriteResponse(success=True)

    async def geocode(self, payload: GeocodeRequest) -> GeocodeResponse:
        """
        Resolve a city (optionally narrowed by postal code and region).

        Raises:
            InvalidRequestError: If country or city is missing
            NotFoundError: If the place cannot be resolved
        """
        if not payload.country or not payload.city:
            raise InvalidRequestError("Country and city are required")

        result = await self.geocoding_client.resolve_address(
            street=payload.postal_code or None,
            city=payload.city,
            region=payload.region,
            country=payload.country,
        )
        if result is None:
            raise NotFoundError("Location not found")

        return GeocodeResponse(
            latitude=result.latitude,
            longitude=result.longitude,
            label=result.label,
            city=payload.city,
            postal_code=payload.postal_code,
            country=payload.country,
            region=payload.region,
        )
