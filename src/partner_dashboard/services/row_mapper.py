"""
Header-keyed row mapping.

Turns raw sheet matrices (header row + string cells) into typed entities,
independent of column order. Each logical field is found by probing its
synonym list from ``core.constants``; when no header matches, the legacy
positional column is used if the row is wide enough.

Nothing in here raises on malformed cells: numbers that do not parse become
None (or an explicit default), dates that do not parse become None, and
rows missing a required field are dropped.
"""
import math
import re
from typing import Dict, List, Mapping, Optional, Sequence, Union
from datetime import datetime

from partner_dashboard.core.constants import (
    DEFAULT_COUNTRY_LABEL,
    FALLBACK_COUNTRY_CODES,
    HEADER_ROW_OFFSET,
    INQUIRY_FIELDS,
    INVENTORY_FIELDS,
    LEAD_STATUS_ALIASES,
    MISSING_INVENTORY_FIELDS,
    OWNER_FIELDS,
    PENDING_LEAD_FIELDS,
    UNKNOWN_LABEL,
    UNKNOWN_OWNER_LABEL,
    VEHICLE_LABEL_PREFIX,
    FieldSpec,
)
from partner_dashboard.schemas.entities import (
    InquiryEntry,
    InventoryEntry,
    LeadStatus,
    MissingInventoryEntry,
    OwnerContact,
    PendingLeadEntry,
)
from partner_dashboard.services.geo import resolve_city_with_fallback
from partner_dashboard.utils.helpers import blank_to_none, pad_matrix, strip_diacritics
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

Table = Sequence[Sequence[str]]

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_header(label: Optional[str]) -> str:
    """
    Normalize a header label for lookups.

    "Straße / Hausnr." -> "stra_e_hausnr_", "\\ufeffLand" -> "land"
    """
    if not label:
        return ""
    value = strip_diacritics(str(label).replace("\ufeff", "")).strip().lower()
    return _NON_ALNUM_RE.sub("_", value)


class HeaderLookup:
    """Resolves logical fields to column indexes of one header row"""

    def __init__(self, header: Sequence[str]):
        self.columns = [normalize_header(label) for label in header]

    def find(self, candidates: Sequence[str]) -> int:
        """Index of the first candidate present in the header, or -1"""
        for candidate in candidates:
            key = normalize_header(candidate)
            if key in self.columns:
                return self.columns.index(key)
        return -1

    def pick(self, row: Sequence[str], spec: FieldSpec) -> str:
        """Cell for ``spec`` in ``row``; empty string when unresolved"""
        index = self.find(spec.candidates)
        if index != -1:
            return row[index] if index < len(row) else ""
        if 0 <= spec.fallback < len(row):
            return row[spec.fallback]
        return ""


def parse_number(raw: Union[str, float, int, None]) -> Optional[float]:
    """Parse a numeric cell, accepting a comma as decimal separator"""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def parse_count(raw: Optional[str], default: int = 0) -> int:
    """Parse a count cell; unparsable cells yield ``default``"""
    value = parse_number(raw)
    return int(value) if value is not None else default


def parse_date(raw: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime cell, None when unparsable"""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_lead_status(raw: Optional[str]) -> LeadStatus:
    """Map an English or German status label; blank or unknown is Requested"""
    key = (raw or "").strip().lower()
    return LeadStatus(LEAD_STATUS_ALIASES.get(key, LeadStatus.REQUESTED.value))


def _split(rows: Table):
    if not rows:
        return None, []
    header, *entries = pad_matrix(rows)
    return HeaderLookup(header), entries


def _pick_all(lookup: HeaderLookup, row: Sequence[str], fields: Mapping[str, FieldSpec]) -> Dict[str, str]:
    return {name: lookup.pick(row, spec) for name, spec in fields.items()}


def map_inventory(rows: Table) -> List[InventoryEntry]:
    """
    Map the inventory table.

    Vehicles without coordinates get the gazetteer centroid of their city,
    tried against their own country first and then the default country list.
    """
    lookup, entries = _split(rows)
    if lookup is None:
        return []

    mapped: List[InventoryEntry] = []
    for index, row in enumerate(entries):
        cells = _pick_all(lookup, row, INVENTORY_FIELDS)
        position = index + 1

        vehicle_id = cells["vehicle_id"].strip()
        vehicle_label = (
            cells["vehicle_label"].strip()
            or vehicle_id
            or cells["vehicle_type"].strip()
            or f"{VEHICLE_LABEL_PREFIX} {position}"
        )

        country = cells["country"].strip()
        city = cells["city"].strip()
        latitude = parse_number(cells["latitude"])
        longitude = parse_number(cells["longitude"])
        if latitude is None or longitude is None:
            resolved = resolve_city_with_fallback(city, [country, *FALLBACK_COUNTRY_CODES])
            if resolved is not None:
                latitude, longitude = resolved.latitude, resolved.longitude

        mapped.append(
            InventoryEntry(
                country=country,
                region=cells["region"].strip(),
                owner_id=blank_to_none(cells["owner_id"]),
                owner_name=cells["owner_name"].strip() or f"{UNKNOWN_OWNER_LABEL} {position}",
                vehicle_id=vehicle_id or None,
                vehicle_label=vehicle_label,
                vehicle_type=cells["vehicle_type"].strip(),
                city=city,
                manufacturer=blank_to_none(cells["manufacturer"]),
                listed_at=parse_date(cells["listed_at"]),
                offboarded_at=parse_date(cells["offboarded_at"]),
                status=cells["status"].strip(),
                latitude=latitude,
                longitude=longitude,
                street=blank_to_none(cells["street"]),
                postal_code=blank_to_none(cells["postal_code"]),
                owner_address=blank_to_none(cells["address"]),
                sheet_row_index=index + HEADER_ROW_OFFSET,
            )
        )

    logger.debug(f"Mapped {len(mapped)} of {len(entries)} inventory rows")
    return mapped


def map_owners(rows: Table) -> List[OwnerContact]:
    """Map the owners table; rows without a name are dropped"""
    lookup, entries = _split(rows)
    if lookup is None:
        return []

    owners: List[OwnerContact] = []
    for index, row in enumerate(entries):
        cells = _pick_all(lookup, row, OWNER_FIELDS)
        name = cells["owner_name"].strip()
        if not name:
            continue
        optional = {
            field: blank_to_none(cells[field])
            for field in OWNER_FIELDS
            if field not in ("owner_name", "country")
        }
        owners.append(
            OwnerContact(
                owner_name=name,
                country=cells["country"].strip(),
                sheet_row_index=index + HEADER_ROW_OFFSET,
                **optional,
            )
        )
    return owners


def map_inquiries(rows: Table) -> List[InquiryEntry]:
    """Map the inquiries table; rows need a vehicle type or id"""
    lookup, entries = _split(rows)
    if lookup is None:
        return []

    inquiries = []
    for row in entries:
        cells = _pick_all(lookup, row, INQUIRY_FIELDS)
        vehicle_id = cells["vehicle_id"].strip()
        vehicle_type = cells["vehicle_type"].strip()
        if not (vehicle_type or vehicle_id):
            continue
        inquiries.append(
            InquiryEntry(
                vehicle_id=vehicle_id,
                vehicle_type=vehicle_type,
                city=cells["city"].strip(),
                requests=parse_count(cells["requests"]),
                bookings=parse_count(cells["bookings"]),
                created_at=parse_date(cells["created_at"]),
            )
        )
    return inquiries


def map_missing_inventory(rows: Table) -> List[MissingInventoryEntry]:
    """Map the missing-inventory table; only positive counts are kept"""
    lookup, entries = _split(rows)
    if lookup is None:
        return []

    missing = []
    for row in entries:
        cells = _pick_all(lookup, row, MISSING_INVENTORY_FIELDS)
        count = parse_count(cells["count"])
        if count <= 0:
            continue
        missing.append(
            MissingInventoryEntry(
                country=cells["country"].strip() or DEFAULT_COUNTRY_LABEL,
                region=cells["region"].strip(),
                city=cells["city"].strip() or UNKNOWN_LABEL,
                vehicle_type=cells["vehicle_type"].strip() or UNKNOWN_LABEL,
                count=count,
                priority=blank_to_none(cells["priority"]),
                comment=blank_to_none(cells["comment"]),
            )
        )
    return missing


def map_pending_leads(rows: Table) -> List[PendingLeadEntry]:
    """
    Map the pending-lead table.

    Rows without an owner name are dropped. Retention of closed leads is
    applied later by the lead lifecycle filter, not here.
    """
    lookup, entries = _split(rows)
    if lookup is None:
        return []

    leads = []
    for index, row in enumerate(entries):
        cells = _pick_all(lookup, row, PENDING_LEAD_FIELDS)
        name = cells["owner_name"].strip()
        if not name:
            continue
        optional = {
            field: blank_to_none(cells[field])
            for field in PENDING_LEAD_FIELDS
            if field not in ("owner_name", "status")
        }
        leads.append(
            PendingLeadEntry(
                owner_name=name,
                status=parse_lead_status(cells["status"]),
                sheet_row_index=index + HEADER_ROW_OFFSET,
                **optional,
            )
        )
    return leads


def build_row(
    header: Sequence[str],
    values: Mapping[str, Union[str, int, float, None]],
    synonyms: Mapping[str, Sequence[str]],
) -> List[Union[str, int, float]]:
    """
    Lay out ``values`` (keyed by canonical column name) along an existing
    header row. Unknown columns are left blank.
    """
    canonical_by_column: Dict[str, str] = {}
    for canonical in values:
        canonical_by_column.setdefault(normalize_header(canonical), canonical)
    for canonical in values:
        for synonym in synonyms.get(canonical, []):
            canonical_by_column.setdefault(normalize_header(synonym), canonical)

    row: List[Union[str, int, float]] = []
    for label in header:
        canonical = canonical_by_column.get(normalize_header(label))
        raw = values.get(canonical) if canonical else None
        if raw is None:
            row.append("")
        elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
            row.append(raw)
        else:
            row.append(str(raw))
    return row
