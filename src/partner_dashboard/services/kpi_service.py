"""
KPI service: table loading and the aggregation entry point
"""
import asyncio
from typing import List, NamedTuple, Optional, Sequence
from datetime import datetime

from partner_dashboard.core.config import settings
from partner_dashboard.external.sheets.client import SheetsClient
from partner_dashboard.schemas.kpis import (
    GeoSummary,
    InquirySummary,
    KpiFilterSpec,
    KpiMeta,
    KpiPayload,
)
from partner_dashboard.services import aggregator
from partner_dashboard.services.filters import (
    filter_inquiries,
    filter_inventory,
    radius_active,
    resolve_radius_center,
)
from partner_dashboard.services.lead_lifecycle import open_pending_leads
from partner_dashboard.services.reconciler import OwnerIndex, reconcile_inventory
from partner_dashboard.services.row_mapper import (
    map_inquiries,
    map_inventory,
    map_missing_inventory,
    map_owners,
    map_pending_leads,
)
from partner_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

Table = List[List[str]]


class KpiTables(NamedTuple):
    """Raw sheet snapshots feeding one KPI computation"""
    inventory: Table
    inquiries: Table
    owners: Table
    missing_inventory: Table
    pending_leads: Table


def build_kpi_payload(
    inventory_rows: Sequence[Sequence[str]],
    inquiry_rows: Sequence[Sequence[str]],
    owner_rows: Sequence[Sequence[str]],
    missing_inventory_rows: Sequence[Sequence[str]],
    pending_lead_rows: Sequence[Sequence[str]],
    filter_spec: Optional[KpiFilterSpec] = None,
    now: Optional[datetime] = None,
) -> KpiPayload:
    """
    Compute the KPI payload from raw tables.

    Pure and synchronous: no I/O, inputs are not modified.

    Args:
        inventory_rows: Inventory table, header row first
        inquiry_rows: Inquiries table
        owner_rows: Owners table
        missing_inventory_rows: Missing inventory table
        pending_lead_rows: Pending leads table
        filter_spec: Requested view, everything when omitted
        now: Reference time for onboarding and lead retention

    Returns:
        KpiPayload for the requested view
    """
    spec = filter_spec or KpiFilterSpec()
    now = now or datetime.now()

    inventory = map_inventory(inventory_rows)
    owners = map_owners(owner_rows)
    inquiries = map_inquiries(inquiry_rows)
    missing_inventory = map_missing_inventory(missing_inventory_rows)
    pending_leads = map_pending_leads(pending_lead_rows)

    reconciled = reconcile_inventory(inventory, owners, OwnerIndex.from_owners(owners))

    center = resolve_radius_center(reconciled, spec)
    if spec.radius_km and center is None:
        logger.debug(f"No radius center for city {spec.city!r}, radius ignored")
    filtered = filter_inventory(reconciled, spec, center)
    filtered_inquiries = filter_inquiries(inquiries, spec, radius_active(spec, center))

    logger.debug(
        f"KPI view: {len(filtered)}/{len(inventory)} vehicles, "
        f"{len(filtered_inquiries)}/{len(inquiries)} inquiries"
    )

    facets = aggregator.build_facets(reconciled, spec.country, spec.region)
    return KpiPayload(
        totals=aggregator.compute_totals(filtered, filtered_inquiries),
        by_country=aggregator.group_by_country(filtered),
        onboarding=aggregator.compute_onboarding(filtered, now),
        inquiries=InquirySummary(
            by_vehicle_type=aggregator.inquiries_by_vehicle_type(filtered_inquiries)
        ),
        inventory=filtered,
        geo=GeoSummary(locations=aggregator.cluster_locations(filtered)),
        missing_inventory=missing_inventory,
        pending_leads=open_pending_leads(pending_leads, owners, inventory, now),
        meta=KpiMeta(
            **facets,
            total_inventory_rows=len(inventory),
            filtered_inventory_rows=len(filtered),
            custom_location=spec.custom_location,
        ),
    )


class KpiService:
    """Loads the partner workbook and builds KPI payloads from it"""

    def __init__(self, sheets_client: SheetsClient):
        self.sheets_client = sheets_client
        self.tables = settings.sheets.tables
        self.ranges = settings.sheets.ranges

    async def load_tables(self) -> KpiTables:
        """
        Fetch all source tables concurrently.

        A failure of any single fetch propagates; partial snapshots are
        never returned.
        """
        names = KpiTables._fields
        results = await asyncio.gather(
            *(
                self.sheets_client.fetch_table(getattr(self.tables, name), getattr(self.ranges, name))
                for name in names
            )
        )
        logger.info(
            "[cyan]Loaded partner workbook:[/cyan] "
            + ", ".join(f"{name}={max(len(rows) - 1, 0)}" for name, rows in zip(names, results))
        )
        return KpiTables(*results)

    async def get_kpis(self, spec: KpiFilterSpec, now: Optional[datetime] = None) -> KpiPayload:
        tables = await self.load_tables()
        return build_kpi_payload(
            tables.inventory,
            tables.inquiries,
            tables.owners,
            tables.missing_inventory,
            tables.pending_leads,
            spec,
            now=now,
        )
