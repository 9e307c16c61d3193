"""
Collection / deduction aggregation.

Net weight rule: bags, gross and net weight are summed from raw collection rows
only; deduction totals are summed from deduction rows only. Net weight is read
from the raw rows as stored at write time and is never recomputed here as
gross minus deductions.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.errors import store_guard
from backend.models.leaf_collection import LeafCollection, LeafType
from backend.services.collection_entries import (
    CollectionEntry, Deduction, RawCollection, entry_from_row, row_payload,
)
from backend.utils.db_compat import on_day, from_day, through_day, trimmed
from backend.utils.helpers import display_date, display_time
from backend.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


@dataclass
class DeductionSummary:
    total_bags: int = 0
    total_gross: float = 0.0
    total_bag_weight: float = 0.0
    total_coarse: float = 0.0
    total_water: float = 0.0
    total_boiled: float = 0.0
    total_rejected: float = 0.0
    total_net_weight: float = 0.0
    transaction_count: int = 0

    def to_dict(self) -> dict:
        return {
            "TotalBags": self.total_bags,
            "TotalGross": self.total_gross,
            "TotalBagWeight": self.total_bag_weight,
            "TotalCoarse": self.total_coarse,
            "TotalWater": self.total_water,
            "TotalBoiled": self.total_boiled,
            "TotalRejected": self.total_rejected,
            "TotalNetWeight": self.total_net_weight,
            "TransactionCount": self.transaction_count,
        }


def summarize_entries(entries: Iterable[CollectionEntry]) -> DeductionSummary:
    """Fold raw and deduction entries into one summary. No entries -> all zeros."""
    summary = DeductionSummary()
    for entry in entries:
        if isinstance(entry, RawCollection):
            summary.total_bags += entry.quantity
            summary.total_gross += entry.gross_weight
            summary.total_net_weight += entry.net_weight
        elif isinstance(entry, Deduction):
            summary.total_bag_weight += entry.bag_weight
            summary.total_coarse += entry.coarse
            summary.total_water += entry.water
            summary.total_boiled += entry.boiled
            summary.total_rejected += entry.rejected
            summary.transaction_count += 1
    return summary


async def summarize(
    db: AsyncSession,
    reg_no: int,
    leaf_type: LeafType,
    day: Optional[date] = None,
) -> DeductionSummary:
    """Summary for one supplier, leaf type and calendar day (default today)"""
    day = day or date.today()
    query = (
        select(LeafCollection)
        .where(
            LeafCollection.reg_no == reg_no,
            LeafCollection.leaf_type == leaf_type,
            on_day(LeafCollection.log_time, day),
        )
    )
    async with store_guard(db, "summarizing deductions"):
        result = await db.execute(query)
        rows = result.scalars().all()

    summary = summarize_entries(entry_from_row(r) for r in rows)
    logger.debug(f"Summary for RegNo={reg_no} {leaf_type.value} on {day}: {summary}")
    return summary


# --- Grouped reporting ---

def _sum_when(condition, column):
    return func.coalesce(func.sum(case((condition, column), else_=0)), 0)


def _grouped_query(*conditions):
    raw = LeafCollection.is_deduction == False  # noqa: E712
    deduction = LeafCollection.is_deduction == True  # noqa: E712
    mobile = LeafCollection.mode == settings.MOBILE_SOURCE_MODE
    route = trimmed(LeafCollection.route)
    last_updated = func.max(LeafCollection.log_time).label("LastUpdated")

    return (
        select(
            LeafCollection.reg_no.label("RegNo"),
            LeafCollection.dealer.label("SupplierName"),
            route.label("Route"),
            LeafCollection.leaf_type.label("LeafType"),
            _sum_when(raw, LeafCollection.qty).label("TotalBags"),
            _sum_when(raw, LeafCollection.gross).label("TotalGross"),
            _sum_when(deduction, LeafCollection.bag_weight).label("TotalBagWeight"),
            _sum_when(deduction, LeafCollection.coarse).label("TotalCoarce"),
            _sum_when(deduction, LeafCollection.water).label("TotalWater"),
            _sum_when(deduction, LeafCollection.boiled).label("TotalBoiled"),
            _sum_when(deduction, LeafCollection.rejected).label("TotalRejected"),
            _sum_when(raw, LeafCollection.net_weight).label("NetWeight"),
            last_updated,
            _sum_when(deduction, 1).label("TransactionCount"),
            _sum_when(mobile, 1).label("AppCount"),
            func.coalesce(func.sum(case((mobile, 0), else_=1)), 0).label("WebCount"),
        )
        .where(*conditions)
        .group_by(
            LeafCollection.reg_no,
            LeafCollection.dealer,
            route,
            LeafCollection.leaf_type,
        )
        .order_by(last_updated.desc())
    )


def _group_payload(row) -> dict:
    data = dict(row._mapping)
    leaf_type = data["LeafType"]
    data["LeafType"] = leaf_type.value if isinstance(leaf_type, LeafType) else leaf_type
    for key in ("TotalBags", "TransactionCount", "AppCount", "WebCount"):
        data[key] = int(data[key] or 0)
    for key in ("TotalGross", "TotalBagWeight", "TotalCoarce", "TotalWater",
                "TotalBoiled", "TotalRejected", "NetWeight"):
        data[key] = float(data[key] or 0)
    last_updated = data["LastUpdated"]
    data["LastUpdated"] = last_updated.isoformat() if last_updated else None
    data["DisplayDate"] = display_date(last_updated)
    data["DisplayTime"] = display_time(last_updated)
    return data


async def grouped_totals(db: AsyncSession, day: Optional[date] = None) -> list[dict]:
    """Per supplier / route / leaf type totals for one calendar day"""
    day = day or date.today()
    async with store_guard(db, "grouping collections by date"):
        result = await db.execute(_grouped_query(on_day(LeafCollection.log_time, day)))
        groups = [_group_payload(r) for r in result]
    logger.info(f"Grouped collections for {day}: {len(groups)} groups")
    return groups


async def filtered_totals(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    reg_no: Optional[int] = None,
    route: Optional[str] = None,
) -> list[dict]:
    """Grouped totals narrowed by any combination of date range, supplier and route"""
    conditions = []
    if start_date:
        conditions.append(from_day(LeafCollection.log_time, start_date))
    if end_date:
        conditions.append(through_day(LeafCollection.log_time, end_date))
    if reg_no:
        conditions.append(LeafCollection.reg_no == reg_no)
    if route and route.strip():
        conditions.append(LeafCollection.route.ilike(f"%{route.strip()}%"))

    async with store_guard(db, "filtering collections"):
        result = await db.execute(_grouped_query(*conditions))
        return [_group_payload(r) for r in result]


async def collection_details(db: AsyncSession, reg_no: int) -> list[dict]:
    """Every row for one supplier, newest first"""
    query = (
        select(LeafCollection)
        .where(LeafCollection.reg_no == reg_no)
        .order_by(LeafCollection.log_time.desc(), LeafCollection.id.desc())
    )
    async with store_guard(db, "loading collection details"):
        result = await db.execute(query)
        rows = result.scalars().all()
    return [row_payload(r, settings.MOBILE_SOURCE_MODE) for r in rows]
