"""
Route-level net weight for one day, used for route payment / verification.

Formula: Gross (raw rows only) - (Coarse + Water + BagWeight + Spd + Boiled +
Rejected + RouteDeduct + Excess_Leaf + Transfer + RouteDeductPre), floored at 0.
Deduction fields are summed over every matching row because route-wide
adjustments may be booked on either row shape.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from backend.errors import store_guard
from backend.models.leaf_collection import LeafCollection, DEDUCTION_COLUMNS
from backend.utils.db_compat import on_day, trimmed
from backend.utils.helpers import parse_month_label, to_int
from backend.utils.logger import get_logger

logger = get_logger(__name__)

FORMULA = (
    "Gross - (Coarse + Water + BagWeight + Spd + Boiled + Rejected"
    " + RouteDeduct + Excess_Leaf + Transfer + RouteDeductPre)"
)


@dataclass
class RouteWeightBreakdown:
    route: str
    target_date: Optional[date]
    record_count: int = 0
    total_gross: float = 0.0
    deductions: dict[str, float] = field(default_factory=dict)

    @property
    def total_deductions(self) -> float:
        return sum(self.deductions.values())

    @property
    def net_weight(self) -> float:
        """Never negative: deductions beyond gross report as zero"""
        return max(self.total_gross - self.total_deductions, 0.0)


def resolve_route_date(day, month_label: Optional[str]) -> Optional[date]:
    """Day of month + 'Mmm-YYYY' label -> calendar date, or None if impossible"""
    parsed = parse_month_label(month_label)
    day_number = to_int(day)
    if parsed is None or day_number <= 0:
        return None
    month, year = parsed
    try:
        return date(year, month, day_number)
    except (ValueError, OverflowError):
        return None


async def route_weight_breakdown(
    db: AsyncSession,
    route: str,
    day,
    month_label: Optional[str],
) -> RouteWeightBreakdown:
    route = (route or "").strip()
    target_date = resolve_route_date(day, month_label)
    breakdown = RouteWeightBreakdown(route=route, target_date=target_date)
    if target_date is None:
        logger.warning(f"Invalid month/day for route weight: day={day!r} month={month_label!r}")
        return breakdown

    raw = LeafCollection.is_deduction == False  # noqa: E712
    columns = [
        func.count().label("record_count"),
        func.coalesce(func.sum(case((raw, LeafCollection.gross), else_=0)), 0).label("gross"),
    ]
    columns += [
        func.coalesce(func.sum(getattr(LeafCollection, name)), 0).label(name)
        for name in DEDUCTION_COLUMNS
    ]
    query = select(*columns).where(
        trimmed(LeafCollection.route) == route,
        on_day(LeafCollection.log_time, target_date),
    )

    async with store_guard(db, "calculating route weight"):
        result = await db.execute(query)
        totals = result.one()._mapping

    breakdown.record_count = int(totals["record_count"] or 0)
    if breakdown.record_count == 0:
        logger.info(f"No collections for route {route!r} on {target_date}")
        return breakdown

    breakdown.total_gross = float(totals["gross"] or 0)
    breakdown.deductions = {name: float(totals[name] or 0) for name in DEDUCTION_COLUMNS}
    logger.debug(
        f"Route {route!r} on {target_date}: records={breakdown.record_count} "
        f"gross={breakdown.total_gross} deductions={breakdown.deductions} "
        f"net={breakdown.net_weight}"
    )
    return breakdown


async def route_net_weight(db: AsyncSession, route: str, day, month_label: Optional[str]) -> float:
    """Net leaf weight for a route on one day; 0 for unknown dates or no data"""
    breakdown = await route_weight_breakdown(db, route, day, month_label)
    return breakdown.net_weight


async def distinct_routes(db: AsyncSession) -> list[str]:
    """Sorted, trimmed route names seen in the collection table"""
    route = trimmed(LeafCollection.route)
    query = (
        select(route.label("route"))
        .where(
            LeafCollection.route.is_not(None),
            route != "",
            route != "null",
        )
        .distinct()
        .order_by(route)
    )
    async with store_guard(db, "loading routes"):
        result = await db.execute(query)
        return [r for r in result.scalars().all() if r]
