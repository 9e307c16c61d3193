"""
Leaf-quality register (Reg_LeafCount): append-only, no aggregation.
"""
import socket
from datetime import date, datetime
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.errors import ValidationError, store_guard
from backend.models.leaf_count import LeafCount
from backend.utils.db_compat import from_day, through_day, trimmed
from backend.utils.helpers import day_of_month_or, first_present, to_int
from backend.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

# logical field -> accepted external keys; "bellowBest" is what the tablets send
LEAF_COUNT_ALIASES: dict[str, tuple[str, ...]] = {
    "day_of_month": ("date", "day", "Date"),
    "month_label": ("month", "Month", "monthName"),
    "route": ("route", "Route"),
    "best_leaf": ("bestLeaf", "BestLeaf"),
    "below_best": ("bellowBest", "belowBest", "BellowBest", "BelowBest"),
    "poor": ("poor", "Poor"),
    "user_name": ("userName", "user", "User"),
    "host_id": ("pcName", "hostId", "PC_Name"),
}


async def save_leaf_count(
    db: AsyncSession,
    payload: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> int:
    now = now or datetime.now()
    values = {name: first_present(payload, keys) for name, keys in LEAF_COUNT_ALIASES.items()}
    if values["day_of_month"] is None or values["month_label"] is None or values["route"] is None:
        raise ValidationError("Missing required fields: date, month, route")

    best = to_int(values["best_leaf"])
    below_best = to_int(values["below_best"])
    poor = to_int(values["poor"])
    if not (best or below_best or poor):
        raise ValidationError("At least one leaf count value is required")

    row = LeafCount(
        day_of_month=day_of_month_or(values["day_of_month"], now.day),
        month_label=str(values["month_label"]).strip(),
        route=str(values["route"]).strip(),
        best_leaf=best,
        below_best=below_best,
        poor=poor,
        user_name=values["user_name"] or settings.DEFAULT_USER_NAME,
        host_id=values["host_id"] or socket.gethostname() or settings.DEFAULT_HOST_ID,
        log_time=now,
    )
    async with store_guard(db, "saving leaf count"):
        db.add(row)
        await db.commit()
        await db.refresh(row)

    logger.info(
        f"Saved leaf count Ind={row.id} route={row.route!r} {row.month_label} day {row.day_of_month}: "
        f"best={best} below_best={below_best} poor={poor}"
    )
    return row.id


def leaf_count_payload(row: LeafCount) -> dict:
    return {
        "Ind": row.id,
        "Date": row.day_of_month,
        "Month": row.month_label,
        "Route": row.route.strip() if row.route else row.route,
        "BestLeaf": row.best_leaf,
        # external consumers read this spelling
        "BellowBest": row.below_best,
        "Poor": row.poor,
        "User": row.user_name,
        "LogTime": row.log_time.isoformat() if row.log_time else None,
        "PC_Name": row.host_id,
    }


async def leaf_count_history(
    db: AsyncSession,
    month: Optional[str] = None,
    route: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[dict]:
    query = select(LeafCount)
    if month:
        query = query.where(LeafCount.month_label == month.strip())
    if route and route.strip():
        query = query.where(trimmed(LeafCount.route) == route.strip())
    if start_date:
        query = query.where(from_day(LeafCount.log_time, start_date))
    if end_date:
        query = query.where(through_day(LeafCount.log_time, end_date))
    query = query.order_by(LeafCount.log_time.desc(), LeafCount.id.desc())

    async with store_guard(db, "loading leaf count history"):
        result = await db.execute(query)
        rows = result.scalars().all()
    return [leaf_count_payload(r) for r in rows]
