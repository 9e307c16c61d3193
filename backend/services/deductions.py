"""
Deduction write path.

Each save appends one deduction row; nothing is ever updated or de-duplicated.
Upstream clients (web UI and mobile app) send the same logical fields under
different keys, so every input is resolved through FIELD_ALIASES.
"""
from datetime import date, datetime
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.errors import ValidationError, store_guard
from backend.models.leaf_collection import LeafCollection, DEDUCTION_COLUMNS
from backend.services.collection_entries import CollectionKey, Deduction, row_from_deduction, row_payload
from backend.utils.db_compat import on_day
from backend.utils.helpers import shift_for, month_label_for, to_float, day_of_month_or, first_present
from backend.utils.logger import get_logger
from backend.utils.validators import validate_reg_no, validate_leaf_type, validate_required_text

logger = get_logger(__name__)
settings = get_settings()

# logical field -> accepted external keys, in order of preference
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "reg_no": ("regNo", "RegNo", "registrationNo", "reg_no"),
    "route": ("route", "Route", "routeName"),
    "supplier_name": ("supplierName", "SupplierName", "dealerName", "dealer", "Dealer"),
    "leaf_type": ("leafType", "LeafType", "leaf_type"),
    "bag_weight": ("bagWeight", "BagWeight", "bag_weight"),
    "water": ("water", "Water"),
    "coarse": ("coarse", "coarce", "Coarse", "Coarce", "coarseLeaf"),
    "rejected": ("rejected", "Rejected", "rejectedLeaf"),
    "boiled": ("boiled", "boild", "Boiled", "Boild"),
    "spd": ("spd", "Spd", "SPD"),
    "route_deduct": ("routeDeduct", "RouteDeduct", "route_deduct"),
    "excess_leaf": ("excessLeaf", "Excess_Leaf", "ExcessLeaf", "excess_leaf"),
    "transfer": ("transfer", "Transfer"),
    "route_deduct_pre": ("routeDeductPre", "RouteDeductPre", "route_deduct_pre"),
    "user_name": ("userName", "UserName", "user", "User"),
    "host_id": ("pcName", "PC_Name", "hostId", "hostName"),
    "month_label": ("month", "monthName", "MonthName", "monthLabel"),
    "day_of_month": ("date", "day", "dayOfMonth"),
}


def resolve_field(payload: Mapping[str, Any], field: str) -> Any:
    """First non-blank value among the field's aliases, or None"""
    return first_present(payload, FIELD_ALIASES[field])


def resolve_fields(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {field: resolve_field(payload, field) for field in FIELD_ALIASES}


def build_deduction(payload: Mapping[str, Any], now: datetime) -> tuple[Deduction, dict]:
    """Validate a save request and split it into the deduction and its provenance"""
    values = resolve_fields(payload)

    reg_no = validate_reg_no(values["reg_no"])
    route = validate_required_text(values["route"], "Route")
    supplier_name = validate_required_text(values["supplier_name"], "Supplier name")
    leaf_type = validate_leaf_type(values["leaf_type"])

    amounts = {name: to_float(values[name]) for name in DEDUCTION_COLUMNS}
    negative = [name for name, amount in amounts.items() if amount < 0]
    if negative:
        raise ValidationError("Deduction amounts cannot be negative", detail=", ".join(negative))

    key = CollectionKey(
        reg_no=reg_no,
        leaf_type=leaf_type,
        route=route,
        dealer=supplier_name.strip(),
        log_time=now,
    )
    provenance = {
        "shift": shift_for(now).value,
        "user_name": values["user_name"] or settings.DEFAULT_USER_NAME,
        "host_id": values["host_id"] or settings.DEFAULT_HOST_ID,
        "mode": settings.MOBILE_SOURCE_MODE,
        "month_label": str(values["month_label"]).strip() if values["month_label"] else month_label_for(now.date()),
        "day_of_month": day_of_month_or(values["day_of_month"], now.day),
    }
    return Deduction(key, **amounts), provenance


async def record_deduction(
    db: AsyncSession,
    payload: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> int:
    """Append one deduction row and return its id"""
    now = now or datetime.now()
    deduction, provenance = build_deduction(payload, now)
    row = row_from_deduction(deduction, **provenance)

    async with store_guard(db, "saving deduction"):
        db.add(row)
        await db.commit()
        await db.refresh(row)

    logger.info(
        f"Saved deduction Ind={row.id} RegNo={row.reg_no} {deduction.key.leaf_type.value} "
        f"total={deduction.total():.2f} shift={row.shift}"
    )
    return row.id


async def today_deductions(
    db: AsyncSession,
    reg_no: int,
    day: Optional[date] = None,
) -> list[dict]:
    """Deduction rows for one supplier on one day (default today), newest first"""
    day = day or date.today()
    query = (
        select(LeafCollection)
        .where(
            LeafCollection.reg_no == reg_no,
            LeafCollection.is_deduction == True,  # noqa: E712
            on_day(LeafCollection.log_time, day),
        )
        .order_by(LeafCollection.log_time.desc(), LeafCollection.id.desc())
    )
    async with store_guard(db, "loading today's deductions"):
        result = await db.execute(query)
        rows = result.scalars().all()
    return [row_payload(r, settings.MOBILE_SOURCE_MODE) for r in rows]
