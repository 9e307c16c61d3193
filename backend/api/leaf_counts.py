"""
Leaf count API endpoints - route list, route net weight, leaf quality register
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.errors import ValidationError
from backend.services import leaf_count, route_weight
from backend.utils.helpers import envelope
from backend.utils.logger import get_logger
from backend.utils.validators import parse_iso_date

router = APIRouter()
logger = get_logger(__name__)


@router.get("/routes")
async def get_routes(db: AsyncSession = Depends(get_db)):
    """Distinct route names"""
    routes = await route_weight.distinct_routes(db)
    logger.info(f"Routes found: {len(routes)}")
    return envelope(routes)


@router.get("/routes/{route_name}/total-weight")
async def get_route_total_weight(
    route_name: str,
    date: Optional[str] = None,
    month: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Net leaf weight for a route on one day (`date` = day of month, `month` = 'Jan-2025')"""
    if not route_name.strip():
        raise ValidationError("Route name is required")
    if not date or not month:
        raise ValidationError("Date and month are required")

    breakdown = await route_weight.route_weight_breakdown(db, route_name, date, month)
    return envelope(
        {
            "route": breakdown.route,
            "date": date,
            "month": month,
            "targetDate": breakdown.target_date.isoformat() if breakdown.target_date else None,
            "recordCount": breakdown.record_count,
            "totalGross": breakdown.total_gross,
            "totalDeductions": breakdown.total_deductions,
            "totalWeight": breakdown.net_weight,
            "formula": route_weight.FORMULA,
        },
        message="Route total net weight calculated successfully",
    )


@router.post("/save", status_code=201)
async def save_leaf_count(
    payload: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Record best / below-best / poor leaf counts for a route and day"""
    ind = await leaf_count.save_leaf_count(db, payload)
    return envelope({"ind": ind}, message="Leaf count saved successfully")


@router.get("/history")
async def get_leaf_count_history(
    month: Optional[str] = None,
    route: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    """Leaf count history, newest first"""
    history = await leaf_count.leaf_count_history(
        db,
        month=month,
        route=route,
        start_date=parse_iso_date(start_date, "startDate") if start_date else None,
        end_date=parse_iso_date(end_date, "endDate") if end_date else None,
    )
    return envelope(history, count=len(history))
