"""
Collection view API endpoints - grouped daily totals per supplier
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.services import aggregation
from backend.utils.helpers import envelope
from backend.utils.validators import parse_iso_date, validate_reg_no

router = APIRouter()


@router.get("")
async def get_filtered_collections(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    reg_no: Optional[str] = Query(None, alias="regNo"),
    route: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Grouped totals filtered by date range, registration number and route"""
    groups = await aggregation.filtered_totals(
        db,
        start_date=parse_iso_date(start_date, "startDate") if start_date else None,
        end_date=parse_iso_date(end_date, "endDate") if end_date else None,
        reg_no=validate_reg_no(reg_no) if reg_no else None,
        route=route,
    )
    return envelope(groups, count=len(groups))


@router.get("/today")
async def get_today_collections(db: AsyncSession = Depends(get_db)):
    """Today's collections grouped by registration number"""
    return envelope(await aggregation.grouped_totals(db))


@router.get("/date/{day}")
async def get_collections_by_date(
    day: str,
    db: AsyncSession = Depends(get_db),
):
    """Grouped collections for an explicit YYYY-MM-DD date"""
    return envelope(await aggregation.grouped_totals(db, parse_iso_date(day)))


@router.get("/details/{reg_no}")
async def get_collection_details(
    reg_no: str,
    db: AsyncSession = Depends(get_db),
):
    """Every collection and deduction row for one supplier"""
    return envelope(await aggregation.collection_details(db, validate_reg_no(reg_no)))
