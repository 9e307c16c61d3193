"""
Deductions API endpoints
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.models.leaf_collection import LeafType
from backend.services import aggregation, deductions
from backend.utils.helpers import envelope
from backend.utils.logger import get_logger
from backend.utils.validators import validate_reg_no, validate_leaf_type

router = APIRouter()
logger = get_logger(__name__)


def leaf_type_header(leaf_type: Optional[str] = Header(None)) -> LeafType:
    """`leaf-type` request header, defaulting to Normal"""
    if leaf_type is None or not leaf_type.strip():
        return LeafType.NORMAL
    return validate_leaf_type(leaf_type)


async def _summary_response(db: AsyncSession, reg_no: str, leaf_type: LeafType) -> dict:
    reg_no = validate_reg_no(reg_no)
    logger.info(f"Today's summary for RegNo={reg_no} LeafType={leaf_type.value}")
    summary = await aggregation.summarize(db, reg_no, leaf_type)
    return envelope(summary.to_dict())


@router.get("/summary/{reg_no}")
async def get_deduction_summary(
    reg_no: str,
    leaf_type: LeafType = Depends(leaf_type_header),
    db: AsyncSession = Depends(get_db),
):
    """Today's totals for a supplier; leaf type comes from the `leaf-type` header"""
    return await _summary_response(db, reg_no, leaf_type)


@router.get("/summary/{reg_no}/{leaf_type}")
async def get_deduction_summary_for_leaf_type(
    reg_no: str,
    leaf_type: str,
    db: AsyncSession = Depends(get_db),
):
    return await _summary_response(db, reg_no, validate_leaf_type(leaf_type))


@router.post("", status_code=201)
async def save_deduction(
    payload: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Append one deduction row"""
    ind = await deductions.record_deduction(db, payload)
    return envelope({"ind": ind}, message="Deduction saved successfully")


@router.get("/today/{reg_no}")
async def get_today_transactions(
    reg_no: str,
    db: AsyncSession = Depends(get_db),
):
    """Today's deduction rows for a supplier"""
    reg_no = validate_reg_no(reg_no)
    return envelope(await deductions.today_deductions(db, reg_no))
