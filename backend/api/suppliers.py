"""
Suppliers API endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.errors import ValidationError
from backend.services import deductions, suppliers
from backend.utils.helpers import envelope
from backend.utils.validators import validate_reg_no

router = APIRouter()


@router.get("/search/all")
async def search_suppliers(
    query: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Search suppliers by registration number or name"""
    if not query or not query.strip():
        raise ValidationError("Search query is required")
    return envelope(await suppliers.search_suppliers(db, query))


@router.get("/{reg_no}")
async def get_supplier(
    reg_no: str,
    db: AsyncSession = Depends(get_db),
):
    """Supplier details plus today's deduction rows"""
    reg_no = validate_reg_no(reg_no)
    supplier = await suppliers.get_supplier(db, reg_no)
    today = await deductions.today_deductions(db, reg_no)
    return envelope({
        "regNo": supplier["RegNo"],
        "supplierName": supplier["SupplierName"],
        "route": supplier["Route"],
        "todayTransactions": today,
    })
