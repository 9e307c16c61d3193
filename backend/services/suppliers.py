"""
Supplier lookups. Suppliers have no table of their own; they are the distinct
(RegNo, Dealer, Route) combinations found in the collection table.
"""
from sqlalchemy import select, or_, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.errors import NotFoundError, store_guard
from backend.models.leaf_collection import LeafCollection
from backend.utils.db_compat import trimmed

settings = get_settings()


def _supplier_query():
    return select(
        LeafCollection.reg_no.label("RegNo"),
        LeafCollection.dealer.label("SupplierName"),
        trimmed(LeafCollection.route).label("Route"),
    ).distinct()


async def get_supplier(db: AsyncSession, reg_no: int) -> dict:
    query = _supplier_query().where(LeafCollection.reg_no == reg_no).limit(1)
    async with store_guard(db, "loading supplier"):
        result = await db.execute(query)
        row = result.first()
    if row is None:
        raise NotFoundError("Supplier not found", detail=str(reg_no))
    return dict(row._mapping)


async def search_suppliers(db: AsyncSession, query_text: str) -> list[dict]:
    pattern = f"%{query_text.strip()}%"
    query = (
        _supplier_query()
        .where(or_(
            cast(LeafCollection.reg_no, String).like(pattern),
            LeafCollection.dealer.ilike(pattern),
        ))
        .order_by(LeafCollection.reg_no)
        .limit(settings.SUPPLIER_SEARCH_LIMIT)
    )
    async with store_guard(db, "searching suppliers"):
        result = await db.execute(query)
        return [dict(r._mapping) for r in result]
