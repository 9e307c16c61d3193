"""
Typed views over Tr_LeafCollection_Temp rows.

A row is either a raw collection (bags, gross and net weight) or a deduction
(weight adjustments). Both shapes share the same key; IsDeduction tells them
apart. Reading a row through `entry_from_row` gives back exactly one of the two.
"""
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Optional, Union

from backend.models.leaf_collection import LeafCollection, LeafType, DEDUCTION_COLUMNS
from backend.utils.helpers import display_date, display_time


@dataclass(frozen=True)
class CollectionKey:
    reg_no: int
    leaf_type: LeafType
    route: Optional[str] = None
    dealer: Optional[str] = None
    log_time: Optional[datetime] = None


@dataclass(frozen=True)
class RawCollection:
    key: CollectionKey
    quantity: int = 0
    gross_weight: float = 0.0
    net_weight: float = 0.0


@dataclass(frozen=True)
class Deduction:
    key: CollectionKey
    bag_weight: float = 0.0
    water: float = 0.0
    coarse: float = 0.0
    rejected: float = 0.0
    boiled: float = 0.0
    spd: float = 0.0
    route_deduct: float = 0.0
    excess_leaf: float = 0.0
    transfer: float = 0.0
    route_deduct_pre: float = 0.0

    def total(self) -> float:
        return sum(getattr(self, name) for name in DEDUCTION_COLUMNS)

    def amounts(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "key"}


CollectionEntry = Union[RawCollection, Deduction]


def _key_of(row: LeafCollection) -> CollectionKey:
    route = row.route.strip() if row.route else row.route
    return CollectionKey(
        reg_no=row.reg_no,
        leaf_type=LeafType(row.leaf_type),
        route=route,
        dealer=row.dealer,
        log_time=row.log_time,
    )


def entry_from_row(row: LeafCollection) -> CollectionEntry:
    key = _key_of(row)
    if row.is_deduction:
        return Deduction(key, **{name: float(getattr(row, name) or 0) for name in DEDUCTION_COLUMNS})
    return RawCollection(
        key,
        quantity=int(row.qty or 0),
        gross_weight=float(row.gross or 0),
        net_weight=float(row.net_weight or 0),
    )


def row_from_deduction(deduction: Deduction, **provenance) -> LeafCollection:
    """Build the row to insert for a deduction.

    A deduction row always counts as exactly one event with no weight of its own.
    """
    key = deduction.key
    row = LeafCollection(
        reg_no=key.reg_no,
        leaf_type=key.leaf_type,
        route=key.route,
        dealer=key.dealer,
        qty=1,
        gross=0.0,
        net_weight=0.0,
        is_deduction=True,
        **provenance,
    )
    if key.log_time is not None:
        row.log_time = key.log_time
    for name, amount in deduction.amounts().items():
        setattr(row, name, amount)
    return row


def row_payload(row: LeafCollection, mobile_mode: str = "App") -> dict:
    """Row as the web UI / mobile app expect it (field names kept from the legacy API)"""
    return {
        "Ind": row.id,
        "RegNo": row.reg_no,
        "SupplierName": row.dealer,
        "Route": row.route.strip() if row.route else row.route,
        "LeafType": LeafType(row.leaf_type).value,
        "Bags": row.qty,
        "Gross": row.gross,
        "BagWeight": row.bag_weight,
        "Water": row.water,
        "Coarce": row.coarse,
        "Rejected": row.rejected,
        "Boiled": row.boiled,
        "NetWeight": row.net_weight,
        "IsDeduction": bool(row.is_deduction),
        "Shift": row.shift,
        "UserName": row.user_name,
        "Mode": row.mode,
        "LogTime": row.log_time.isoformat() if row.log_time else None,
        "DisplayDate": display_date(row.log_time),
        "DisplayTime": display_time(row.log_time),
        "Source": "Mobile App" if row.mode == mobile_mode else "Web System",
    }
