"""
Leaf collection model - raw deliveries and deduction adjustments share one table
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from backend.database import Base
from enum import Enum


class LeafType(str, Enum):
    NORMAL = "Normal"
    SUPER = "Super"


class Shift(str, Enum):
    MORNING = "Morning"
    EVENING = "Evening"


DEDUCTION_COLUMNS = (
    "bag_weight",
    "water",
    "coarse",
    "rejected",
    "boiled",
    "spd",
    "route_deduct",
    "excess_leaf",
    "transfer",
    "route_deduct_pre",
)


class LeafCollection(Base):
    """One collection event. IsDeduction selects which field set is meaningful."""
    __tablename__ = "Tr_LeafCollection_Temp"

    id = Column("Ind", Integer, primary_key=True, index=True)
    reg_no = Column("RegNo", Integer, nullable=False, index=True)
    route = Column("Route", String, nullable=True)
    dealer = Column("Dealer", String, nullable=True)
    leaf_type = Column(
        "LeafType",
        SQLEnum(LeafType, values_callable=lambda e: [m.value for m in e],
                native_enum=False, validate_strings=True),
        nullable=False,
        default=LeafType.NORMAL,
    )

    # Raw collection fields
    qty = Column("Qty", Integer, nullable=False, default=0)
    gross = Column("Gross", Float, nullable=False, default=0)
    net_weight = Column("NetWeight", Float, nullable=False, default=0)

    # Deduction fields
    bag_weight = Column("BagWeight", Float, nullable=False, default=0)
    water = Column("Water", Float, nullable=False, default=0)
    coarse = Column("Coarse", Float, nullable=False, default=0)
    rejected = Column("Rejected", Float, nullable=False, default=0)
    boiled = Column("Boild", Float, nullable=False, default=0)
    spd = Column("Spd", Float, nullable=False, default=0)
    route_deduct = Column("RouteDeduct", Float, nullable=False, default=0)
    excess_leaf = Column("Excess_Leaf", Float, nullable=False, default=0)
    transfer = Column("Transfer", Float, nullable=False, default=0)
    route_deduct_pre = Column("RouteDeductPre", Float, nullable=False, default=0)

    is_deduction = Column("IsDeduction", Boolean, nullable=False, default=False, index=True)

    # Provenance
    shift = Column("Shift", String, nullable=True)
    user_name = Column("UserName", String, nullable=True)
    mode = Column("Mode", String, nullable=True)          # "App" for mobile, anything else is web
    host_id = Column("PC_Name", String, nullable=True)
    month_label = Column("MonthName", String, nullable=True)  # e.g. "Jan-2025"
    day_of_month = Column("Date", Integer, nullable=True)
    log_time = Column("LogTime", DateTime, nullable=False, server_default=func.now(), index=True)
