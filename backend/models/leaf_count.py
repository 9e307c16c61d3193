"""
Leaf quality register model
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from backend.database import Base


class LeafCount(Base):
    """Best / below-best / poor leaf counts recorded per route and day"""
    __tablename__ = "Reg_LeafCount"

    id = Column("Ind", Integer, primary_key=True, index=True)
    day_of_month = Column("Date", Integer, nullable=False)
    month_label = Column("Month", String, nullable=False, index=True)
    route = Column("Route", String, nullable=False)
    best_leaf = Column("BestLeaf", Integer, nullable=False, default=0)
    below_best = Column("BelowBest", Integer, nullable=False, default=0)
    poor = Column("Poor", Integer, nullable=False, default=0)
    user_name = Column("User", String, nullable=True)
    host_id = Column("PC_Name", String, nullable=True)
    log_time = Column("LogTime", DateTime, nullable=False, server_default=func.now(), index=True)
