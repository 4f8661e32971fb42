import enum
from sqlalchemy.sql import func
from sqlalchemy import Column, Integer, DateTime, Enum, UniqueConstraint
from ride_ledger.db.database import Base


class ItemType(str, enum.Enum):
    ride = "ride"
    expense = "expense"
    balance = "balance"


class ExportedItem(Base):
    """An item already synchronized to the external bookkeeping tool"""
    __tablename__ = "exported_items"
    __table_args__ = (
        UniqueConstraint("item_type", "item_id", name="uq_exported_items_item"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_type = Column(Enum(ItemType), nullable=False)
    item_id = Column(Integer, nullable=False, index=True)
    exported_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
