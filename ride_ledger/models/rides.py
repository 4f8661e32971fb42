from sqlalchemy.sql import func
from sqlalchemy import Column, Integer, String, DateTime, Numeric
from ride_ledger.db.database import Base


class Ride(Base):
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    driver = Column(String(100), nullable=False, index=True)  # One of the configured participants
    distance = Column(Numeric(10, 2), nullable=False)  # Kilometres
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
