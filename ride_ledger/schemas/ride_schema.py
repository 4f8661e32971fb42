from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal


class RideBase(BaseModel):
    driver: str = Field(..., min_length=1, max_length=100)
    distance: Decimal = Field(..., gt=0)
    date: datetime


class RideCreate(RideBase):
    pass


class RideCreated(BaseModel):
    id: int


class RideOut(RideBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class UnexportedRideOut(RideOut):
    """A pending ride, with the expense covering it when there is one"""
    expense_id: Optional[int] = None
    expense_description: Optional[str] = None
