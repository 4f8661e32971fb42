from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime
from decimal import Decimal


class ExpenseBase(BaseModel):
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., max_length=1000)
    date: datetime
    payer: str = Field(..., min_length=1, max_length=100)


class ExpenseCreate(ExpenseBase):
    model_config = ConfigDict(populate_by_name=True)

    ride_ids: List[int] = Field(..., alias="rideIds")


class ExpenseCreated(BaseModel):
    message: str


class ExpenseOut(ExpenseBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class RideShare(BaseModel):
    """Part of an expense's distance contributed by one ride"""
    ride_id: int
    percentage: Decimal = Field(..., ge=0, le=100)


class DriverDebt(BaseModel):
    """A directed debt from one driver to the payer of an expense"""
    from_user: str
    to_user: str
    amount: Decimal = Field(..., gt=0)


class Allocation(BaseModel):
    links: List[RideShare] = []
    balances: List[DriverDebt] = []


class ExpenseWithAllocation(ExpenseOut):
    links: List[RideShare] = []
    balances: List[DriverDebt] = []
