from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime
from decimal import Decimal


class BalanceSummaryRow(BaseModel):
    expense_id: int
    expense_description: str
    from_user: str
    to_user: str
    amount: str
    total_amount: str


class DetailedBalance(BaseModel):
    expense_id: int
    description: str
    date: datetime
    total_amount: str
    from_user: str
    to_user: str
    balance_amount: str


class GroupedBalance(BaseModel):
    """Sum of the raw debts in one direction between two participants"""
    from_user: str
    to_user: str
    total_amount: Decimal


class Settlement(BaseModel):
    """One netted payment that settles opposing debts"""
    from_user: str
    to_user: str
    amount: Decimal


class BalancesOverview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    detailed_balances: List[DetailedBalance] = Field(default_factory=list, alias="detailedBalances")
    total_balances: List[Settlement] = Field(default_factory=list, alias="totalBalances")


class DriverSummary(BaseModel):
    driver: str
    total_distance: str
    total_expense: str
