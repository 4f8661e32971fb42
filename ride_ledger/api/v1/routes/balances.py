from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from ride_ledger.config import Settings, get_settings
from ride_ledger.db.database import get_db
from ride_ledger.services.balance_service import (
    get_summary, get_total_balances, get_balances_overview, get_driver_summary
)
from ride_ledger.schemas.balance_schema import (
    BalanceSummaryRow, GroupedBalance, BalancesOverview, DriverSummary
)

router = APIRouter(tags=["balances"])


@router.get("/summary", response_model=List[BalanceSummaryRow])
def read_summary(db: Session = Depends(get_db)):
    """Get every balance with its expense"""
    return get_summary(db)


@router.get("/summary/drivers", response_model=List[DriverSummary])
def read_driver_summary(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Get distance driven and expense share per participant"""
    return get_driver_summary(db, settings.participants)


@router.get("/summary/balances", response_model=BalancesOverview)
def read_balances_overview(db: Session = Depends(get_db)):
    """Get pending per-expense balances and their netted totals"""
    return get_balances_overview(db)


@router.get("/expense-balances", response_model=BalancesOverview)
def read_expense_balances(db: Session = Depends(get_db)):
    """Same as /summary/balances"""
    return get_balances_overview(db)


@router.get("/total-balances", response_model=List[GroupedBalance])
def read_total_balances(db: Session = Depends(get_db)):
    """Get raw debts summed per direction, without netting"""
    return get_total_balances(db)
