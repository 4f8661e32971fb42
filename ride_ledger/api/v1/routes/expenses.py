from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from ride_ledger.config import Settings, get_settings
from ride_ledger.db.database import get_db
from ride_ledger.services.expense_service import (
    create_expense, get_expense, get_expenses, get_expense_links, get_expense_balances
)
from ride_ledger.schemas.expense_schema import (
    ExpenseCreate, ExpenseCreated, ExpenseOut, ExpenseWithAllocation, RideShare, DriverDebt
)
from ride_ledger.utils.exceptions import NotFoundError

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("", response_model=ExpenseCreated)
def create_new_expense(
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Create an expense and split it over the selected rides"""
    create_expense(db, expense_data, settings.participants)
    return ExpenseCreated(message="Expense added successfully")


@router.get("", response_model=List[ExpenseOut])
def list_expenses(db: Session = Depends(get_db)):
    """Get all expenses, newest first"""
    return get_expenses(db)


@router.get("/{expense_id}", response_model=ExpenseWithAllocation)
def get_expense_details(expense_id: int, db: Session = Depends(get_db)):
    """Get an expense with its ride links and balances"""
    expense = get_expense(db, expense_id)
    if not expense:
        raise NotFoundError(f"Expense {expense_id} not found")

    return ExpenseWithAllocation(
        **ExpenseOut.model_validate(expense).model_dump(),
        links=[RideShare(ride_id=link.ride_id, percentage=link.percentage)
               for link in get_expense_links(db, expense_id)],
        balances=[DriverDebt(from_user=balance.from_user, to_user=balance.to_user, amount=balance.amount)
                  for balance in get_expense_balances(db, expense_id)]
    )
