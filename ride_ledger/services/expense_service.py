import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Sequence
from ride_ledger.models.rides import Ride
from ride_ledger.models.expenses import Expense, RideExpenseLink, ExpenseBalance
from ride_ledger.schemas.expense_schema import ExpenseCreate
from ride_ledger.services.participant_service import ensure_participant
from ride_ledger.utils.allocation import HUNDRED, allocate
from ride_ledger.utils.exceptions import PersistenceError, ValidationError
from ride_ledger.utils.money import round_decimal, round_to_total

logger = logging.getLogger(__name__)


def _check_rides_available(db: Session, ride_ids: Sequence[int]) -> None:
    """Reject rides that another expense already covers"""
    linked = db.query(RideExpenseLink.ride_id, RideExpenseLink.expense_id)\
        .filter(RideExpenseLink.ride_id.in_(sorted(set(ride_ids))))\
        .order_by(RideExpenseLink.ride_id)\
        .all()
    if linked:
        details = ", ".join(f"ride {ride_id} (expense {expense_id})" for ride_id, expense_id in linked)
        logger.warning(f"Rejected expense covering already linked rides: {details}")
        raise ValidationError(f"Rides already linked to an expense: {details}")


def create_expense(db: Session, expense_data: ExpenseCreate, participants: Sequence[str]) -> Expense:
    """
    Create an expense and allocate it over the selected rides.

    The expense, its ride links and its balances are written in one
    transaction: either all of them are stored or none is.

    Raises:
        ValidationError: Before any write, if the payer is unknown or the
            ride selection cannot be allocated
        PersistenceError: If the store fails; nothing is left behind
    """
    ensure_participant(expense_data.payer, participants, role="payer")

    rides = []
    if expense_data.ride_ids:
        rides = db.query(Ride).filter(Ride.id.in_(sorted(set(expense_data.ride_ids)))).all()

    try:
        allocation = allocate(expense_data.amount, expense_data.payer, expense_data.ride_ids, rides)
    except ValidationError as e:
        logger.warning(f"Rejected expense '{expense_data.description}': {e.message}")
        raise

    _check_rides_available(db, expense_data.ride_ids)

    # stored rows add up exactly: percentages to 100, balances to the rounded sum of the debts
    percentages = round_to_total([link.percentage for link in allocation.links], HUNDRED)
    debt_amounts = round_to_total(
        [debt.amount for debt in allocation.balances],
        sum((debt.amount for debt in allocation.balances), Decimal('0'))
    )
    debts = [(debt, amount) for debt, amount in zip(allocation.balances, debt_amounts) if amount > 0]

    try:
        expense = Expense(
            amount=round_decimal(expense_data.amount),
            description=expense_data.description,
            date=expense_data.date,
            payer=expense_data.payer
        )
        db.add(expense)
        db.flush()  # assigns expense.id

        for link, percentage in zip(allocation.links, percentages):
            db.add(RideExpenseLink(
                ride_id=link.ride_id,
                expense_id=expense.id,
                percentage=percentage
            ))

        for debt, amount in debts:
            db.add(ExpenseBalance(
                expense_id=expense.id,
                from_user=debt.from_user,
                to_user=debt.to_user,
                amount=amount
            ))

        db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Failed to store expense '{expense_data.description}', rolling back: {e}")
        db.rollback()
        raise PersistenceError("Failed to add expense") from e

    db.refresh(expense)
    logger.info(
        f"Added expense {expense.id}: {expense.amount} paid by {expense.payer} "
        f"over {len(allocation.links)} ride(s), {len(debts)} balance(s)"
    )
    return expense


def get_expense(db: Session, expense_id: int) -> Optional[Expense]:
    """Get an expense by ID"""
    return db.query(Expense).filter(Expense.id == expense_id).first()


def get_expenses(db: Session) -> List[Expense]:
    """Get all expenses, newest first"""
    return db.query(Expense).order_by(Expense.date.desc(), Expense.id.desc()).all()


def get_expense_links(db: Session, expense_id: int) -> List[RideExpenseLink]:
    """Get the ride links of an expense"""
    return db.query(RideExpenseLink)\
        .filter(RideExpenseLink.expense_id == expense_id)\
        .order_by(RideExpenseLink.id)\
        .all()


def get_expense_balances(db: Session, expense_id: int) -> List[ExpenseBalance]:
    """Get the balances produced by an expense"""
    return db.query(ExpenseBalance)\
        .filter(ExpenseBalance.expense_id == expense_id)\
        .order_by(ExpenseBalance.id)\
        .all()
