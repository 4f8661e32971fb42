import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from typing import Dict, List, Sequence, Tuple
from ride_ledger.models.rides import Ride
from ride_ledger.models.expenses import Expense, RideExpenseLink, ExpenseBalance
from ride_ledger.models.exports import ItemType
from ride_ledger.schemas.balance_schema import (
    BalanceSummaryRow, DetailedBalance, GroupedBalance, BalancesOverview, DriverSummary
)
from ride_ledger.services.export_service import get_exported_keys
from ride_ledger.utils.allocation import driver_shares
from ride_ledger.utils.export_filter import unexported
from ride_ledger.utils.money import format_amount, to_decimal
from ride_ledger.utils.settlement import reduce_balances, sum_balances

logger = logging.getLogger(__name__)


def get_summary(db: Session) -> List[BalanceSummaryRow]:
    """Every balance row with its expense, newest expense first"""
    rows = db.query(ExpenseBalance, Expense)\
        .join(Expense, Expense.id == ExpenseBalance.expense_id)\
        .order_by(Expense.created_at.desc(), Expense.id.desc(), ExpenseBalance.id)\
        .all()

    return [
        BalanceSummaryRow(
            expense_id=expense.id,
            expense_description=expense.description or "",
            from_user=balance.from_user,
            to_user=balance.to_user,
            amount=format_amount(balance.amount),
            total_amount=format_amount(expense.amount)
        )
        for balance, expense in rows
    ]


def get_total_balances(db: Session) -> List[GroupedBalance]:
    """Raw debts summed per direction, over all expenses"""
    return sum_balances(db.query(ExpenseBalance).all())


def get_pending_balances(db: Session) -> List[Tuple[ExpenseBalance, Expense]]:
    """
    Balances still pending export: neither the balance nor its expense has
    been exported. Newest expense first.
    """
    rows = db.query(ExpenseBalance, Expense)\
        .join(Expense, Expense.id == ExpenseBalance.expense_id)\
        .order_by(Expense.date.desc(), Expense.id.desc(), ExpenseBalance.id)\
        .all()

    exported = get_exported_keys(db)
    balances = unexported([balance for balance, _ in rows], ItemType.balance, exported)
    balances = unexported(balances, ItemType.expense, exported, id_attr="expense_id")
    pending_ids = {balance.id for balance in balances}

    return [(balance, expense) for balance, expense in rows if balance.id in pending_ids]


def get_balances_overview(db: Session) -> BalancesOverview:
    """Pending per-expense balances together with their netted totals"""
    pending = get_pending_balances(db)

    detailed = [
        DetailedBalance(
            expense_id=expense.id,
            description=expense.description or "",
            date=expense.date,
            total_amount=format_amount(expense.amount),
            from_user=balance.from_user,
            to_user=balance.to_user,
            balance_amount=format_amount(balance.amount)
        )
        for balance, expense in pending
    ]
    totals = reduce_balances([balance for balance, _ in pending])

    logger.debug(f"Balances overview: {len(detailed)} pending balance(s), {len(totals)} settlement(s)")
    return BalancesOverview(detailed_balances=detailed, total_balances=totals)


def get_driver_summary(db: Session, participants: Sequence[str]) -> List[DriverSummary]:
    """
    Distance driven and expense share per participant.

    A driver's expense share is their distance-proportional part of every
    expense covering one of their rides, whoever paid it.
    """
    distances: Dict[str, Decimal] = {name: Decimal('0') for name in participants}
    for ride in db.query(Ride).all():
        distances[ride.driver] = distances.get(ride.driver, Decimal('0')) + to_decimal(ride.distance)

    linked: Dict[int, List[Ride]] = {}
    for link, ride in db.query(RideExpenseLink, Ride).join(Ride, Ride.id == RideExpenseLink.ride_id).all():
        linked.setdefault(link.expense_id, []).append(ride)

    shares: Dict[str, Decimal] = {name: Decimal('0') for name in distances}
    for expense in db.query(Expense).filter(Expense.id.in_(list(linked))).all():
        for driver, share in driver_shares(expense.amount, linked[expense.id]).items():
            shares[driver] = shares.get(driver, Decimal('0')) + share

    return [
        DriverSummary(
            driver=driver,
            total_distance=format_amount(distance),
            total_expense=format_amount(shares.get(driver, Decimal('0')))
        )
        for driver, distance in distances.items()
    ]
