from sqlalchemy.sql import func
from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, ForeignKey, CheckConstraint
from ride_ledger.db.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    payer = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class RideExpenseLink(Base):
    __tablename__ = "ride_expense_link"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # unique: a ride is covered by at most one expense
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=False, unique=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    percentage = Column(Numeric(5, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ExpenseBalance(Base):
    __tablename__ = "expense_balances"
    __table_args__ = (
        CheckConstraint("from_user != to_user", name="ck_expense_balances_distinct_users"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    from_user = Column(String(100), nullable=False, index=True)
    to_user = Column(String(100), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
