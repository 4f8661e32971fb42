import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Sequence
from ride_ledger.models.rides import Ride
from ride_ledger.models.expenses import Expense, RideExpenseLink
from ride_ledger.models.exports import ItemType
from ride_ledger.schemas.ride_schema import RideCreate, RideOut, UnexportedRideOut
from ride_ledger.services.participant_service import ensure_participant
from ride_ledger.services.export_service import get_exported_keys
from ride_ledger.utils.exceptions import PersistenceError
from ride_ledger.utils.export_filter import unexported

logger = logging.getLogger(__name__)


def create_ride(db: Session, ride_data: RideCreate, participants: Sequence[str]) -> Ride:
    """Record a ride as submitted"""
    ensure_participant(ride_data.driver, participants, role="driver")

    ride = Ride(
        driver=ride_data.driver,
        distance=ride_data.distance,
        date=ride_data.date
    )
    try:
        db.add(ride)
        db.commit()
        db.refresh(ride)
    except SQLAlchemyError as e:
        logger.error(f"Failed to store ride for {ride_data.driver}: {e}")
        db.rollback()
        raise PersistenceError("Failed to add ride") from e

    logger.info(f"Added ride {ride.id}: {ride.driver} drove {ride.distance} km")
    return ride


def get_ride(db: Session, ride_id: int) -> Optional[Ride]:
    """Get a ride by ID"""
    return db.query(Ride).filter(Ride.id == ride_id).first()


def get_rides(db: Session) -> List[Ride]:
    """Get all rides, newest first"""
    return db.query(Ride).order_by(Ride.date.desc(), Ride.id.desc()).all()


def get_linked_rides(db: Session) -> List[Ride]:
    """Get the rides already covered by an expense"""
    return db.query(Ride)\
        .join(RideExpenseLink, RideExpenseLink.ride_id == Ride.id)\
        .distinct()\
        .order_by(Ride.date.desc(), Ride.id.desc())\
        .all()


def get_available_rides(db: Session) -> List[Ride]:
    """Get the rides a new expense may still cover"""
    return db.query(Ride)\
        .outerjoin(RideExpenseLink, RideExpenseLink.ride_id == Ride.id)\
        .filter(RideExpenseLink.id.is_(None))\
        .order_by(Ride.date.desc(), Ride.id.desc())\
        .all()


def get_unexported_rides(db: Session) -> List[UnexportedRideOut]:
    """Get rides not yet exported, with the expense covering each one (if any)"""
    rows = db.query(Ride, Expense.id, Expense.description)\
        .outerjoin(RideExpenseLink, RideExpenseLink.ride_id == Ride.id)\
        .outerjoin(Expense, Expense.id == RideExpenseLink.expense_id)\
        .order_by(Ride.date.desc(), Ride.id.desc())\
        .all()

    pending = unexported([ride for ride, _, _ in rows], ItemType.ride, get_exported_keys(db, ItemType.ride))
    pending_ids = {ride.id for ride in pending}

    return [
        UnexportedRideOut(
            **RideOut.model_validate(ride).model_dump(),
            expense_id=expense_id,
            expense_description=expense_description
        )
        for ride, expense_id, expense_description in rows
        if ride.id in pending_ids
    ]
