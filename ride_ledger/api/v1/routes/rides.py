from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from ride_ledger.config import Settings, get_settings
from ride_ledger.db.database import get_db
from ride_ledger.services.ride_service import (
    create_ride, get_ride, get_rides, get_linked_rides, get_available_rides, get_unexported_rides
)
from ride_ledger.schemas.ride_schema import RideCreate, RideCreated, RideOut, UnexportedRideOut
from ride_ledger.utils.exceptions import NotFoundError

router = APIRouter(prefix="/rides", tags=["rides"])


@router.post("", response_model=RideCreated, status_code=201)
def create_new_ride(
    ride_data: RideCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Record a ride"""
    ride = create_ride(db, ride_data, settings.participants)
    return RideCreated(id=ride.id)


@router.get("", response_model=List[RideOut])
def list_rides(db: Session = Depends(get_db)):
    """Get all rides, newest first"""
    return get_rides(db)


@router.get("/linked", response_model=List[RideOut])
def list_linked_rides(db: Session = Depends(get_db)):
    """Get rides already covered by an expense"""
    return get_linked_rides(db)


@router.get("/available", response_model=List[RideOut])
def list_available_rides(db: Session = Depends(get_db)):
    """Get rides not yet covered by any expense"""
    return get_available_rides(db)


@router.get("/unexported", response_model=List[UnexportedRideOut])
def list_unexported_rides(db: Session = Depends(get_db)):
    """Get rides not yet exported, with their expense if linked"""
    return get_unexported_rides(db)


@router.get("/{ride_id}", response_model=RideOut)
def get_ride_details(ride_id: int, db: Session = Depends(get_db)):
    """Get a ride by ID"""
    ride = get_ride(db, ride_id)
    if not ride:
        raise NotFoundError(f"Ride {ride_id} not found")
    return ride
