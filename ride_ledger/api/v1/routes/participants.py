from fastapi import APIRouter, Depends
from typing import List
from ride_ledger.config import Settings, get_settings

router = APIRouter(prefix="/participants", tags=["participants"])


@router.get("", response_model=List[str])
def list_participants(settings: Settings = Depends(get_settings)):
    """Get the configured participants"""
    return settings.participants
