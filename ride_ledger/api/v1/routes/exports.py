from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ride_ledger.db.database import get_db
from ride_ledger.services.export_service import mark_exported
from ride_ledger.schemas.export_schema import ExportRequest, ExportResult

router = APIRouter(prefix="/exports", tags=["exports"])


@router.post("", response_model=ExportResult)
def mark_items_exported(export_data: ExportRequest, db: Session = Depends(get_db)):
    """Mark rides, expenses or balances as exported"""
    return ExportResult(exported=mark_exported(db, export_data.item_type, export_data.item_ids))
