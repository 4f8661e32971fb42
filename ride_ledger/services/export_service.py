import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional, Set
from ride_ledger.models.rides import Ride
from ride_ledger.models.expenses import Expense, ExpenseBalance
from ride_ledger.models.exports import ExportedItem, ItemType
from ride_ledger.utils.exceptions import PersistenceError, ValidationError
from ride_ledger.utils.export_filter import ExportKey

logger = logging.getLogger(__name__)

_ITEM_MODELS = {
    ItemType.ride: Ride,
    ItemType.expense: Expense,
    ItemType.balance: ExpenseBalance,
}


def get_exported_keys(db: Session, item_type: Optional[ItemType] = None) -> Set[ExportKey]:
    """Get the (item_type, item_id) pairs already exported"""
    query = db.query(ExportedItem.item_type, ExportedItem.item_id)
    if item_type is not None:
        query = query.filter(ExportedItem.item_type == item_type)
    return {(ItemType(kind), item_id) for kind, item_id in query.all()}


def mark_exported(db: Session, item_type: ItemType, item_ids: List[int]) -> int:
    """
    Mark items as exported to the external bookkeeping tool.

    Items exported before are skipped, so marking twice is harmless.

    Returns:
        Number of items newly marked

    Raises:
        ValidationError: If an id does not exist for the item type
        PersistenceError: If the store rejects the write
    """
    model = _ITEM_MODELS[item_type]
    requested = set(item_ids)
    found = {row.id for row in db.query(model.id).filter(model.id.in_(sorted(requested))).all()}
    missing = sorted(requested - found)
    if missing:
        logger.warning(f"Rejected export of unknown {item_type.value}(s): {missing}")
        raise ValidationError(f"Unknown {item_type.value} id(s): {missing}")

    already = {item_id for _, item_id in get_exported_keys(db, item_type)}
    new_ids = sorted(requested - already)

    try:
        for item_id in new_ids:
            db.add(ExportedItem(item_type=item_type, item_id=item_id))
        db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Failed to mark {item_type.value}(s) {new_ids} as exported: {e}")
        db.rollback()
        raise PersistenceError("Failed to mark items as exported") from e

    logger.info(f"Marked {len(new_ids)} {item_type.value}(s) as exported")
    return len(new_ids)
