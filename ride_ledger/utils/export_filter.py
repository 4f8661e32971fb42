from typing import Iterable, List, Set, Tuple
from ride_ledger.models.exports import ItemType

ExportKey = Tuple[ItemType, int]


def unexported(items: Iterable, kind: ItemType, exported_keys: Set[ExportKey], id_attr: str = "id") -> List:
    """
    Drop the items whose (kind, id) has been marked as exported.

    id_attr names the attribute holding the id to check, e.g. "expense_id"
    to hide balances of an exported expense.
    """
    kind = ItemType(kind)
    return [item for item in items if (kind, getattr(item, id_attr)) not in exported_keys]
