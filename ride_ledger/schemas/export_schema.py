from pydantic import BaseModel, Field
from typing import List
from ride_ledger.models.exports import ItemType


class ExportRequest(BaseModel):
    item_type: ItemType
    item_ids: List[int] = Field(..., min_length=1)


class ExportResult(BaseModel):
    exported: int
