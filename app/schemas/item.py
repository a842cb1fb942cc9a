from pydantic import BaseModel, ConfigDict

from app.schemas.metadata import ItemMetadata
from app.schemas.right import Right


class Item(BaseModel):
    """A metadata record with all rights linked to it."""

    model_config = ConfigDict(from_attributes=True)

    metadata: ItemMetadata
    rights: list[Right] = []


class ItemEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    metadata_id: str
    right_id: str


class ItemEntryCreate(ItemEntry):
    delete_right_on_conflict: bool = False


class ItemCount(BaseModel):
    right_id: str
    count: int
