from app.db.models.metadata import ItemMetadata
from app.db.models.right import ItemRight, RightGroup
from app.db.models.item import ItemLink
from app.db.models.bookmark import Bookmark
from app.db.models.bookmark_template import BookmarkTemplate

__all__ = ["ItemMetadata", "ItemRight", "RightGroup", "ItemLink", "Bookmark", "BookmarkTemplate"]
