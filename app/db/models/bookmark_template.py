from sqlalchemy import Column, ForeignKey, Integer, String

from app.db.base import Base


class BookmarkTemplate(Base):
    __tablename__ = "bookmark_template"

    bookmark_id = Column(Integer, ForeignKey("bookmark.bookmark_id"), primary_key=True)
    right_id = Column(String(64), ForeignKey("item_right.right_id"), primary_key=True)
