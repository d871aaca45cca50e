"""Library users and their per-item watch state"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String

from library_recommendation_service.models.base import Base


class User(Base):
    """A library user."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}')>"


class UserItemData(Base):
    """Per-user state of a catalog item.

    ``likes`` is tri-state: None means the user never rated the item.
    """
    __tablename__ = "user_item_data"

    user_id = Column(String(32), ForeignKey("users.id"), primary_key=True)
    item_id = Column(String(32), ForeignKey("catalog_items.id"), primary_key=True)

    played = Column(Boolean, nullable=False, default=False)
    play_count = Column(Integer, nullable=False, default=0)
    last_played_date = Column(DateTime, nullable=True)
    is_favorite = Column(Boolean, nullable=False, default=False)
    likes = Column(Boolean, nullable=True)

    __table_args__ = (
        Index("idx_user_data_item", "item_id"),
    )

    def __repr__(self):
        return (
            f"<UserItemData(user_id={self.user_id}, item_id={self.item_id}, "
            f"played={self.played}, favorite={self.is_favorite})>"
        )
