"""Repository for users and their per-item state."""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from library_recommendation_service.models import User, UserItemData

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Repository for library users and user item data.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_id(self, user_id: str) -> User | None:
        """Get user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def store_user(self, user_data: dict) -> User:
        """
        Store or update a user.

        Args:
            user_data: Dict with ``id`` and ``name``

        Returns:
            User object
        """
        existing = self.get_user_by_id(user_data["id"])

        if existing:
            existing.name = user_data["name"]  # type: ignore[assignment]
            user = existing
        else:
            user = User(id=user_data["id"], name=user_data["name"])
            self.db.add(user)

        self.db.commit()
        self.db.refresh(user)

        return user

    def store_user_data(self, record: dict) -> UserItemData:
        """
        Store or update a user's state for one item.

        Args:
            record: Dict with ``user_id``, ``item_id`` and any state fields to set

        Returns:
            UserItemData object
        """
        data = (
            self.db.query(UserItemData)
            .filter(
                UserItemData.user_id == record["user_id"],
                UserItemData.item_id == record["item_id"]
            )
            .first()
        )

        if data is None:
            data = UserItemData(user_id=record["user_id"], item_id=record["item_id"])
            self.db.add(data)

        for key in ("played", "play_count", "last_played_date", "is_favorite", "likes"):
            if key in record:
                setattr(data, key, record[key])

        self.db.commit()
        self.db.refresh(data)

        return data

    def bulk_store_users(self, users_data: List[Dict]) -> int:
        """Store multiple users. Returns number of users stored."""
        records = [User(id=user["id"], name=user["name"]) for user in users_data]
        self.db.bulk_save_objects(records)
        self.db.commit()

        logger.info(f"✓ Stored {len(records)} users")
        return len(records)

    def bulk_store_user_data(self, records_data: List[Dict], batch_size: int = 500) -> int:
        """
        Store user item data in bulk.

        Args:
            records_data: List of dicts with user_id, item_id and state fields
            batch_size: Batch size for inserts

        Returns:
            Number of records stored
        """
        records = [
            UserItemData(
                user_id=record["user_id"],
                item_id=record["item_id"],
                played=bool(record.get("played") or False),
                play_count=int(record.get("play_count") or 0),
                last_played_date=record.get("last_played_date"),
                is_favorite=bool(record.get("is_favorite") or False),
                likes=record.get("likes"),
            )
            for record in records_data
        ]

        count = 0
        for i in range(0, len(records), batch_size):
            batch = records[i:i + batch_size]
            self.db.bulk_save_objects(batch)
            self.db.commit()
            count += len(batch)

        logger.info(f"✓ Stored {count} user item data records")
        return count

    # noinspection PyTypeChecker
    def get_user_data(self, user_id: str, item_ids: List[str]) -> Dict[str, UserItemData]:
        """
        Get a user's state for the given items.

        Args:
            user_id: User ID
            item_ids: Item IDs to look up

        Returns:
            Dict mapping item ID to UserItemData (items without state are absent)
        """
        if not item_ids:
            return {}

        rows = (
            self.db.query(UserItemData)
            .filter(
                UserItemData.user_id == user_id,
                UserItemData.item_id.in_(item_ids)
            )
            .all()
        )
        return {row.item_id: row for row in rows}
