"""Repository for cast and crew credits."""

import logging
from collections import defaultdict
from typing import Dict, List

from sqlalchemy.orm import Session

from library_recommendation_service.models import PersonCredit
from library_recommendation_service.models.person_credit import ACTOR
from library_recommendation_service.repos.queries import PeopleQuery

logger = logging.getLogger(__name__)


class PersonRepository:
    """
    Repository for the person credit index.
    """

    def __init__(self, db: Session):
        self.db = db

    # noinspection PyTypeChecker
    def get_people(self, query: PeopleQuery) -> List[PersonCredit]:
        """
        Get person credits matching a query.

        Args:
            query: PeopleQuery with role allow/deny lists, max list order and item ids

        Returns:
            List of PersonCredit objects ordered by billing position
        """
        q = self.db.query(PersonCredit)

        if query.person_types:
            q = q.filter(PersonCredit.person_type.in_(list(query.person_types)))

        if query.exclude_person_types:
            q = q.filter(PersonCredit.person_type.notin_(list(query.exclude_person_types)))

        if query.max_list_order is not None:
            q = q.filter(PersonCredit.list_order <= query.max_list_order)

        if query.item_ids is not None:
            if not query.item_ids:
                return []
            q = q.filter(PersonCredit.item_id.in_(list(query.item_ids)))

        return (
            q.order_by(
                PersonCredit.list_order.is_(None),
                PersonCredit.list_order,
                PersonCredit.id
            )
            .all()
        )

    # noinspection PyTypeChecker
    def get_people_names_by_item(self, item_ids: List[str]) -> Dict[str, List[str]]:
        """
        Get the names credited on each item.

        Args:
            item_ids: Item IDs to look up

        Returns:
            Dict mapping item ID to credited names
        """
        if not item_ids:
            return {}

        rows = (
            self.db.query(PersonCredit.item_id, PersonCredit.name)
            .filter(PersonCredit.item_id.in_(item_ids))
            .order_by(PersonCredit.id)
            .all()
        )

        names: Dict[str, List[str]] = defaultdict(list)
        for item_id, name in rows:
            names[item_id].append(name)

        return dict(names)

    def bulk_store_credits(self, credits_data: List[Dict], batch_size: int = 500) -> int:
        """
        Store person credits in bulk.

        Args:
            credits_data: List of dicts with item_id, name, person_type and list_order
            batch_size: Batch size for inserts

        Returns:
            Number of credits stored
        """
        records = [
            PersonCredit(
                item_id=credit["item_id"],
                name=credit["name"],
                person_type=credit.get("person_type") or ACTOR,
                list_order=credit.get("list_order"),
            )
            for credit in credits_data
        ]

        count = 0
        for i in range(0, len(records), batch_size):
            batch = records[i:i + batch_size]
            self.db.bulk_save_objects(batch)
            self.db.commit()
            count += len(batch)

        logger.info(f"✓ Stored {count} person credits")
        return count

    def count_credits(self) -> int:
        """Count total person credits."""
        return self.db.query(PersonCredit).count()
