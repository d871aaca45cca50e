"""Repository for querying catalog items."""

import logging
import random
from datetime import UTC, datetime
from typing import Callable, Dict, List, Optional, Sequence

from sqlalchemy import and_, exists, func, not_, or_
from sqlalchemy.orm import Session

from library_recommendation_service.ml.similarity_scorer import (
    GENRES,
    PEOPLE,
    STUDIOS,
    TAGS,
    SimilarityScorer,
)
from library_recommendation_service.models import CatalogItem, PersonCredit, User, UserItemData
from library_recommendation_service.models.catalog_item import MOVIE, TRAILER
from library_recommendation_service.repos.person_repository import PersonRepository
from library_recommendation_service.repos.queries import ItemQuery, ItemSortBy, SortOrder

logger = logging.getLogger(__name__)

# Types that are movie-like regardless of their is_movie flag
MOVIE_TYPES = (MOVIE, TRAILER)


class CatalogRepository:
    """
    Repository for filtered, sorted and limited lookups over the library.
    """

    def __init__(
            self,
            db: Session,
            rng: Optional[random.Random] = None,
            scorer: Optional[SimilarityScorer] = None
    ):
        self.db = db
        self.rng = rng or random.Random()
        self.scorer = scorer or SimilarityScorer()
        self.people = PersonRepository(db)

    def get_item(self, item_id: str) -> CatalogItem | None:
        """Get catalog item by ID."""
        return self.db.query(CatalogItem).filter(CatalogItem.id == item_id).first()

    def count_items(self) -> int:
        """Count total catalog items."""
        return self.db.query(CatalogItem).count()

    def store_item(self, item_data: dict) -> CatalogItem:
        """
        Store or update a catalog item.

        Args:
            item_data: Dict with item information (``id`` and ``name`` required)

        Returns:
            CatalogItem object
        """
        existing = self.get_item(item_data["id"])

        if existing:
            for key, value in item_data.items():
                if key != "id":
                    setattr(existing, key, value)
            item = existing
        else:
            item = _build_item(item_data)
            self.db.add(item)

        self.db.commit()
        self.db.refresh(item)

        return item

    def bulk_store_items(self, items_data: List[Dict], batch_size: int = 100) -> int:
        """
        Store multiple catalog items in bulk.

        Args:
            items_data: List of item data dicts
            batch_size: Batch size for inserts

        Returns:
            Number of items stored
        """
        records = [_build_item(item_data) for item_data in items_data]

        count = 0
        for i in range(0, len(records), batch_size):
            batch = records[i:i + batch_size]
            self.db.bulk_save_objects(batch)
            self.db.commit()
            count += len(batch)

        logger.info(f"✓ Stored {count} catalog items")
        return count

    def get_item_list(self, query: ItemQuery) -> List[CatalogItem]:
        """
        Run a catalog query.

        Filters are applied in the database; similarity scoring, sorting,
        grouping by underlying work and the limit are applied afterwards,
        in that order.

        Args:
            query: ItemQuery describing the lookup

        Returns:
            Ordered list of matching CatalogItem objects
        """
        items = self._filtered(query).order_by(CatalogItem.name, CatalogItem.id).all()

        if query.similar_to is not None:
            items = self._rank_by_similarity(query.similar_to, items)

        if query.order_by:
            items = self._sort(items, query.order_by, query.user)

        if query.enable_group_by_metadata_key:
            items = _group_by_metadata_key(items)

        if query.limit is not None:
            items = items[:max(query.limit, 0)]

        logger.debug(f"Catalog query returned {len(items)} items")
        return items

    def _filtered(self, query: ItemQuery):
        q = self.db.query(CatalogItem)

        if query.include_item_types:
            q = q.filter(CatalogItem.item_type.in_(list(query.include_item_types)))

        if query.is_movie is not None:
            movie_like = or_(
                CatalogItem.item_type.in_(MOVIE_TYPES),
                CatalogItem.is_movie.is_(True)
            )
            q = q.filter(movie_like if query.is_movie else not_(movie_like))

        if query.parent_id:
            q = q.filter(CatalogItem.parent_id.in_(
                self._scope_parent_ids(query.parent_id, query.recursive)
            ))

        exclude_ids = list(query.exclude_item_ids)
        if query.similar_to is not None:
            exclude_ids.append(query.similar_to.id)
        if exclude_ids:
            q = q.filter(CatalogItem.id.notin_(exclude_ids))

        if query.person:
            credit_clauses = [
                PersonCredit.item_id == CatalogItem.id,
                # Both sides lowered by the database so they fold the same letters
                func.lower(PersonCredit.name) == func.lower(query.person)
            ]
            if query.person_types:
                credit_clauses.append(PersonCredit.person_type.in_(list(query.person_types)))
            q = q.filter(exists().where(and_(*credit_clauses)))

        if query.is_played is not None:
            played = self._has_user_data(query.user, UserItemData.played.is_(True))
            q = q.filter(played if query.is_played else not_(played))

        if query.is_favorite_or_liked is not None:
            favorite = self._has_user_data(
                query.user,
                or_(UserItemData.is_favorite.is_(True), UserItemData.likes.is_(True))
            )
            q = q.filter(favorite if query.is_favorite_or_liked else not_(favorite))

        return q

    def _has_user_data(self, user: Optional[User], condition):
        # Without a user, any user's state counts
        clauses = [UserItemData.item_id == CatalogItem.id, condition]
        if user is not None:
            clauses.append(UserItemData.user_id == user.id)
        return exists().where(and_(*clauses))

    # noinspection PyTypeChecker
    def _scope_parent_ids(self, parent_id: str, recursive: bool) -> List[str]:
        """Folder ids whose direct children are in scope."""
        if not recursive:
            return [parent_id]

        scope = [parent_id]
        seen = {parent_id}
        frontier = [parent_id]
        while frontier:
            rows = (
                self.db.query(CatalogItem.id)
                .filter(CatalogItem.parent_id.in_(frontier))
                .all()
            )
            frontier = [row[0] for row in rows if row[0] not in seen]
            seen.update(frontier)
            scope.extend(frontier)

        return scope

    def _rank_by_similarity(self, seed: CatalogItem, items: List[CatalogItem]) -> List[CatalogItem]:
        """Order items by similarity to the seed, dropping unrelated ones."""
        if not items:
            return items

        people = self.people.get_people_names_by_item([seed.id] + [item.id for item in items])

        def facets(item: CatalogItem) -> Dict[str, Sequence[str]]:
            return {
                GENRES: item.genres or [],
                PEOPLE: people.get(item.id, []),
                STUDIOS: item.studios or [],
                TAGS: item.tags or [],
            }

        scores = self.scorer.score(facets(seed), [facets(item) for item in items])

        ranked = [(score, item) for score, item in zip(scores, items) if score > 0]
        ranked.sort(key=lambda pair: pair[0], reverse=True)

        return [item for _, item in ranked]

    def _sort(
            self,
            items: List[CatalogItem],
            order_by: Sequence[tuple[ItemSortBy, SortOrder]],
            user: Optional[User]
    ) -> List[CatalogItem]:
        # Stable sorts applied from the least significant key
        for sort_by, order in reversed(list(order_by)):
            key = self._sort_key(sort_by, items, user)
            items = sorted(items, key=key, reverse=order == SortOrder.DESCENDING)
        return items

    def _sort_key(
            self,
            sort_by: ItemSortBy,
            items: List[CatalogItem],
            user: Optional[User]
    ) -> Callable[[CatalogItem], object]:
        if sort_by == ItemSortBy.RANDOM:
            draws = {item.id: self.rng.random() for item in items}
            return lambda item: draws[item.id]

        if sort_by == ItemSortBy.DATE_PLAYED:
            played_dates = self._last_played_dates([item.id for item in items], user)
            return lambda item: _nullable_key(played_dates.get(item.id), datetime.min)

        if sort_by == ItemSortBy.DATE_CREATED:
            return lambda item: _nullable_key(_naive(item.date_created), datetime.min)

        if sort_by == ItemSortBy.PRODUCTION_YEAR:
            return lambda item: _nullable_key(item.production_year, 0)

        return lambda item: (item.name or "").lower()

    # noinspection PyTypeChecker
    def _last_played_dates(self, item_ids: List[str], user: Optional[User]) -> Dict[str, datetime]:
        if not item_ids:
            return {}

        q = (
            self.db.query(UserItemData.item_id, func.max(UserItemData.last_played_date))
            .filter(UserItemData.item_id.in_(item_ids))
        )
        if user is not None:
            q = q.filter(UserItemData.user_id == user.id)

        return {
            item_id: _naive(last_played)
            for item_id, last_played in q.group_by(UserItemData.item_id).all()
            if last_played is not None
        }


def _build_item(item_data: dict) -> CatalogItem:
    return CatalogItem(
        id=item_data["id"],
        name=item_data["name"],
        item_type=item_data.get("item_type") or MOVIE,
        is_movie=bool(item_data.get("is_movie") or False),
        parent_id=item_data.get("parent_id"),
        presentation_key=item_data.get("presentation_key"),
        provider_ids=item_data.get("provider_ids"),
        genres=item_data.get("genres"),
        tags=item_data.get("tags"),
        studios=item_data.get("studios"),
        official_rating=item_data.get("official_rating"),
        production_year=item_data.get("production_year"),
        overview=item_data.get("overview"),
        date_created=item_data.get("date_created") or datetime.now(UTC),
    )


def _group_by_metadata_key(items: List[CatalogItem]) -> List[CatalogItem]:
    """Keep the first item of each underlying work."""
    seen = set()
    grouped = []
    for item in items:
        if item.group_key in seen:
            continue
        seen.add(item.group_key)
        grouped.append(item)
    return grouped


def _nullable_key(value, minimum):
    # Missing values sort below every present value
    return (value is not None, value if value is not None else minimum)


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value
