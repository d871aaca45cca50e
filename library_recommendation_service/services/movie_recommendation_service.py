"""Service for movie recommendation categories."""
import logging
import random
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from library_recommendation_service import config
from library_recommendation_service.dto import DtoOptions, DtoService
from library_recommendation_service.ids import parse_item_id
from library_recommendation_service.ml.similarity_scorer import SimilarityScorer
from library_recommendation_service.models import User
from library_recommendation_service.models.catalog_item import MOVIE
from library_recommendation_service.models.database import SessionLocal
from library_recommendation_service.recommendations import (
    SIMILAR_TO,
    WITH_ACTOR,
    WITH_DIRECTOR,
    RecommendationCategory,
    RecommendationType,
    SuggestionQueryConfig,
    actors_of,
    directors_of,
    generate_categories,
    interleave_categories,
    order_by_type,
    suggestion_item_types,
)
from library_recommendation_service.repos import (
    CatalogRepository,
    ItemQuery,
    ItemSortBy,
    PersonRepository,
    SortOrder,
    UserRepository,
)

logger = logging.getLogger(__name__)

RECENTLY_PLAYED_LIMIT = 7
LIKED_LIMIT = 10
# Only the most recent plays seed the director and actor categories
PERSON_SEED_LIMIT = 6


class MovieRecommendationService:
    """
    Builds "because you watched" style recommendation categories for a user.

    Four lazy generators (similar to recently played, similar to liked,
    recent directors, recent actors) are merged round-robin, with the two
    similarity generators weighted double, until the category limit is met.
    """

    def __init__(
            self,
            session_factory: Optional[Callable[[], Session]] = None,
            external_content_enabled: Optional[Callable[[], bool]] = None,
            rng: Optional[random.Random] = None,
            scorer: Optional[SimilarityScorer] = None
    ):
        """
        Initialize the recommendation service.

        Args:
            session_factory: Callable returning a database session (default: SessionLocal)
            external_content_enabled: Whether trailers and live TV programs may be
                suggested (default: read from configuration on every request)
            rng: Random source for random sort orders
            scorer: Similarity scorer for "similar to" lookups
        """
        self.session_factory = session_factory or SessionLocal
        self.external_content_enabled = (
            external_content_enabled or config.external_content_in_suggestions_enabled
        )
        self.rng = rng or random.Random()
        self.scorer = scorer or SimilarityScorer()

    def get_recommendations(
            self,
            user_id: Optional[str] = None,
            parent_id: Optional[str] = None,
            fields: Iterable[str] = (),
            client: Optional[str] = None,
            category_limit: int = 5,
            item_limit: int = 8
    ) -> List[RecommendationCategory]:
        """
        Get movie recommendation categories.

        Args:
            user_id: Optional user to scope the lookup to and attach user data for
            parent_id: Optional folder to localize the search to (default: library root)
            fields: Extra item fields to include in the view-models
            client: Name of the calling client, used for client-specific fields
            category_limit: Maximum number of categories
            item_limit: Maximum number of items per category

        Returns:
            Categories grouped by recommendation type (empty when nothing applies)

        Raises:
            ValueError: If user_id, parent_id or a field name is malformed
        """
        scope_id = parse_item_id(parent_id)
        requested_user_id = parse_item_id(user_id)
        dto_options = DtoOptions().add_item_fields(fields).add_client_fields(client)

        db = self.session_factory()
        try:
            user = self._resolve_user(UserRepository(db), requested_user_id)
            categories = self._recommend(db, user, scope_id, dto_options, category_limit, item_limit)
        finally:
            db.close()

        logger.info(
            f"Built {len(categories)} recommendation categories "
            f"(user={requested_user_id or 'anonymous'}, scope={scope_id or 'root'})"
        )
        return categories

    def _resolve_user(self, users: UserRepository, user_id: Optional[str]) -> Optional[User]:
        if user_id is None:
            return None

        user = users.get_user_by_id(user_id)
        if user is None:
            logger.warning(f"User {user_id} not found, computing unscoped recommendations")
        return user

    def _recommend(
            self,
            db: Session,
            user: Optional[User],
            scope_id: Optional[str],
            dto_options: DtoOptions,
            category_limit: int,
            item_limit: int
    ) -> List[RecommendationCategory]:
        catalog = CatalogRepository(db, rng=self.rng, scorer=self.scorer)
        people = PersonRepository(db)
        dto_service = DtoService(db)

        item_types = suggestion_item_types(self.external_content_enabled())

        recently_played = catalog.get_item_list(ItemQuery(
            user=user,
            include_item_types=[MOVIE],
            order_by=[
                (ItemSortBy.DATE_PLAYED, SortOrder.DESCENDING),
                (ItemSortBy.RANDOM, SortOrder.DESCENDING),
            ],
            limit=RECENTLY_PLAYED_LIMIT,
            parent_id=scope_id,
            recursive=True,
            is_played=True,
            dto_options=dto_options,
        ))

        liked = catalog.get_item_list(ItemQuery(
            user=user,
            include_item_types=item_types,
            is_movie=True,
            order_by=[(ItemSortBy.RANDOM, SortOrder.DESCENDING)],
            limit=LIKED_LIMIT,
            is_favorite_or_liked=True,
            exclude_item_ids=[item.id for item in recently_played],
            enable_group_by_metadata_key=True,
            parent_id=scope_id,
            recursive=True,
            dto_options=dto_options,
        ))

        most_recent = recently_played[:PERSON_SEED_LIMIT]
        recent_directors = directors_of(people, most_recent)
        recent_actors = actors_of(people, most_recent)

        logger.debug(
            f"Seeds: {len(recently_played)} recently played, {len(liked)} liked, "
            f"{len(recent_directors)} directors, {len(recent_actors)} actors"
        )

        query_config = SuggestionQueryConfig(user=user, item_types=item_types, dto_options=dto_options)

        def generator(strategy, seeds, recommendation_type):
            return generate_categories(
                catalog, dto_service, query_config, strategy, seeds, item_limit, recommendation_type
            )

        similar_to_recently_played = generator(
            SIMILAR_TO, recently_played, RecommendationType.SIMILAR_TO_RECENTLY_PLAYED
        )
        similar_to_liked = generator(
            SIMILAR_TO, liked, RecommendationType.SIMILAR_TO_LIKED_ITEM
        )
        has_director_from_recently_played = generator(
            WITH_DIRECTOR, recent_directors, RecommendationType.HAS_DIRECTOR_FROM_RECENTLY_PLAYED
        )
        has_actor_from_recently_played = generator(
            WITH_ACTOR, recent_actors, RecommendationType.HAS_ACTOR_FROM_RECENTLY_PLAYED
        )

        cursors = [
            # Listed twice for double weight
            similar_to_recently_played,
            similar_to_recently_played,
            # Listed twice for double weight
            similar_to_liked,
            similar_to_liked,
            has_director_from_recently_played,
            has_actor_from_recently_played,
        ]

        return order_by_type(interleave_categories(cursors, category_limit))
