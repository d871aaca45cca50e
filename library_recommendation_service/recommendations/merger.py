"""Weighted round-robin merge of category generators."""
import logging
from typing import Iterator, List, Sequence

from library_recommendation_service.recommendations.models import RecommendationCategory

logger = logging.getLogger(__name__)


def interleave_categories(
        cursors: Sequence[Iterator[RecommendationCategory]],
        category_limit: int
) -> List[RecommendationCategory]:
    """
    Pull categories from the cursors in passes until the limit is reached.

    A cursor listed twice is pulled twice per pass, which doubles its share
    of the result. Exhausted cursors are skipped. The merge stops as soon as
    ``category_limit`` categories exist, even mid-pass, or when a whole pass
    produces nothing.

    Args:
        cursors: Category generators in pull order (duplicates allowed)
        category_limit: Maximum number of categories

    Returns:
        Categories in the order they were pulled
    """
    categories: List[RecommendationCategory] = []

    while len(categories) < category_limit:
        produced = False

        for cursor in cursors:
            category = next(cursor, None)
            if category is None:
                continue

            categories.append(category)
            produced = True

            if len(categories) >= category_limit:
                break

        if not produced:
            break

    logger.debug(f"Merged {len(categories)} categories (limit {category_limit})")
    return categories


def order_by_type(categories: List[RecommendationCategory]) -> List[RecommendationCategory]:
    """Group categories by type in declaration order, keeping merge order within a type."""
    return sorted(categories, key=lambda category: category.recommendation_type)
