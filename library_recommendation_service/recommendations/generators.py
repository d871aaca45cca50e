"""Lazy producers of recommendation categories.

Each generator walks its seeds in order and yields at most one category per
seed, running catalog queries only when the consumer asks for the next
category. Seeds without results are skipped.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from library_recommendation_service.ids import name_to_category_id
from library_recommendation_service.models import CatalogItem, User
from library_recommendation_service.models.catalog_item import IMDB, LIVE_TV_PROGRAM, MOVIE, TRAILER
from library_recommendation_service.models.person_credit import DIRECTOR
from library_recommendation_service.recommendations.models import (
    RecommendationCategory,
    RecommendationType,
)
from library_recommendation_service.repos import CatalogRepository, ItemQuery
from library_recommendation_service.dto import DtoOptions, DtoService

logger = logging.getLogger(__name__)

# Extra rows requested per person to absorb duplicates sharing a provider id
PERSON_QUERY_HEADROOM = 2


@dataclass(frozen=True)
class SuggestionQueryConfig:
    """Query settings resolved once per request and shared by every generator."""
    user: Optional[User]
    item_types: Tuple[str, ...]
    dto_options: DtoOptions


def suggestion_item_types(external_content_enabled: bool) -> Tuple[str, ...]:
    """Item types eligible for suggestions."""
    if external_content_enabled:
        return MOVIE, TRAILER, LIVE_TV_PROGRAM
    return (MOVIE,)


@dataclass(frozen=True)
class GeneratorStrategy:
    """
    How one kind of seed becomes a category.

    Attributes:
        build_query: Catalog query for a seed
        refine: Post-processing of the query result, bounded by the item limit
        label: Baseline label shown for the seed
        category_id: Identifier of the seed's category
    """
    build_query: Callable[[Any, SuggestionQueryConfig, int], ItemQuery]
    refine: Callable[[List[CatalogItem], int], List[CatalogItem]]
    label: Callable[[Any], str]
    category_id: Callable[[Any], str]


def dedupe_by_provider_id(items: List[CatalogItem], item_limit: int) -> List[CatalogItem]:
    """
    Keep the first item per IMDb id, then truncate to the item limit.

    Items without an IMDb id are never collapsed into each other.
    """
    first_by_key = {}
    for item in items:
        key = item.get_provider_id(IMDB) or uuid.uuid4().hex
        first_by_key.setdefault(key, item)
    return list(first_by_key.values())[:item_limit]


def _similar_to_query(seed: CatalogItem, config: SuggestionQueryConfig, item_limit: int) -> ItemQuery:
    return ItemQuery(
        user=config.user,
        limit=item_limit,
        include_item_types=config.item_types,
        is_movie=True,
        similar_to=seed,
        enable_group_by_metadata_key=True,
        dto_options=config.dto_options,
    )


def _person_query(person_types: Sequence[str]) -> Callable[[str, SuggestionQueryConfig, int], ItemQuery]:
    def build(name: str, config: SuggestionQueryConfig, item_limit: int) -> ItemQuery:
        return ItemQuery(
            user=config.user,
            person=name,
            person_types=person_types,
            limit=item_limit + PERSON_QUERY_HEADROOM,
            include_item_types=config.item_types,
            is_movie=True,
            enable_group_by_metadata_key=True,
            dto_options=config.dto_options,
        )
    return build


def _keep(items: List[CatalogItem], item_limit: int) -> List[CatalogItem]:
    return items


def _item_name(item: CatalogItem) -> str:
    return item.name


def _item_id(item: CatalogItem) -> str:
    return item.id


def _person_name(name: str) -> str:
    return name


SIMILAR_TO = GeneratorStrategy(
    build_query=_similar_to_query,
    refine=_keep,
    label=_item_name,
    category_id=_item_id,
)

WITH_DIRECTOR = GeneratorStrategy(
    build_query=_person_query([DIRECTOR]),
    refine=dedupe_by_provider_id,
    label=_person_name,
    category_id=name_to_category_id,
)

WITH_ACTOR = GeneratorStrategy(
    build_query=_person_query([]),
    refine=dedupe_by_provider_id,
    label=_person_name,
    category_id=name_to_category_id,
)


def generate_categories(
        catalog: CatalogRepository,
        dto_service: DtoService,
        config: SuggestionQueryConfig,
        strategy: GeneratorStrategy,
        seeds: Iterable[Any],
        item_limit: int,
        recommendation_type: RecommendationType
) -> Iterator[RecommendationCategory]:
    """
    Yield one category per seed that has recommendations.

    Args:
        catalog: Catalog to query
        dto_service: Projector for the category items
        config: Shared per-request query settings
        strategy: How seeds become queries and categories
        seeds: Seed items or person names, in priority order
        item_limit: Maximum items per category
        recommendation_type: Type stamped on every category

    Yields:
        RecommendationCategory with between 1 and item_limit items
    """
    for seed in seeds:
        query = strategy.build_query(seed, config, item_limit)
        items = strategy.refine(catalog.get_item_list(query), item_limit)

        if not items:
            logger.debug(f"No {recommendation_type.wire_name} items for '{strategy.label(seed)}'")
            continue

        yield RecommendationCategory(
            baseline_label=strategy.label(seed),
            category_id=strategy.category_id(seed),
            recommendation_type=recommendation_type,
            items=tuple(dto_service.project(items, config.dto_options, config.user)),
        )
