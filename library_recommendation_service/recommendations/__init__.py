"""Recommendation aggregation engine"""

from library_recommendation_service.recommendations.extractors import actors_of, directors_of, distinct_names
from library_recommendation_service.recommendations.generators import (
    SIMILAR_TO,
    WITH_ACTOR,
    WITH_DIRECTOR,
    GeneratorStrategy,
    SuggestionQueryConfig,
    dedupe_by_provider_id,
    generate_categories,
    suggestion_item_types,
)
from library_recommendation_service.recommendations.merger import interleave_categories, order_by_type
from library_recommendation_service.recommendations.models import RecommendationCategory, RecommendationType

__all__ = [
    "RecommendationCategory",
    "RecommendationType",
    "GeneratorStrategy",
    "SuggestionQueryConfig",
    "SIMILAR_TO",
    "WITH_ACTOR",
    "WITH_DIRECTOR",
    "actors_of",
    "dedupe_by_provider_id",
    "directors_of",
    "distinct_names",
    "generate_categories",
    "interleave_categories",
    "order_by_type",
    "suggestion_item_types",
]
