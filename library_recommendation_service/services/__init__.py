"""Service classes"""

from .movie_recommendation_service import MovieRecommendationService

__all__ = ["MovieRecommendationService"]
