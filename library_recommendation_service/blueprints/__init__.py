"""Azure Functions blueprints"""

from library_recommendation_service.blueprints.movies_bp import bp as movies_bp

__all__ = ["movies_bp"]
