"""Get movie recommendations."""
import azure.functions as func
import logging
import json

from library_recommendation_service import config
from library_recommendation_service.services import MovieRecommendationService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
recommendation_service = MovieRecommendationService()

logger = logging.getLogger(__name__)

MAX_CATEGORY_LIMIT = 50
MAX_ITEM_LIMIT = 100

CLIENT_HEADER = "X-Emby-Client"


def _error(message: str, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps({"error": message}),
        status_code=status_code,
        mimetype="application/json"
    )


def _parse_limit(req: func.HttpRequest, name: str, default: int, maximum: int) -> int:
    raw = req.params.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer") from None
    if value < 0 or value > maximum:
        raise ValueError(f"{name} must be between 0 and {maximum}")
    return value


@bp.route(route="movies/recommendations", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_movie_recommendations(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get movie recommendation categories.

    Query Parameters:
        - userId: Optional. Filter by user id, and attach user data
        - parentId: Optional. Localize the search to a folder (default: library root)
        - fields: Optional. Comma separated extra item fields
        - categoryLimit: Max number of categories (default: 5, max: 50)
        - itemLimit: Max number of items per category (default: 8, max: 100)
    """
    try:
        category_limit = _parse_limit(
            req, "categoryLimit", config.get_default_category_limit(), MAX_CATEGORY_LIMIT
        )
        item_limit = _parse_limit(
            req, "itemLimit", config.get_default_item_limit(), MAX_ITEM_LIMIT
        )
    except ValueError as e:
        return _error(str(e), 400)

    fields = [field for field in (req.params.get("fields") or "").split(",") if field.strip()]
    client = req.headers.get(CLIENT_HEADER) if req.headers else None

    try:
        categories = recommendation_service.get_recommendations(
            user_id=req.params.get("userId"),
            parent_id=req.params.get("parentId"),
            fields=fields,
            client=client,
            category_limit=category_limit,
            item_limit=item_limit
        )
    except ValueError as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.error(f"Error getting movie recommendations: {str(e)}", exc_info=True)
        return _error("Internal server error", 500)

    return func.HttpResponse(
        json.dumps([category.to_dict() for category in categories]),
        status_code=200,
        mimetype="application/json"
    )


# noinspection PyUnusedLocal
@bp.route(route="movies/recommendations/health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return func.HttpResponse(
        json.dumps({
            "status": "healthy",
            "service": "library-recommendation-service",
            "version": "1.0.0"
        }),
        status_code=200,
        mimetype="application/json"
    )
