"""SQLAlchemy models"""

from library_recommendation_service.models.base import Base
from library_recommendation_service.models.catalog_item import CatalogItem
from library_recommendation_service.models.person_credit import PersonCredit
from library_recommendation_service.models.user import User, UserItemData

__all__ = [
    "Base",
    "CatalogItem",
    "PersonCredit",
    "User",
    "UserItemData",
]
