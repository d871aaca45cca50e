"""Repository classes"""

from library_recommendation_service.repos.catalog_repository import CatalogRepository
from library_recommendation_service.repos.person_repository import PersonRepository
from library_recommendation_service.repos.queries import ItemQuery, ItemSortBy, PeopleQuery, SortOrder
from library_recommendation_service.repos.user_repository import UserRepository

__all__ = [
    "CatalogRepository",
    "PersonRepository",
    "UserRepository",
    "ItemQuery",
    "ItemSortBy",
    "PeopleQuery",
    "SortOrder",
]
