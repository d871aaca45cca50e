"""Query objects accepted by the library repositories."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from library_recommendation_service.models import CatalogItem, User


class ItemSortBy(str, Enum):
    DATE_PLAYED = "DatePlayed"
    RANDOM = "Random"
    SORT_NAME = "SortName"
    DATE_CREATED = "DateCreated"
    PRODUCTION_YEAR = "ProductionYear"


class SortOrder(str, Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"


@dataclass
class ItemQuery:
    """
    Filter for catalog lookups.

    Attributes:
        user: Acting user; scopes played/favorite filters and date-played sorting
        include_item_types: Item type allow-list (empty means any type)
        is_movie: Restrict to movie-like items (movies, trailers, movie programs)
        parent_id: Scope to items under this folder (None means library root)
        recursive: Match all descendants of parent_id instead of direct children
        order_by: Sort keys applied in order
        limit: Maximum number of items returned
        is_played: Restrict to played (True) or unplayed (False) items
        is_favorite_or_liked: Restrict to items marked favorite or liked
        person: Restrict to items crediting this person name
        person_types: Roles the person must be credited with (empty means any)
        similar_to: Return items similar to this seed, most similar first
        exclude_item_ids: Item ids never returned
        enable_group_by_metadata_key: Keep one variant per underlying work
        dto_options: Projection options forwarded with the query
    """
    user: Optional[User] = None
    include_item_types: Sequence[str] = ()
    is_movie: Optional[bool] = None
    parent_id: Optional[str] = None
    recursive: bool = False
    order_by: Sequence[tuple[ItemSortBy, SortOrder]] = ()
    limit: Optional[int] = None
    is_played: Optional[bool] = None
    is_favorite_or_liked: Optional[bool] = None
    person: Optional[str] = None
    person_types: Sequence[str] = ()
    similar_to: Optional[CatalogItem] = None
    exclude_item_ids: Sequence[str] = ()
    enable_group_by_metadata_key: bool = False
    dto_options: Any = None


@dataclass
class PeopleQuery:
    """Filter for person credit lookups."""
    person_types: Sequence[str] = ()
    exclude_person_types: Sequence[str] = ()
    max_list_order: Optional[int] = None
    item_ids: Optional[Sequence[str]] = None
