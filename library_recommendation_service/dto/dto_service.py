"""Project catalog items into client-facing view-models."""
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from library_recommendation_service.models import CatalogItem, User, UserItemData
from library_recommendation_service.repos import PersonRepository, UserRepository
from library_recommendation_service.repos.catalog_repository import MOVIE_TYPES

logger = logging.getLogger(__name__)


class ItemFields(str, Enum):
    OVERVIEW = "Overview"
    GENRES = "Genres"
    STUDIOS = "Studios"
    TAGS = "Tags"
    PEOPLE = "People"
    PROVIDER_IDS = "ProviderIds"
    PRODUCTION_YEAR = "ProductionYear"
    OFFICIAL_RATING = "OfficialRating"
    PARENT_ID = "ParentId"
    DATE_CREATED = "DateCreated"


# Clients that render full item details on their own
_FULL_DETAIL_CLIENTS = ("kodi", "emby.externalplayer", "media center", "classic")
_OVERVIEW_CLIENTS = ("roku", "samsung", "androidtv")


class DtoOptions:
    """Which optional fields a projection includes."""

    def __init__(self, fields: Iterable[ItemFields] = (), enable_user_data: bool = True):
        self.fields = set(fields)
        self.enable_user_data = enable_user_data

    def add_item_fields(self, fields: Iterable[str]) -> "DtoOptions":
        """
        Add requested fields by name.

        Raises:
            ValueError: If a field name is unknown
        """
        for name in fields:
            name = name.strip()
            if name:
                self.fields.add(ItemFields(name))
        return self

    def add_client_fields(self, client: Optional[str]) -> "DtoOptions":
        """Add the fields a known client always needs."""
        if not client:
            return self

        client = client.lower()
        if any(marker in client for marker in _FULL_DETAIL_CLIENTS):
            self.fields.update(ItemFields)
        elif any(marker in client for marker in _OVERVIEW_CLIENTS):
            self.fields.add(ItemFields.OVERVIEW)

        return self

    def contains_field(self, field: ItemFields) -> bool:
        return field in self.fields

    def __repr__(self):
        return f"<DtoOptions(fields={sorted(f.value for f in self.fields)}, user_data={self.enable_user_data})>"


class DtoService:
    """Builds JSON-ready item view-models."""

    def __init__(self, db: Session):
        self.db = db
        self.people = PersonRepository(db)
        self.users = UserRepository(db)

    def project(
            self,
            items: List[CatalogItem],
            options: DtoOptions,
            user: Optional[User] = None
    ) -> List[Dict]:
        """
        Project items into view-models.

        User state is attached only when a user is given and the options
        enable user data.

        Args:
            items: Items to project, in order
            options: Fields to include
            user: Acting user, or None for an unscoped projection

        Returns:
            List of view-model dicts in the same order as ``items``
        """
        item_ids = [item.id for item in items]

        user_data: Dict[str, UserItemData] = {}
        if user is not None and options.enable_user_data:
            user_data = self.users.get_user_data(user.id, item_ids)

        credits = {}
        if options.contains_field(ItemFields.PEOPLE):
            credits = self.people.get_people_names_by_item(item_ids)

        return [
            self._project_item(item, options, user, user_data.get(item.id), credits.get(item.id, []))
            for item in items
        ]

    def _project_item(
            self,
            item: CatalogItem,
            options: DtoOptions,
            user: Optional[User],
            data: Optional[UserItemData],
            people: List[str]
    ) -> Dict:
        dto = {
            "Id": item.id,
            "Name": item.name,
            "Type": item.item_type,
            "IsMovie": item.item_type in MOVIE_TYPES or bool(item.is_movie),
        }

        if options.contains_field(ItemFields.OVERVIEW):
            dto["Overview"] = item.overview
        if options.contains_field(ItemFields.GENRES):
            dto["Genres"] = list(item.genres or [])
        if options.contains_field(ItemFields.STUDIOS):
            dto["Studios"] = list(item.studios or [])
        if options.contains_field(ItemFields.TAGS):
            dto["Tags"] = list(item.tags or [])
        if options.contains_field(ItemFields.PEOPLE):
            dto["People"] = people
        if options.contains_field(ItemFields.PROVIDER_IDS):
            dto["ProviderIds"] = dict(item.provider_ids or {})
        if options.contains_field(ItemFields.PRODUCTION_YEAR):
            dto["ProductionYear"] = item.production_year
        if options.contains_field(ItemFields.OFFICIAL_RATING):
            dto["OfficialRating"] = item.official_rating
        if options.contains_field(ItemFields.PARENT_ID):
            dto["ParentId"] = item.parent_id
        if options.contains_field(ItemFields.DATE_CREATED):
            dto["DateCreated"] = item.date_created.isoformat() if item.date_created else None

        if user is not None and options.enable_user_data:
            dto["UserData"] = {
                "Played": bool(data.played) if data else False,
                "PlayCount": data.play_count if data else 0,
                "IsFavorite": bool(data.is_favorite) if data else False,
                "Likes": data.likes if data else None,
                "LastPlayedDate": (
                    data.last_played_date.isoformat()
                    if data and data.last_played_date else None
                ),
            }

        return dto
