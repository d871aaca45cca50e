"""Library entries that can be queried and recommended"""
from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String, Text

from library_recommendation_service.models.base import Base

# Item types
MOVIE = "Movie"
TRAILER = "Trailer"
LIVE_TV_PROGRAM = "LiveTvProgram"

# Provider keys
IMDB = "Imdb"
TMDB = "Tmdb"


class CatalogItem(Base):
    """A single entry of the media library.

    Variants of one underlying work (e.g. two cuts of the same film) share
    a ``presentation_key``.
    """
    __tablename__ = "catalog_items"

    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    item_type = Column(String(50), nullable=False, default=MOVIE)
    is_movie = Column(Boolean, nullable=False, default=False)
    parent_id = Column(String(32), nullable=True)
    presentation_key = Column(String(255), nullable=True)

    provider_ids = Column(JSON, nullable=True)
    genres = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)
    studios = Column(JSON, nullable=True)
    official_rating = Column(String(20), nullable=True)
    production_year = Column(Integer, nullable=True)
    overview = Column(Text, nullable=True)

    date_created = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("idx_item_type", "item_type"),
        Index("idx_parent_id", "parent_id"),
    )

    def get_provider_id(self, provider: str) -> str | None:
        """Return the external id for a provider, or None when unlinked."""
        if not self.provider_ids:
            return None
        return self.provider_ids.get(provider) or None

    @property
    def group_key(self) -> str:
        """Key identifying the underlying work this item is a variant of."""
        return self.presentation_key or self.id

    def __repr__(self):
        return f"<CatalogItem(id={self.id}, name='{self.name}', type={self.item_type})>"
