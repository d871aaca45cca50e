"""Recommendation categories produced by the engine."""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Tuple


class RecommendationType(IntEnum):
    """Why a category was recommended. Declaration order is the presentation order."""
    SIMILAR_TO_RECENTLY_PLAYED = 0
    SIMILAR_TO_LIKED_ITEM = 1
    HAS_DIRECTOR_FROM_RECENTLY_PLAYED = 2
    HAS_ACTOR_FROM_RECENTLY_PLAYED = 3

    @property
    def wire_name(self) -> str:
        """Name used in API responses, e.g. ``SimilarToRecentlyPlayed``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


@dataclass(frozen=True)
class RecommendationCategory:
    """A named rationale with the items recommended because of it."""
    baseline_label: str
    category_id: str
    recommendation_type: RecommendationType
    items: Tuple[Dict, ...]

    def to_dict(self) -> Dict:
        return {
            "BaselineItemName": self.baseline_label,
            "CategoryId": self.category_id,
            "RecommendationType": self.recommendation_type.wire_name,
            "Items": list(self.items),
        }
