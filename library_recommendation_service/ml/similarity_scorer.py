"""Score catalog candidates by how similar they are to a seed item."""
import logging
from typing import Dict, List, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity  # type: ignore
from sklearn.preprocessing import MultiLabelBinarizer  # type: ignore

logger = logging.getLogger(__name__)

GENRES = "genres"
PEOPLE = "people"
STUDIOS = "studios"
TAGS = "tags"


class SimilarityScorer:
    """Weighted cosine similarity over multi-hot encoded item facets."""

    def __init__(
        self,
        genre_weight: float = 0.4,
        people_weight: float = 0.3,
        studio_weight: float = 0.15,
        tag_weight: float = 0.15
    ):
        """
        Initialize similarity scorer.

        Args:
            genre_weight: Weight for shared genres
            people_weight: Weight for shared cast and crew
            studio_weight: Weight for shared studios
            tag_weight: Weight for shared tags
        """
        total_weight = genre_weight + people_weight + studio_weight + tag_weight
        if total_weight <= 0:
            raise ValueError("At least one similarity weight must be positive")

        self.weights = {
            GENRES: genre_weight / total_weight,
            PEOPLE: people_weight / total_weight,
            STUDIOS: studio_weight / total_weight,
            TAGS: tag_weight / total_weight,
        }

    def facet_similarity(
        self,
        seed_labels: Sequence[str],
        candidate_labels: List[Sequence[str]]
    ) -> np.ndarray:
        """
        Cosine similarity between the seed's labels and each candidate's labels.

        Args:
            seed_labels: Labels of the seed item for one facet
            candidate_labels: Labels of each candidate for the same facet

        Returns:
            Array of similarities in [0, 1], one per candidate
        """
        seed = _normalize(seed_labels)
        if not seed or not candidate_labels:
            return np.zeros(len(candidate_labels))

        encoder = MultiLabelBinarizer()
        rows = [seed] + [_normalize(labels) for labels in candidate_labels]
        matrix = encoder.fit_transform(rows)

        return cosine_similarity(matrix[:1], matrix[1:])[0]

    def score(
        self,
        seed: Dict[str, Sequence[str]],
        candidates: List[Dict[str, Sequence[str]]]
    ) -> np.ndarray:
        """
        Combined similarity of each candidate to the seed.

        Args:
            seed: Facet name to labels for the seed item
            candidates: Facet name to labels for each candidate

        Returns:
            Array of weighted similarity scores, one per candidate
        """
        scores = np.zeros(len(candidates))
        if not candidates:
            return scores

        for facet, weight in self.weights.items():
            if weight == 0:
                continue
            scores += weight * self.facet_similarity(
                seed.get(facet) or [],
                [candidate.get(facet) or [] for candidate in candidates]
            )

        logger.debug(f"Scored {len(candidates)} candidates, max {scores.max():.3f}")
        return scores


def _normalize(labels: Sequence[str]) -> List[str]:
    return [label.strip().lower() for label in labels if label and label.strip()]
