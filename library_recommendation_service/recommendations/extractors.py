"""Derive director and actor names from recently played items."""
import unicodedata
from typing import Iterable, List, Sequence

from library_recommendation_service.models import CatalogItem
from library_recommendation_service.models.person_credit import DIRECTOR
from library_recommendation_service.repos import PeopleQuery, PersonRepository

# Only top-billed cast seeds actor categories
MAX_ACTOR_LIST_ORDER = 3


def directors_of(people: PersonRepository, items: Sequence[CatalogItem]) -> List[str]:
    """Distinct names of the directors credited on the given items."""
    credits = people.get_people(PeopleQuery(
        person_types=[DIRECTOR],
        item_ids=[item.id for item in items],
    ))
    return distinct_names(credit.name for credit in credits)


def actors_of(people: PersonRepository, items: Sequence[CatalogItem]) -> List[str]:
    """Distinct names of the top-billed non-director credits on the given items."""
    credits = people.get_people(PeopleQuery(
        exclude_person_types=[DIRECTOR],
        max_list_order=MAX_ACTOR_LIST_ORDER,
        item_ids=[item.id for item in items],
    ))
    return distinct_names(credit.name for credit in credits)


def distinct_names(names: Iterable[str]) -> List[str]:
    """
    Deduplicate names, keeping the first spelling seen.

    Comparison ignores case and diacritics, so "José" and "jose" collapse.
    """
    seen = set()
    distinct = []
    for name in names:
        key = _comparison_key(name)
        if key in seen:
            continue
        seen.add(key)
        distinct.append(name)
    return distinct


def _comparison_key(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()
