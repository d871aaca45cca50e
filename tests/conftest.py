"""Shared test fixtures and configuration for pytest."""
import os

# Keep the module-level engine off the production database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import random
from datetime import datetime
from types import SimpleNamespace
from typing import Dict, List
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from library_recommendation_service.models import (
    Base,
    CatalogItem,
    PersonCredit,
    User,
    UserItemData,
)


def make_id(n: int) -> str:
    """Deterministic 32-char hex id for test records."""
    return f"{n:032x}"


# Library fixture ids
USER_ID = make_id(1)
OTHER_USER_ID = make_id(2)
ROOT_FOLDER_ID = make_id(100)
SUB_FOLDER_ID = make_id(101)
OTHER_FOLDER_ID = make_id(102)
MATRIX_ID = make_id(200)
RELOADED_ID = make_id(201)
JOHN_WICK_ID = make_id(202)
CLOUD_ATLAS_ID = make_id(203)
AMELIE_ID = make_id(204)
DELICATESSEN_ID = make_id(205)
MATRIX_TRAILER_ID = make_id(206)
MATRIX_DIRECTORS_CUT_ID = make_id(207)


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_db_engine):
    """Session factory bound to the test database."""
    return sessionmaker(bind=test_db_engine)


@pytest.fixture(scope="function")
def test_db_session(test_session_factory):
    """Create a database session for testing."""
    session = test_session_factory()
    yield session
    session.close()


# ===== Sample Data Fixtures =====

@pytest.fixture
def sample_item_data() -> Dict:
    """Sample catalog item data for testing."""
    return {
        'id': MATRIX_ID,
        'name': 'The Matrix',
        'item_type': 'Movie',
        'parent_id': ROOT_FOLDER_ID,
        'provider_ids': {'Imdb': 'tt0133093', 'Tmdb': '603'},
        'genres': ['Action', 'Science Fiction'],
        'studios': ['Warner Bros.'],
        'tags': ['cyberpunk'],
        'official_rating': 'R',
        'production_year': 1999,
        'overview': 'A hacker learns the truth about his reality.',
    }


@pytest.fixture
def sample_library(test_db_session) -> Dict:
    """
    A small movie library.

    Alice (USER_ID) played The Matrix most recently, then John Wick, and
    marked Amélie as a favorite. Bob (OTHER_USER_ID) played Delicatessen.
    """
    session = test_db_session

    session.add_all([
        User(id=USER_ID, name='alice'),
        User(id=OTHER_USER_ID, name='bob'),
    ])

    folders = [
        CatalogItem(id=ROOT_FOLDER_ID, name='Movies', item_type='Folder'),
        CatalogItem(id=SUB_FOLDER_ID, name='Action', item_type='Folder', parent_id=ROOT_FOLDER_ID),
        CatalogItem(id=OTHER_FOLDER_ID, name='Home Videos', item_type='Folder'),
    ]

    movies = [
        CatalogItem(
            id=MATRIX_ID, name='The Matrix', item_type='Movie', parent_id=SUB_FOLDER_ID,
            presentation_key='matrix-1999', provider_ids={'Imdb': 'tt0133093'},
            genres=['Action', 'Science Fiction'], studios=['Warner Bros.'], tags=['cyberpunk'],
            production_year=1999, official_rating='R',
        ),
        CatalogItem(
            id=MATRIX_DIRECTORS_CUT_ID, name='The Matrix (Open Matte)', item_type='Movie',
            parent_id=SUB_FOLDER_ID, presentation_key='matrix-1999',
            provider_ids={'Imdb': 'tt0133093'},
            genres=['Action', 'Science Fiction'], studios=['Warner Bros.'], tags=['cyberpunk'],
            production_year=1999,
        ),
        CatalogItem(
            id=RELOADED_ID, name='The Matrix Reloaded', item_type='Movie', parent_id=SUB_FOLDER_ID,
            provider_ids={'Imdb': 'tt0234215'},
            genres=['Action', 'Science Fiction'], studios=['Warner Bros.'], tags=['cyberpunk'],
            production_year=2003,
        ),
        CatalogItem(
            id=JOHN_WICK_ID, name='John Wick', item_type='Movie', parent_id=SUB_FOLDER_ID,
            provider_ids={'Imdb': 'tt2911666'},
            genres=['Action', 'Thriller'], studios=['Summit Entertainment'],
            production_year=2014,
        ),
        CatalogItem(
            id=CLOUD_ATLAS_ID, name='Cloud Atlas', item_type='Movie', parent_id=ROOT_FOLDER_ID,
            provider_ids={'Imdb': 'tt1371111'},
            genres=['Drama', 'Science Fiction'], studios=['Warner Bros.'],
            production_year=2012,
        ),
        CatalogItem(
            id=AMELIE_ID, name='Amélie', item_type='Movie', parent_id=ROOT_FOLDER_ID,
            provider_ids={'Imdb': 'tt0211915'},
            genres=['Comedy', 'Romance'], studios=['UGC'],
            production_year=2001,
        ),
        CatalogItem(
            id=DELICATESSEN_ID, name='Delicatessen', item_type='Movie', parent_id=OTHER_FOLDER_ID,
            genres=['Comedy'], studios=['UGC'],
            production_year=1991,
        ),
        CatalogItem(
            id=MATRIX_TRAILER_ID, name='The Matrix Resurrections Trailer', item_type='Trailer',
            genres=['Action', 'Science Fiction'], studios=['Warner Bros.'],
            production_year=2021,
        ),
    ]
    session.add_all(folders + movies)
    session.flush()

    credits = [
        (MATRIX_ID, 'Lana Wachowski', 'Director', None),
        (MATRIX_ID, 'Keanu Reeves', 'Actor', 0),
        (MATRIX_ID, 'Laurence Fishburne', 'Actor', 1),
        (MATRIX_ID, 'Carrie-Anne Moss', 'Actor', 2),
        (MATRIX_ID, 'Hugo Weaving', 'Actor', 3),
        (MATRIX_ID, 'Joe Pantoliano', 'Actor', 4),
        (MATRIX_DIRECTORS_CUT_ID, 'Lana Wachowski', 'Director', None),
        (MATRIX_DIRECTORS_CUT_ID, 'Keanu Reeves', 'Actor', 0),
        (RELOADED_ID, 'Lana Wachowski', 'Director', None),
        (RELOADED_ID, 'Keanu Reeves', 'Actor', 0),
        (JOHN_WICK_ID, 'Chad Stahelski', 'Director', None),
        (JOHN_WICK_ID, 'Keanu Reeves', 'Actor', 0),
        (CLOUD_ATLAS_ID, 'Lana Wachowski', 'Director', None),
        (CLOUD_ATLAS_ID, 'Tom Hanks', 'Actor', 0),
        (CLOUD_ATLAS_ID, 'Hugo Weaving', 'Actor', 3),
        (AMELIE_ID, 'Jean-Pierre Jeunet', 'Director', None),
        (AMELIE_ID, 'Audrey Tautou', 'Actor', 0),
        (DELICATESSEN_ID, 'Jean-Pierre Jeunet', 'Director', None),
        (MATRIX_TRAILER_ID, 'Lana Wachowski', 'Director', None),
    ]
    session.add_all([
        PersonCredit(item_id=item_id, name=name, person_type=person_type, list_order=list_order)
        for item_id, name, person_type, list_order in credits
    ])

    session.add_all([
        UserItemData(
            user_id=USER_ID, item_id=MATRIX_ID, played=True, play_count=3,
            last_played_date=datetime(2024, 3, 1, 20, 0),
        ),
        UserItemData(
            user_id=USER_ID, item_id=JOHN_WICK_ID, played=True, play_count=1,
            last_played_date=datetime(2024, 2, 1, 21, 0),
        ),
        UserItemData(user_id=USER_ID, item_id=AMELIE_ID, is_favorite=True),
        UserItemData(
            user_id=OTHER_USER_ID, item_id=DELICATESSEN_ID, played=True, play_count=1,
            last_played_date=datetime(2024, 1, 1, 18, 0),
        ),
    ])
    session.commit()

    return {
        'user': session.get(User, USER_ID),
        'other_user': session.get(User, OTHER_USER_ID),
        'movies': {movie.id: movie for movie in movies},
    }


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(42)


# ===== Engine Fakes =====

def fake_item(item_id: str, name: str = None, imdb: str = None):
    """Lightweight stand-in for a CatalogItem."""
    provider_ids = {'Imdb': imdb} if imdb else {}
    return SimpleNamespace(
        id=item_id,
        name=name or f"Item {item_id}",
        get_provider_id=lambda provider: provider_ids.get(provider),
    )


@pytest.fixture
def mock_catalog():
    """Mock CatalogRepository returning no items."""
    mock = Mock()
    mock.get_item_list.return_value = []
    return mock


@pytest.fixture
def mock_dto_service():
    """Mock DtoService projecting items to {'Id': ...} dicts."""
    mock = Mock()
    mock.project.side_effect = lambda items, options, user: [{'Id': item.id} for item in items]
    return mock


# ===== Azure Functions Fixtures =====

@pytest.fixture
def mock_http_request():
    """Mock Azure Functions HttpRequest."""
    import azure.functions as func

    mock_req = Mock(spec=func.HttpRequest)
    mock_req.route_params = {}
    mock_req.params = {}
    mock_req.headers = {}
    return mock_req


def category_names(categories: List) -> List[str]:
    return [category.baseline_label for category in categories]
