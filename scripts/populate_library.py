"""
Populate the database with a library snapshot.
This script loads catalog items, person credits, users and user item data
from CSV files and stores them in the database used by the recommendation API.
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from sqlalchemy.orm import Session

from library_recommendation_service.models import CatalogItem, PersonCredit, User, UserItemData
from library_recommendation_service.models.catalog_item import IMDB, TMDB
from library_recommendation_service.repos import CatalogRepository, PersonRepository, UserRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

LABEL_SEPARATOR = "|"


def clean_dataframe_for_db(df: pd.DataFrame) -> pd.DataFrame:
    """
    Clean DataFrame by replacing NaN/NA values with None for database compatibility.

    Args:
        df: Input DataFrame

    Returns:
        Cleaned DataFrame
    """
    df = df.astype(object)
    df = df.replace({np.nan: None, pd.NA: None})
    df = df.where(pd.notnull(df), None)

    return df


def split_labels(value) -> Optional[List[str]]:
    """Split a ``|`` separated cell into labels (None when empty)."""
    if value is None:
        return None
    labels = [label.strip() for label in str(value).split(LABEL_SEPARATOR) if label.strip()]
    return labels or None


def to_bool(value) -> bool:
    """Interpret a CSV cell as a boolean."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def to_optional_bool(value) -> Optional[bool]:
    """Like to_bool, but keeps empty cells as None."""
    if value is None:
        return None
    return to_bool(value)


def to_optional_int(value) -> Optional[int]:
    if value is None:
        return None
    return int(float(value))


def to_datetime(value):
    """Parse a CSV cell into a naive datetime (None when empty)."""
    if value is None:
        return None
    timestamp = pd.Timestamp(value)
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp.to_pydatetime()


def items_from_dataframe(df: pd.DataFrame) -> List[Dict]:
    """
    Convert an items DataFrame into catalog item dicts.

    Expected columns: id, name, and optionally item_type, is_movie, parent_id,
    presentation_key, imdb_id, tmdb_id, genres, tags, studios,
    official_rating, production_year, overview, date_created.
    """
    items = []
    for row in clean_dataframe_for_db(df).to_dict('records'):
        provider_ids = {}
        if row.get('imdb_id'):
            provider_ids[IMDB] = str(row['imdb_id'])
        if row.get('tmdb_id'):
            provider_ids[TMDB] = str(to_optional_int(row['tmdb_id']))

        items.append({
            'id': str(row['id']),
            'name': str(row['name']),
            'item_type': row.get('item_type'),
            'is_movie': to_bool(row.get('is_movie')),
            'parent_id': row.get('parent_id'),
            'presentation_key': row.get('presentation_key'),
            'provider_ids': provider_ids or None,
            'genres': split_labels(row.get('genres')),
            'tags': split_labels(row.get('tags')),
            'studios': split_labels(row.get('studios')),
            'official_rating': row.get('official_rating'),
            'production_year': to_optional_int(row.get('production_year')),
            'overview': row.get('overview'),
            'date_created': to_datetime(row.get('date_created')),
        })
    return items


def credits_from_dataframe(df: pd.DataFrame) -> List[Dict]:
    """Convert a people DataFrame (item_id, name, person_type, list_order) into credit dicts."""
    return [
        {
            'item_id': str(row['item_id']),
            'name': str(row['name']),
            'person_type': row.get('person_type'),
            'list_order': to_optional_int(row.get('list_order')),
        }
        for row in clean_dataframe_for_db(df).to_dict('records')
    ]


def user_data_from_dataframe(df: pd.DataFrame) -> List[Dict]:
    """Convert a user data DataFrame into user item data dicts."""
    return [
        {
            'user_id': str(row['user_id']),
            'item_id': str(row['item_id']),
            'played': to_bool(row.get('played')),
            'play_count': to_optional_int(row.get('play_count')) or 0,
            'last_played_date': to_datetime(row.get('last_played_date')),
            'is_favorite': to_bool(row.get('is_favorite')),
            'likes': to_optional_bool(row.get('likes')),
        }
        for row in clean_dataframe_for_db(df).to_dict('records')
    ]


def clear_library(db: Session) -> None:
    """Delete all library data, dependents first."""
    logger.info("Clearing existing library data...")
    db.query(UserItemData).delete()
    db.query(PersonCredit).delete()
    db.query(CatalogItem).delete()
    db.query(User).delete()
    db.commit()


def populate_library(db: Session, input_dir: Path, clear_existing: bool = True) -> Dict[str, int]:
    """
    Load the CSV snapshot in ``input_dir`` into the database.

    ``items.csv`` is required; ``people.csv``, ``users.csv`` and
    ``user_data.csv`` are loaded when present.

    Args:
        db: Database session
        input_dir: Directory containing the CSV files
        clear_existing: Whether to delete existing library data first

    Returns:
        Dict with the number of records stored per table
    """
    items_path = input_dir / 'items.csv'
    if not items_path.exists():
        raise FileNotFoundError(f"Items file not found: {items_path}")

    if clear_existing:
        clear_library(db)

    stats = {'items': 0, 'credits': 0, 'users': 0, 'user_data': 0}

    items_df = pd.read_csv(items_path, dtype=str)
    logger.info(f"Loaded {len(items_df)} items from {items_path}")
    stats['items'] = CatalogRepository(db).bulk_store_items(items_from_dataframe(items_df))

    users_path = input_dir / 'users.csv'
    if users_path.exists():
        users_df = clean_dataframe_for_db(pd.read_csv(users_path, dtype=str))
        users = [{'id': str(row['id']), 'name': str(row['name'])} for row in users_df.to_dict('records')]
        stats['users'] = UserRepository(db).bulk_store_users(users)

    people_path = input_dir / 'people.csv'
    if people_path.exists():
        people_df = pd.read_csv(people_path, dtype=str)
        stats['credits'] = PersonRepository(db).bulk_store_credits(credits_from_dataframe(people_df))

    user_data_path = input_dir / 'user_data.csv'
    if user_data_path.exists():
        user_data_df = pd.read_csv(user_data_path, dtype=str)
        stats['user_data'] = UserRepository(db).bulk_store_user_data(
            user_data_from_dataframe(user_data_df)
        )

    return stats


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Populate database with a library snapshot'
    )
    parser.add_argument(
        '--input-dir',
        type=str,
        default='data/library',
        help='Input directory with items.csv, people.csv, users.csv, user_data.csv (default: data/library)'
    )
    parser.add_argument(
        '--keep-existing',
        action='store_true',
        help='Do not clear existing library data before loading'
    )

    args = parser.parse_args()

    input_dir = project_root / args.input_dir

    logger.info("=" * 70)
    logger.info("POPULATE LIBRARY")
    logger.info("=" * 70)
    logger.info(f"Input directory: {input_dir}")
    logger.info(f"Keep existing data: {args.keep_existing}")

    from library_recommendation_service.models.base import Base
    from library_recommendation_service.models.database import SessionLocal, engine

    Base.metadata.create_all(engine)

    db = SessionLocal()
    try:
        stats = populate_library(db, input_dir, clear_existing=not args.keep_existing)

        logger.info("\n" + "=" * 70)
        logger.info("✓ LIBRARY POPULATION COMPLETE")
        logger.info("=" * 70)
        logger.info(f"Items: {stats['items']}")
        logger.info(f"Person credits: {stats['credits']}")
        logger.info(f"Users: {stats['users']}")
        logger.info(f"User item data: {stats['user_data']}")

    except Exception as e:
        logger.error(f"Error during library population: {str(e)}", exc_info=True)
        sys.exit(1)
    finally:
        db.close()


if __name__ == '__main__':
    main()
