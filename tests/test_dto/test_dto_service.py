"""Unit tests for library_recommendation_service.dto.dto_service."""
import pytest

from library_recommendation_service.dto import DtoOptions, DtoService, ItemFields
from tests.conftest import AMELIE_ID, CLOUD_ATLAS_ID, MATRIX_ID, MATRIX_TRAILER_ID


class TestDtoOptions:
    """Tests for DtoOptions."""

    def test_add_item_fields(self):
        """Test requesting fields by name."""
        # Act
        options = DtoOptions().add_item_fields(['Overview', ' Genres ', ''])

        # Assert
        assert options.contains_field(ItemFields.OVERVIEW)
        assert options.contains_field(ItemFields.GENRES)
        assert not options.contains_field(ItemFields.PEOPLE)

    def test_unknown_field_raises(self):
        """Test that unknown field names are rejected."""
        # Act & Assert
        with pytest.raises(ValueError):
            DtoOptions().add_item_fields(['Overview', 'Bogus'])

    @pytest.mark.parametrize('client', ['Kodi', 'Emby.ExternalPlayer', 'Windows Media Center', 'Classic'])
    def test_full_detail_clients_get_every_field(self, client):
        """Test clients that need every field."""
        # Act
        options = DtoOptions().add_client_fields(client)

        # Assert
        assert options.fields == set(ItemFields)

    @pytest.mark.parametrize('client', ['Roku', 'Samsung Smart TV', 'AndroidTV'])
    def test_overview_clients(self, client):
        """Test clients that always need the overview."""
        # Act
        options = DtoOptions().add_client_fields(client)

        # Assert
        assert options.fields == {ItemFields.OVERVIEW}

    @pytest.mark.parametrize('client', [None, '', 'Jellyfin Web'])
    def test_other_clients_add_nothing(self, client):
        """Test that other clients keep the requested fields only."""
        # Act
        options = DtoOptions().add_client_fields(client)

        # Assert
        assert options.fields == set()


class TestDtoService:
    """Tests for DtoService.project."""

    def test_base_fields(self, test_db_session, sample_library):
        """Test the fields every view-model carries."""
        # Arrange
        service = DtoService(test_db_session)
        movies = sample_library['movies']

        # Act
        result = service.project([movies[MATRIX_ID], movies[MATRIX_TRAILER_ID]], DtoOptions())

        # Assert
        assert result == [
            {'Id': MATRIX_ID, 'Name': 'The Matrix', 'Type': 'Movie', 'IsMovie': True},
            {'Id': MATRIX_TRAILER_ID, 'Name': 'The Matrix Resurrections Trailer', 'Type': 'Trailer', 'IsMovie': True},
        ]

    def test_optional_fields(self, test_db_session, sample_library):
        """Test that requested fields are projected."""
        # Arrange
        service = DtoService(test_db_session)
        options = DtoOptions().add_item_fields(['Genres', 'People', 'ProviderIds', 'ProductionYear'])

        # Act
        result = service.project([sample_library['movies'][AMELIE_ID]], options)

        # Assert
        dto = result[0]
        assert dto['Genres'] == ['Comedy', 'Romance']
        assert dto['People'] == ['Jean-Pierre Jeunet', 'Audrey Tautou']
        assert dto['ProviderIds'] == {'Imdb': 'tt0211915'}
        assert dto['ProductionYear'] == 2001
        assert 'Overview' not in dto

    def test_user_data_attached_for_user(self, test_db_session, sample_library):
        """Test user state on projected items."""
        # Arrange
        service = DtoService(test_db_session)
        movies = sample_library['movies']

        # Act
        result = service.project(
            [movies[MATRIX_ID], movies[CLOUD_ATLAS_ID]], DtoOptions(), sample_library['user']
        )

        # Assert
        assert result[0]['UserData']['Played'] is True
        assert result[0]['UserData']['PlayCount'] == 3
        assert result[0]['UserData']['LastPlayedDate'] == '2024-03-01T20:00:00'
        assert result[1]['UserData'] == {
            'Played': False,
            'PlayCount': 0,
            'IsFavorite': False,
            'Likes': None,
            'LastPlayedDate': None,
        }

    def test_no_user_data_without_user(self, test_db_session, sample_library):
        """Test that anonymous projections carry no user state."""
        # Act
        result = DtoService(test_db_session).project([sample_library['movies'][MATRIX_ID]], DtoOptions())

        # Assert
        assert 'UserData' not in result[0]

    def test_user_data_can_be_disabled(self, test_db_session, sample_library):
        """Test the enable_user_data switch."""
        # Act
        result = DtoService(test_db_session).project(
            [sample_library['movies'][MATRIX_ID]],
            DtoOptions(enable_user_data=False),
            sample_library['user'],
        )

        # Assert
        assert 'UserData' not in result[0]

    def test_preserves_order(self, test_db_session, sample_library):
        """Test that projection keeps the input order."""
        # Arrange
        movies = sample_library['movies']
        items = [movies[CLOUD_ATLAS_ID], movies[AMELIE_ID], movies[MATRIX_ID]]

        # Act
        result = DtoService(test_db_session).project(items, DtoOptions())

        # Assert
        assert [dto['Id'] for dto in result] == [CLOUD_ATLAS_ID, AMELIE_ID, MATRIX_ID]
