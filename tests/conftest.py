"""Shared fixtures for the test suite."""
import json

import pytest

from sparkboard.models.user import Actor


@pytest.fixture
def actor():
    """A signed-in user."""
    return Actor(id='user-123', email='user@example.com', access_token='token-abc')


@pytest.fixture
def sample_board_data():
    return {
        'id': 'board-1',
        'name': 'Summer',
        'user_id': 'user-123',
        'created_at': '2024-06-01T12:00:00+00:00',
        'updated_at': '2024-06-02T12:00:00+00:00',
    }


@pytest.fixture
def sample_image_spark_data():
    return {
        'id': 'spark-image',
        'board_id': 'board-1',
        'user_id': 'user-123',
        'type': 'image',
        'content_url': 'https://x/1.png',
        'title': 'Sunset',
        'text_content': None,
        'x': 900.0,
        'y': 2000.0,
        'width': 160,
        'height': 160,
        'created_at': '2024-06-01T12:00:00+00:00',
    }


@pytest.fixture
def sample_note_spark_data():
    return {
        'id': 'spark-note',
        'board_id': 'board-1',
        'user_id': 'user-123',
        'type': 'note',
        'content_url': None,
        'title': 'Groceries',
        'text_content': 'milk, eggs',
        'x': 800.0,
        'y': 2000.0,
        'width': 160,
        'height': 160,
    }


@pytest.fixture
def sample_music_spark_data():
    return {
        'id': 'spark-music',
        'board_id': 'board-1',
        'user_id': 'user-123',
        'type': 'audio',
        'content_url': 'spotify:track:1',
        'title': 'Song',
        'text_content': json.dumps({
            'artists': 'Band',
            'albumImage': 'https://x/a.png',
            'spotifyUrl': 'https://open.spotify/1',
        }),
        'x': 700.0,
        'y': 1900.0,
        'width': 200,
        'height': 200,
    }


@pytest.fixture
def sample_voice_spark_data():
    return {
        'id': 'spark-voice',
        'board_id': 'board-1',
        'type': 'audio',
        'content_url': 'https://x/rec.m4a',
        'title': None,
        'text_content': None,
    }


@pytest.fixture
def sample_file_spark_data():
    return {
        'id': 'spark-file',
        'board_id': 'board-1',
        'type': 'image',
        'content_url': 'https://x/report.pdf',
        'title': 'report.pdf',
        'text_content': 'application/pdf',
    }


@pytest.fixture
def sample_post_data():
    return {
        'id': 'post-1',
        'user_id': 'user-123',
        'type': 'image',
        'caption': 'Look at this',
        'created_at': '2024-06-01T12:00:00+00:00',
        'attachments': [],
    }


@pytest.fixture
def sample_auth_session():
    return {
        'access_token': 'access-abc',
        'refresh_token': 'refresh-xyz',
        'token_type': 'bearer',
        'user': {
            'id': 'user-123',
            'email': 'user@example.com',
            'user_metadata': {'firstName': 'Ada', 'last_name': 'Lovelace'},
        },
    }
