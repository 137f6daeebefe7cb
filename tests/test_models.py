"""Tests for Pydantic models."""
import pytest
from pydantic import ValidationError as PydanticValidationError

from sparkboard.exceptions import UnknownKindError, ValidationError
from sparkboard.models.board import Board, BoardPartial
from sparkboard.models.community import CommunityAttachment, CommunityPost
from sparkboard.models.meta import build_patch
from sparkboard.models.content import ContentKind, MusicMetadata, NotePayload, PostKind
from sparkboard.models.spark import Spark, SparkPartial
from sparkboard.models.user import Actor, Profile


class TestSparkModel:
    """Tests for the Spark model."""

    def test_spark_from_row(self, sample_note_spark_data):
        spark = Spark(**sample_note_spark_data)

        assert spark.id == 'spark-note'
        assert spark.kind is ContentKind.NOTE
        assert spark.payload == NotePayload(body='milk, eggs')

    def test_spark_minimal_row(self):
        spark = Spark(id='s1', board_id='b1', type='image')

        assert spark.x == 0
        assert spark.width is None
        assert spark.kind is ContentKind.IMAGE

    def test_unknown_kind_surfaces_on_access(self):
        spark = Spark(id='s1', board_id='b1', type='sticker')

        with pytest.raises(UnknownKindError):
            _ = spark.kind

    def test_spark_partial_only_dumps_set_fields(self):
        patch = SparkPartial(x=10, y=20).model_dump(exclude_unset=True)
        assert patch == {'x': 10, 'y': 20}


class TestBoardModel:
    """Tests for the Board model."""

    def test_board_from_row(self, sample_board_data):
        board = Board(**sample_board_data)

        assert board.name == 'Summer'
        assert board.thumbnail_urls is None

    def test_board_partial(self):
        assert BoardPartial(name='Winter').model_dump(exclude_unset=True) == {'name': 'Winter'}


class TestCommunityModels:
    """Tests for community post and attachment models."""

    def test_post_with_embedded_attachments(self, sample_post_data):
        sample_post_data['attachments'] = [
            {'id': 'a1', 'spark_id': 's1', 'spotify_url': 'https://open.spotify/1'},
            {'id': 'a2', 'spark_id': 's2'},
            {'id': 'a3', 'spark_id': None},
        ]

        post = CommunityPost(**sample_post_data)

        assert post.type is PostKind.IMAGE
        assert post.attachments[0].external_url == 'https://open.spotify/1'
        assert post.spark_ids == {'s1', 's2'}

    def test_attachment_row_leaves_out_unset_fields(self):
        attachment = CommunityAttachment(spark_id='s1', title='Sunset', image_url='https://x/1.png', media_type='image')

        assert attachment.to_row('post-1') == {
            'post_id': 'post-1',
            'spark_id': 's1',
            'title': 'Sunset',
            'image_url': 'https://x/1.png',
            'media_type': 'image',
        }

    def test_unknown_post_kind_rejected(self, sample_post_data):
        sample_post_data['type'] = 'video'

        with pytest.raises(PydanticValidationError):
            CommunityPost(**sample_post_data)


class TestMusicMetadata:
    """Tests for MusicMetadata."""

    def test_from_spotify_track(self):
        track = {
            'name': 'Song',
            'uri': 'spotify:track:1',
            'artists': [{'name': 'A'}, {'name': 'B'}],
            'album': {'images': [{'url': 'https://x/big.png'}, {'url': 'https://x/small.png'}]},
            'external_urls': {'spotify': 'https://open.spotify/1'},
        }

        metadata = MusicMetadata.from_track(track, 'text')

        assert metadata.artists == 'A, B'
        assert metadata.album_image == 'https://x/big.png'
        assert metadata.spotify_uri == 'spotify:track:1'
        assert metadata.spotify_url == 'https://open.spotify/1'
        assert metadata.display_mode == 'text'

    def test_from_track_without_album_art(self):
        metadata = MusicMetadata.from_track({'name': 'Song', 'artists': []})

        assert metadata.album_image is None
        assert metadata.artists == ''
        assert metadata.display_mode == 'album'


class TestActor:
    """Tests for Actor and Profile."""

    def test_from_auth_user_reads_camel_and_snake_case(self):
        actor = Actor.from_auth_user(
            {
                'id': 'u1',
                'email': 'ada@example.com',
                'user_metadata': {'first_name': 'Ada', 'lastName': 'Lovelace', 'profilePicture': 'https://x/p.png'},
            },
            access_token='tok',
        )

        assert actor.display_name == 'Ada Lovelace'
        assert actor.avatar_url == 'https://x/p.png'
        assert actor.access_token == 'tok'

    @pytest.mark.parametrize('user, expected', [
        ({'id': 'u1', 'user_metadata': {'username': 'ada'}}, 'ada'),
        ({'id': 'u1', 'email': 'ada@example.com'}, 'ada'),
        ({'id': 'u1', 'user_metadata': None}, 'Anonymous'),
    ])
    def test_display_name_fallbacks(self, user, expected):
        assert Actor.from_auth_user(user).display_name == expected

    def test_profile_display_name(self):
        assert Profile(id='u1', first_name='Ada').display_name == 'Ada'
        assert Profile(id='u1').display_name == 'Anonymous'


class TestBuildPatch:
    """Tests for build_patch."""

    def test_only_given_columns(self):
        assert build_patch(SparkPartial, width=200, height=100) == {'width': 200, 'height': 100}

    def test_wrong_type_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            build_patch(SparkPartial, x='left')
        assert 'x' in str(exc_info.value)

    def test_empty_patch(self):
        with pytest.raises(ValidationError):
            build_patch(BoardPartial)
