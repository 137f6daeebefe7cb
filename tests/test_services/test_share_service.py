"""Tests for ShareService."""
from unittest.mock import AsyncMock

import pytest

from sparkboard.exceptions import (
    APIError,
    CompensationError,
    NetworkError,
    NotAuthenticatedError,
    UnsupportedForSharingError,
    ValidationError,
)
from sparkboard.models.board import Board
from sparkboard.models.community import CommunityAttachment, CommunityPost
from sparkboard.models.content import PostKind
from sparkboard.models.spark import Spark
from sparkboard.services.share_service import ShareService


class InMemoryCommunityApi:
    """Community API double that keeps posts and attachments in memory."""

    def __init__(self, fail_attachments: bool = False):
        self.posts: dict[str, CommunityPost] = {}
        self.attachments: list[CommunityAttachment] = []
        self.fail_attachments = fail_attachments
        self._next_id = 0

    async def create_post(self, actor, post_kind, caption=None):
        self._next_id += 1
        post = CommunityPost(id=f'post-{self._next_id}', user_id=actor.id, type=post_kind, caption=caption)
        self.posts[post.id] = post
        return post

    async def create_attachments(self, post_id, attachments):
        if self.fail_attachments:
            raise APIError('HTTP 500: insert failed', status_code=500)
        created = [a.model_copy(update={'post_id': post_id}) for a in attachments]
        self.attachments.extend(created)
        return created

    async def delete_attachments(self, post_id):
        self.attachments = [a for a in self.attachments if a.post_id != post_id]

    async def delete_post(self, post_id):
        self.posts.pop(post_id, None)


@pytest.fixture
def mock_community_api():
    """Create a mock CommunityApi."""
    return AsyncMock()


@pytest.fixture
def mock_spark_api():
    """Create a mock SparkApi."""
    return AsyncMock()


@pytest.fixture
def mock_board_api():
    """Create a mock BoardApi."""
    return AsyncMock()


@pytest.fixture
def share_service(mock_community_api, mock_spark_api, mock_board_api):
    """Create ShareService with mock dependencies."""
    return ShareService(mock_community_api, mock_spark_api, mock_board_api)


@pytest.fixture
def image_spark(sample_image_spark_data):
    return Spark(**sample_image_spark_data)


@pytest.fixture
def board(sample_board_data):
    return Board(**sample_board_data)


def _post(post_id='post-1', post_kind=PostKind.IMAGE, attachments=None):
    return CommunityPost(id=post_id, user_id='user-123', type=post_kind, attachments=attachments or [])


class TestShareServiceInit:
    """Tests for ShareService initialization."""

    def test_stores_dependencies(self, mock_community_api, mock_spark_api, mock_board_api):
        """Should store all dependencies."""
        service = ShareService(mock_community_api, mock_spark_api, mock_board_api)

        assert service.community_api is mock_community_api
        assert service.spark_api is mock_spark_api
        assert service.board_api is mock_board_api


class TestShareSpark:
    """Tests for share_spark."""

    @pytest.mark.asyncio
    async def test_creates_post_then_attachment(self, share_service, mock_community_api, actor, image_spark):
        mock_community_api.create_post.return_value = _post()
        mock_community_api.create_attachments.return_value = [
            CommunityAttachment(id='att-1', post_id='post-1', spark_id='spark-image', image_url='https://x/1.png')
        ]

        post = await share_service.share_spark(actor, image_spark, ' Sunset time ')

        mock_community_api.create_post.assert_called_once_with(actor, PostKind.IMAGE, 'Sunset time')
        post_id, attachments = mock_community_api.create_attachments.call_args.args
        assert post_id == 'post-1'
        assert attachments[0].image_url == 'https://x/1.png'
        assert attachments[0].title == 'Sunset'
        assert post.attachments[0].id == 'att-1'
        mock_community_api.delete_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_actor_before_any_remote_call(self, share_service, mock_community_api, image_spark):
        with pytest.raises(NotAuthenticatedError):
            await share_service.share_spark(None, image_spark)

        mock_community_api.create_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_kind_fails_before_any_remote_call(
        self, share_service, mock_community_api, actor, sample_image_spark_data
    ):
        sample_image_spark_data['type'] = 'video'

        with pytest.raises(UnsupportedForSharingError):
            await share_service.share_spark(actor, Spark(**sample_image_spark_data))

        assert mock_community_api.mock_calls == []

    @pytest.mark.asyncio
    async def test_caption_too_long(self, share_service, mock_community_api, actor, image_spark):
        with pytest.raises(ValidationError):
            await share_service.share_spark(actor, image_spark, 'x' * 501)

        mock_community_api.create_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_post_failure_propagates_without_rollback(self, share_service, mock_community_api, actor, image_spark):
        mock_community_api.create_post.side_effect = NetworkError('Network error: down')

        with pytest.raises(NetworkError):
            await share_service.share_spark(actor, image_spark)

        mock_community_api.create_attachments.assert_not_called()
        mock_community_api.delete_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_attachment_failure_deletes_post(self, share_service, mock_community_api, actor, image_spark):
        """The post is removed and the attachment error is what the caller sees."""
        mock_community_api.create_post.return_value = _post()
        attach_error = APIError('HTTP 500: insert failed', status_code=500)
        mock_community_api.create_attachments.side_effect = attach_error

        with pytest.raises(APIError) as exc_info:
            await share_service.share_spark(actor, image_spark)

        assert exc_info.value is attach_error
        mock_community_api.delete_post.assert_called_once_with('post-1')

    @pytest.mark.asyncio
    async def test_attachment_failure_leaves_zero_posts(self, actor, image_spark):
        community_api = InMemoryCommunityApi(fail_attachments=True)
        service = ShareService(community_api, AsyncMock(), AsyncMock())

        with pytest.raises(APIError):
            await service.share_spark(actor, image_spark)

        assert community_api.posts == {}
        assert community_api.attachments == []

    @pytest.mark.asyncio
    async def test_successful_share_leaves_post_with_attachment(self, actor, image_spark):
        community_api = InMemoryCommunityApi()
        service = ShareService(community_api, AsyncMock(), AsyncMock())

        post = await service.share_spark(actor, image_spark)

        assert list(community_api.posts) == [post.id]
        assert [a.post_id for a in community_api.attachments] == [post.id]

    @pytest.mark.asyncio
    async def test_failed_rollback_raises_compensation_error(
        self, share_service, mock_community_api, actor, image_spark
    ):
        mock_community_api.create_post.return_value = _post('post-9')
        mock_community_api.create_attachments.side_effect = APIError('HTTP 500: insert failed', status_code=500)
        rollback_error = NetworkError('Network error: down')
        mock_community_api.delete_post.side_effect = rollback_error

        with pytest.raises(CompensationError) as exc_info:
            await share_service.share_spark(actor, image_spark)

        assert exc_info.value.post_id == 'post-9'
        assert exc_info.value.__cause__ is rollback_error
        assert isinstance(rollback_error.__context__, APIError)
        assert 'insert failed' in str(exc_info.value)


class TestShareBoard:
    """Tests for share_board."""

    @pytest.mark.asyncio
    async def test_shares_all_sparks_in_one_insert(
        self, share_service, mock_community_api, mock_spark_api, actor, board,
        sample_image_spark_data, sample_note_spark_data
    ):
        mock_spark_api.get_sparks.return_value = [Spark(**sample_image_spark_data), Spark(**sample_note_spark_data)]
        mock_community_api.create_post.return_value = _post(post_kind=PostKind.SPARKLETTE)
        mock_community_api.create_attachments.return_value = []

        await share_service.share_board(actor, board, 'whole board')

        mock_spark_api.get_sparks.assert_called_once_with('board-1')
        mock_community_api.create_post.assert_called_once_with(actor, PostKind.SPARKLETTE, 'whole board')
        attachments = mock_community_api.create_attachments.call_args.args[1]
        assert [a.spark_id for a in attachments] == ['spark-image', 'spark-note']
        assert {a.title for a in attachments} == {'Summer'}

    @pytest.mark.asyncio
    async def test_empty_board_is_rejected(self, share_service, mock_community_api, mock_spark_api, actor, board):
        mock_spark_api.get_sparks.return_value = []

        with pytest.raises(ValidationError):
            await share_service.share_board(actor, board)

        mock_community_api.create_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_attachment_failure_deletes_post(
        self, share_service, mock_community_api, mock_spark_api, actor, board, sample_image_spark_data
    ):
        mock_spark_api.get_sparks.return_value = [Spark(**sample_image_spark_data)]
        mock_community_api.create_post.return_value = _post('post-5', PostKind.SPARKLETTE)
        mock_community_api.create_attachments.side_effect = NetworkError('Network error: down')

        with pytest.raises(NetworkError):
            await share_service.share_board(actor, board)

        mock_community_api.delete_post.assert_called_once_with('post-5')

    @pytest.mark.asyncio
    async def test_requires_actor(self, share_service, mock_spark_api, board):
        with pytest.raises(NotAuthenticatedError):
            await share_service.share_board(None, board)

        mock_spark_api.get_sparks.assert_not_called()


class TestUnshare:
    """Tests for unshare."""

    @pytest.mark.asyncio
    async def test_deletes_attachments_then_post(self, share_service, mock_community_api, actor):
        calls = []
        mock_community_api.delete_attachments.side_effect = lambda post_id: calls.append(('attachments', post_id))
        mock_community_api.delete_post.side_effect = lambda post_id: calls.append(('post', post_id))

        await share_service.unshare(actor, 'post-1')

        assert calls == [('attachments', 'post-1'), ('post', 'post-1')]

    @pytest.mark.asyncio
    async def test_attachment_failure_keeps_post(self, share_service, mock_community_api, actor):
        mock_community_api.delete_attachments.side_effect = APIError('HTTP 500: boom', status_code=500)

        with pytest.raises(APIError):
            await share_service.unshare(actor, 'post-1')

        mock_community_api.delete_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_actor(self, share_service, mock_community_api):
        with pytest.raises(NotAuthenticatedError):
            await share_service.unshare(None, 'post-1')

        assert mock_community_api.mock_calls == []


class TestFindSharedBoardPost:
    """Tests for find_shared_board_post."""

    @pytest.mark.asyncio
    async def test_matches_exact_spark_set(
        self, share_service, mock_community_api, mock_spark_api, actor,
        sample_image_spark_data, sample_note_spark_data
    ):
        mock_spark_api.get_sparks.return_value = [Spark(**sample_image_spark_data), Spark(**sample_note_spark_data)]
        partial = _post('post-1', PostKind.SPARKLETTE, [CommunityAttachment(spark_id='spark-image')])
        exact = _post('post-2', PostKind.SPARKLETTE, [
            CommunityAttachment(spark_id='spark-note'),
            CommunityAttachment(spark_id='spark-image'),
        ])
        mock_community_api.get_posts_for_user.return_value = [partial, exact]

        post = await share_service.find_shared_board_post(actor, 'board-1')

        assert post is exact
        mock_community_api.get_posts_for_user.assert_called_once_with('user-123', PostKind.SPARKLETTE)

    @pytest.mark.asyncio
    async def test_no_match(self, share_service, mock_community_api, mock_spark_api, actor, sample_image_spark_data):
        mock_spark_api.get_sparks.return_value = [Spark(**sample_image_spark_data)]
        mock_community_api.get_posts_for_user.return_value = [
            _post('post-1', PostKind.SPARKLETTE, [CommunityAttachment(spark_id='other')])
        ]

        assert await share_service.find_shared_board_post(actor, 'board-1') is None

    @pytest.mark.asyncio
    async def test_empty_board_is_never_shared(self, share_service, mock_community_api, mock_spark_api, actor):
        mock_spark_api.get_sparks.return_value = []

        assert await share_service.find_shared_board_post(actor, 'board-1') is None
        mock_community_api.get_posts_for_user.assert_not_called()
