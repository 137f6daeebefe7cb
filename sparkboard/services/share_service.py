from loguru import logger

from sparkboard.api.base_api import require_actor
from sparkboard.api.board_api import BoardApi
from sparkboard.api.community_api import CommunityApi
from sparkboard.api.spark_api import SparkApi
from sparkboard.exceptions import CompensationError, RemoteError
from sparkboard.models.board import Board
from sparkboard.models.community import CommunityPost
from sparkboard.models.content import PostKind
from sparkboard.models.spark import Spark
from sparkboard.models.user import Actor
from sparkboard.projector import ShareProjection, project_board, project_spark
from sparkboard.utils.validation import validate_caption, validate_id


class ShareService:
    """
    Shares sparks and boards to the community feed, and takes them back down.

    The backend has no multi-table transactions, so every multi-step write has
    an explicit compensating step: a post is never left behind without its
    attachments unless the compensation itself fails.
    """

    def __init__(self, community_api: CommunityApi, spark_api: SparkApi, board_api: BoardApi):
        """
        Initialize the share service.

        :param community_api: CommunityApi instance
        :param spark_api: SparkApi instance
        :param board_api: BoardApi instance
        """
        self.community_api = community_api
        self.spark_api = spark_api
        self.board_api = board_api

    async def share_spark(self, actor: Actor | None, spark: Spark, caption: str | None = None) -> CommunityPost:
        """
        Share one spark as a community post.

        Classification and projection happen before any remote call, so an
        unsupported spark or a missing user never touches storage.

        :param actor: Signed-in user
        :param spark: Spark to share
        :param caption: Optional caption
        :return: The created post with its attachment
        :raises NotAuthenticatedError: If actor is None
        :raises UnsupportedForSharingError: If the spark's kind is unknown
        :raises RemoteError: If a write fails (the post is rolled back)
        :raises CompensationError: If the rollback itself fails
        """
        actor = require_actor(actor)
        validate_caption(caption)
        projection = project_spark(spark, caption)
        post = await self._publish(actor, projection)
        logger.info(f"Shared spark {spark.id} as {projection.post_kind.value} post {post.id}")
        return post

    async def share_board(self, actor: Actor | None, board: Board, caption: str | None = None) -> CommunityPost:
        """
        Share a whole board as a sparklette post, one attachment per spark.

        :raises NotAuthenticatedError: If actor is None
        :raises ValidationError: If the board has no sparks
        :raises RemoteError: If a write fails (the post is rolled back)
        :raises CompensationError: If the rollback itself fails
        """
        actor = require_actor(actor)
        validate_caption(caption)
        sparks = await self.spark_api.get_sparks(board.id)
        projection = project_board(board, sparks, caption)
        post = await self._publish(actor, projection)
        logger.info(f"Shared board {board.id} ({len(sparks)} sparks) as post {post.id}")
        return post

    async def unshare(self, actor: Actor | None, post_id: str) -> None:
        """
        Remove a post and its attachments.

        Attachments are deleted first. If that fails the post is left alone and
        the error propagates; the user can simply retry.

        :raises NotAuthenticatedError: If actor is None
        :raises RemoteError: If either delete fails
        """
        require_actor(actor)
        validate_id(post_id, "post_id")
        await self.community_api.delete_attachments(post_id)
        await self.community_api.delete_post(post_id)
        logger.info(f"Unshared post {post_id}")

    async def find_shared_board_post(self, actor: Actor | None, board_id: str) -> CommunityPost | None:
        """
        Find the actor's sparklette post that mirrors a board.

        A post matches when its attachments reference exactly the board's sparks.

        :return: The matching post, or None if the board is not shared
        """
        actor = require_actor(actor)
        sparks = await self.spark_api.get_sparks(board_id)
        if not sparks:
            return None
        spark_ids = {spark.id for spark in sparks}
        posts = await self.community_api.get_posts_for_user(actor.id, PostKind.SPARKLETTE)
        for post in posts:
            attachment_ids = [a.spark_id for a in post.attachments if a.spark_id]
            if len(attachment_ids) == len(spark_ids) and set(attachment_ids) == spark_ids:
                return post
        return None

    async def _publish(self, actor: Actor, projection: ShareProjection) -> CommunityPost:
        post = await self.community_api.create_post(actor, projection.post_kind, projection.caption)
        try:
            attachments = await self.community_api.create_attachments(post.id, projection.attachments)
        except RemoteError as attach_error:
            logger.warning(f"Attaching to post {post.id} failed, rolling back: {attach_error}")
            await self._rollback_post(post.id, attach_error)
            raise
        post.attachments = attachments
        return post

    async def _rollback_post(self, post_id: str, cause: Exception) -> None:
        try:
            await self.community_api.delete_post(post_id)
        except RemoteError as rollback_error:
            logger.error(
                f"Rollback of post {post_id} failed, post is left without attachments: {rollback_error}"
            )
            raise CompensationError(
                f"Sharing failed ({cause}) and post {post_id} could not be removed ({rollback_error})",
                post_id=post_id,
            ) from rollback_error
