import sys

from loguru import logger

from sparkboard.api.account_api import AccountApi
from sparkboard.api.board_api import BoardApi
from sparkboard.api.community_api import CommunityApi
from sparkboard.api.spark_api import SparkApi
from sparkboard.api.spotify_api import SpotifyApi
from sparkboard.api.storage_api import StorageApi
from sparkboard.client import Client
from sparkboard.exceptions import NotAuthenticatedError
from sparkboard.models.community import CommunityPost
from sparkboard.models.spark import Spark
from sparkboard.models.user import Actor, Profile
from sparkboard.services.share_service import ShareService
from sparkboard.services.spark_service import SparkService
from sparkboard.utils.layout import LayoutMethod, Placement, organize_board
from sparkboard.utils.settings import Settings, get_settings


class Sparkboard:
    """
    Main orchestrator for the Sparkboard backend.

    Holds the session and passes the signed-in ``Actor`` explicitly into every
    authoring call made through the services.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._init_logger()
        self._client = Client.from_settings(self.settings)
        self.actor: Actor | None = None

        # Initialize API clients
        self.account_api = AccountApi(self._client)
        self.board_api = BoardApi(self._client)
        self.spark_api = SparkApi(self._client)
        self.storage_api = StorageApi(self._client, bucket=self.settings.storage_bucket)
        self.community_api = CommunityApi(self._client)
        self._spotify_api: SpotifyApi | None = None

        # Initialize services
        self.share_service = ShareService(self.community_api, self.spark_api, self.board_api)
        self.spark_service = SparkService(
            self.spark_api,
            self.storage_api,
            viewport=(self.settings.viewport_width, self.settings.viewport_height)
        )

    @property
    def spotify_api(self) -> SpotifyApi:
        """
        Spotify client, built on first use from SPARKBOARD_SPOTIFY_TOKEN.

        :raises ConfigurationError: If no Spotify token is configured
        """
        if self._spotify_api is None:
            self._spotify_api = SpotifyApi(self.settings.spotify_token)
        return self._spotify_api

    async def close(self) -> None:
        """Close the underlying HTTP clients."""
        await self._client.close()
        if self._spotify_api is not None:
            await self._spotify_api.close()

    async def __aenter__(self) -> "Sparkboard":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def login(self, email: str | None = None, password: str | None = None) -> Actor:
        """
        Sign in.

        Uses the given credentials, then SPARKBOARD_EMAIL / SPARKBOARD_PASSWORD,
        then the development refresh token.

        :return: The signed-in actor
        :raises NotAuthenticatedError: If no credentials are available at all
        :raises AuthenticationError: If the backend rejects them
        """
        email = email or self.settings.email
        password = password or self.settings.password

        if email and password:
            self.actor = await self.account_api.login(email, password)
        elif self.settings.dev_refresh_token:
            logger.debug("No credentials given, restoring development session")
            self.actor = await self.account_api.restore_session(self.settings.dev_refresh_token)
        else:
            raise NotAuthenticatedError(
                "Email and password are required. Provide them as arguments or "
                "set SPARKBOARD_EMAIL and SPARKBOARD_PASSWORD environment variables."
            )
        return self.actor

    def logout(self) -> None:
        self.account_api.logout()
        self.actor = None

    async def share_spark(self, spark_id: str, caption: str | None = None) -> CommunityPost:
        """Fetch a spark and share it as the signed-in user."""
        spark = await self.spark_api.get_spark(spark_id)
        return await self.share_service.share_spark(self.actor, spark, caption)

    async def share_board(self, board_id: str, caption: str | None = None) -> CommunityPost:
        board = await self.board_api.get_board(board_id)
        return await self.share_service.share_board(self.actor, board, caption)

    async def unshare_board(self, board_id: str) -> bool:
        """
        Take down the post mirroring a board, if there is one.

        :return: True if a post was removed
        """
        post = await self.share_service.find_shared_board_post(self.actor, board_id)
        if post is None:
            return False
        await self.share_service.unshare(self.actor, post.id)
        return True

    async def organize_board(
        self,
        board_id: str,
        method: LayoutMethod = 'grid',
        apply: bool = True
    ) -> list[Placement]:
        """
        Rearrange a board's sparks inside the visible viewport.

        :param board_id: Board to organize
        :param method: 'grid', 'by_type' or 'spacing'
        :param apply: Write the new positions back (default True)
        :return: The computed placements
        """
        sparks: list[Spark] = await self.spark_api.get_sparks(board_id)
        placements = organize_board(sparks, method, self.settings.viewport_width)
        if apply:
            await self.spark_api.apply_layout(placements)
        return placements

    async def search_tracks(self, query: str, limit: int = 20) -> list[dict]:
        return await self.spotify_api.search_tracks(query, limit=limit)

    async def add_music(self, board_id: str, track: dict, display_mode: str = 'album') -> Spark:
        """
        Place a Spotify track on a board as the signed-in user.

        :param board_id: Board to add the track to
        :param track: Track object from ``search_tracks``
        :param display_mode: 'album' or 'text'
        :return: The created spark
        """
        return await self.spark_service.add_music(self.actor, board_id, track, display_mode)

    async def get_feed(self, limit: int | None = None) -> tuple[list[CommunityPost], dict[str, Profile]]:
        """Get the community feed together with the authors' profiles."""
        posts = await self.community_api.get_feed(limit=limit)
        profiles = await self.community_api.get_profiles({post.user_id for post in posts})
        return posts, profiles

    def _init_logger(self) -> None:
        """Configure logging based on SPARKBOARD_DEBUG.

        If SPARKBOARD_DEBUG is set to a truthy value, enables DEBUG level logging.
        Otherwise, only WARNING and above are shown.
        """
        logger.remove()
        level = "DEBUG" if self.settings.debug else "WARNING"
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ) if self.settings.debug else "<level>{message}</level>"
        logger.add(sys.stderr, level=level, format=log_format)
