import random

from loguru import logger

from sparkboard.api.base_api import require_actor
from sparkboard.api.spark_api import SparkApi
from sparkboard.api.storage_api import StorageApi
from sparkboard.models.content import (
    ContentKind,
    FilePayload,
    ImagePayload,
    MusicMetadata,
    MusicPayload,
    NotePayload,
    VoicePayload,
)
from sparkboard.models.spark import Spark
from sparkboard.models.user import Actor
from sparkboard.utils.placement import FOOTPRINTS, MUSIC_TEXT_SIZE, spawn_for_kind
from sparkboard.utils.validation import validate_mime_type, validate_non_empty, validate_note_body


class SparkService:
    """Creates sparks of each kind: upload media if any, place it, insert the row."""

    def __init__(
        self,
        spark_api: SparkApi,
        storage_api: StorageApi,
        viewport: tuple[float, float] = (390, 844),
        rng: random.Random | None = None
    ):
        """
        Initialize the spark service.

        :param spark_api: SparkApi instance
        :param storage_api: StorageApi instance
        :param viewport: Base (width, height) of the canvas viewport
        :param rng: Random source for spawn jitter
        """
        self.spark_api = spark_api
        self.storage_api = storage_api
        self.viewport = viewport
        self._rng = rng

    def _spawn(self, kind: ContentKind) -> tuple[float, float]:
        return spawn_for_kind(kind, self.viewport[0], self.viewport[1], rng=self._rng)

    def _size(self, kind: ContentKind) -> tuple[float, float]:
        footprint = FOOTPRINTS[kind]
        return footprint.width, footprint.height

    async def add_photo(self, actor: Actor | None, board_id: str, data: bytes, filename: str | None = None) -> Spark:
        """
        Upload a photo and place it on a board.

        :raises NotAuthenticatedError: If actor is None (nothing is uploaded)
        """
        actor = require_actor(actor)
        url = await self.storage_api.upload_image(board_id, data, filename)
        spark = await self.spark_api.create_spark(
            actor, board_id, ImagePayload(),
            position=self._spawn(ContentKind.IMAGE),
            size=self._size(ContentKind.IMAGE),
            content_url=url,
        )
        logger.info(f"Added photo spark {spark.id} to board {board_id}")
        return spark

    async def add_voice_recording(
        self,
        actor: Actor | None,
        board_id: str,
        data: bytes,
        filename: str | None = None,
        title: str | None = None
    ) -> Spark:
        actor = require_actor(actor)
        url = await self.storage_api.upload_audio(board_id, data, filename)
        return await self.spark_api.create_spark(
            actor, board_id, VoicePayload(),
            position=self._spawn(ContentKind.VOICE_AUDIO),
            size=self._size(ContentKind.VOICE_AUDIO),
            content_url=url,
            title=title.strip() if title and title.strip() else None,
        )

    async def add_file(
        self,
        actor: Actor | None,
        board_id: str,
        data: bytes,
        filename: str,
        mime_type: str
    ) -> Spark:
        """
        Upload a document and place it on a board.

        :param filename: Shown as the spark title
        :param mime_type: Stored with the object and on the spark
        :raises ValidationError: If the MIME type is not of the form type/subtype
        """
        actor = require_actor(actor)
        validate_non_empty(filename, "File name")
        validate_mime_type(mime_type)
        url = await self.storage_api.upload_file(board_id, data, filename, mime_type)
        return await self.spark_api.create_spark(
            actor, board_id, FilePayload(mime_type=mime_type),
            position=self._spawn(ContentKind.FILE),
            size=self._size(ContentKind.FILE),
            content_url=url,
            title=filename,
        )

    async def add_note(self, actor: Actor | None, board_id: str, title: str | None, body: str) -> Spark:
        """
        Place a text note on a board.

        :raises ValidationError: If the body is empty
        """
        actor = require_actor(actor)
        validate_note_body(body)
        return await self.spark_api.create_spark(
            actor, board_id, NotePayload(body=body.strip()),
            position=self._spawn(ContentKind.NOTE),
            size=self._size(ContentKind.NOTE),
            title=title.strip() if title and title.strip() else None,
        )

    async def add_music(
        self,
        actor: Actor | None,
        board_id: str,
        track: dict,
        display_mode: str = 'album'
    ) -> Spark:
        """
        Place a Spotify track on a board.

        :param track: Spotify track object
        :param display_mode: 'album' (album art card) or 'text' (title/artist card)
        """
        actor = require_actor(actor)
        metadata = MusicMetadata.from_track(track, display_mode)
        size = self._size(ContentKind.MUSIC_AUDIO) if metadata.display_mode == 'album' else MUSIC_TEXT_SIZE
        return await self.spark_api.create_spark(
            actor, board_id, MusicPayload(metadata=metadata),
            position=self._spawn(ContentKind.MUSIC_AUDIO),
            size=size,
            content_url=metadata.spotify_url or track.get('uri') or '',
            title=track.get('name'),
        )
