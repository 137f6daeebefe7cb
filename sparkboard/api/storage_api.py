import time

from loguru import logger

from sparkboard.api.base_api import BaseApi, require_actor
from sparkboard.client import Client
from sparkboard.exceptions import ValidationError
from sparkboard.models.user import Actor
from sparkboard.utils.validation import validate_id, validate_non_empty

IMAGE_PREFIX = 'sparks'
AUDIO_PREFIX = 'audio'
FILE_PREFIX = 'files'
AVATAR_PREFIX = 'avatars'


def _extension(filename: str | None, default: str) -> str:
    if filename and '.' in filename:
        ext = filename.rsplit('.', 1)[-1].strip().lower()
        if ext:
            return ext
    return default


class StorageApi(BaseApi):
    """Uploads media into the project bucket and hands back public URLs."""

    def __init__(self, client: Client, bucket: str = 'spark-images') -> None:
        super().__init__(client)
        self.bucket = bucket

    async def upload_image(self, board_id: str, data: bytes, filename: str | None = None) -> str:
        """
        Uploads an image for a board.

        :param board_id: Board the image belongs to (used in the object name)
        :param data: Image bytes
        :param filename: Original file name, used for the extension (default jpg)
        :return: Public URL of the stored image
        """
        validate_id(board_id, "board_id")
        ext = _extension(filename, 'jpg')
        return await self._upload(IMAGE_PREFIX, board_id, ext, data, f'image/{ext}')

    async def upload_audio(self, board_id: str, data: bytes, filename: str | None = None) -> str:
        """Uploads a voice recording (default extension m4a) and returns its public URL."""
        validate_id(board_id, "board_id")
        ext = _extension(filename, 'm4a')
        return await self._upload(AUDIO_PREFIX, board_id, ext, data, f'audio/{ext}')

    async def upload_file(self, board_id: str, data: bytes, filename: str, mime_type: str) -> str:
        """
        Uploads an arbitrary document.

        The extension comes from the file name, then the MIME subtype.
        """
        validate_id(board_id, "board_id")
        validate_non_empty(mime_type, "mime_type")
        ext = _extension(filename, mime_type.split('/')[-1] or 'file')
        return await self._upload(FILE_PREFIX, board_id, ext, data, mime_type)

    async def upload_avatar(self, actor: Actor | None, data: bytes, filename: str | None = None) -> str:
        actor = require_actor(actor)
        ext = _extension(filename, 'jpg')
        return await self._upload(AVATAR_PREFIX, actor.id, ext, data, f'image/{ext}')

    async def _upload(self, prefix: str, owner_id: str, ext: str, data: bytes, content_type: str) -> str:
        if not data:
            raise ValidationError("Cannot upload an empty file")
        path = f'{prefix}/{owner_id}-{int(time.time() * 1000)}.{ext}'
        await self._client.upload(self.bucket, path, data, content_type)
        url = self._client.public_url(self.bucket, path)
        logger.debug(f"Uploaded {len(data)} bytes to {url}")
        return url
