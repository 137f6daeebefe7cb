from collections.abc import Iterable
from typing import Any

from sparkboard.api.base_api import BaseApi, require_actor
from sparkboard.classifier import encode_payload
from sparkboard.exceptions import APIError
from sparkboard.models.content import SparkPayload
from sparkboard.models.meta import build_patch
from sparkboard.models.spark import Spark, SparkPartial
from sparkboard.models.user import Actor
from sparkboard.projector import UNTITLED_NOTE
from sparkboard.utils.layout import Placement
from sparkboard.utils.validation import (
    validate_id,
    validate_non_empty,
    validate_note_body,
    validate_size,
    validate_title,
)


class SparkApi(BaseApi):

    async def get_spark(self, spark_id: str) -> Spark:
        """
        Gets a single spark.

        :raises APIError: If the spark does not exist (status 404)
        """
        validate_id(spark_id, "spark_id")
        rows = await self._client.query('sparks', filters={'id': spark_id})
        if not rows:
            raise APIError(f"Spark {spark_id} not found", status_code=404)
        return Spark(**rows[0])

    async def get_sparks(self, board_id: str) -> list[Spark]:
        """Gets all sparks on a board, oldest first."""
        validate_id(board_id, "board_id")
        rows = await self._client.query('sparks', filters={'board_id': board_id}, order='created_at.asc')
        return [Spark(**row) for row in rows]

    async def create_spark(
        self,
        actor: Actor | None,
        board_id: str,
        payload: SparkPayload,
        position: tuple[float, float],
        size: tuple[float, float],
        content_url: str | None = None,
        title: str | None = None
    ) -> Spark:
        """
        Creates a spark from a typed payload.

        :param actor: Owner of the spark
        :param board_id: Board to place the spark on
        :param payload: Kind-specific payload; encoded into the legacy columns
        :param position: (x, y) on the canvas
        :param size: (width, height)
        :param content_url: Public URL of the uploaded media, if any
        :param title: Display title
        :return: The created spark
        :raises NotAuthenticatedError: If actor is None
        """
        actor = require_actor(actor)
        validate_id(board_id, "board_id")
        validate_title(title)

        row: dict[str, Any] = {
            'board_id': board_id,
            'user_id': actor.id,
            'content_url': content_url,
            'title': title,
            'x': position[0],
            'y': position[1],
            'width': size[0],
            'height': size[1],
        }
        row.update(encode_payload(payload))
        created = await self._client.insert('sparks', row)
        return Spark(**created)

    async def rename_spark(self, spark_id: str, title: str) -> Spark:
        validate_non_empty(title, "Name")
        validate_title(title)
        return await self._patch(spark_id, title=title)

    async def update_note(self, spark_id: str, title: str | None, body: str) -> Spark:
        """
        Updates a note's title and body. A blank title becomes "Untitled Note".

        :raises ValidationError: If the body is empty
        """
        validate_note_body(body)
        return await self._patch(
            spark_id,
            title=(title or '').strip() or UNTITLED_NOTE,
            text_content=body.strip(),
        )

    async def resize_spark(self, spark_id: str, width: float, height: float) -> Spark:
        validate_size(width, height)
        return await self._patch(spark_id, width=width, height=height)

    async def move_spark(self, spark_id: str, x: float, y: float) -> Spark:
        return await self._patch(spark_id, x=x, y=y)

    async def apply_layout(self, placements: Iterable[Placement]) -> list[Spark]:
        """Moves each spark to its computed placement, one request per spark."""
        return [await self.move_spark(p.spark_id, p.x, p.y) for p in placements]

    async def delete_spark(self, spark_id: str) -> None:
        validate_id(spark_id, "spark_id")
        await self._client.delete('sparks', {'id': spark_id})

    async def _patch(self, spark_id: str, **fields: Any) -> Spark:
        validate_id(spark_id, "spark_id")
        patch = build_patch(SparkPartial, **fields)
        rows = await self._client.update('sparks', {'id': spark_id}, patch)
        if not rows:
            raise APIError(f"Spark {spark_id} not found", status_code=404)
        return Spark(**rows[0])
