from __future__ import annotations

from pydantic import BaseModel

from sparkboard.classifier import classify, decode_payload
from sparkboard.models.content import ContentKind, SparkPayload
from sparkboard.models.meta import create_partial_model


class Spark(BaseModel):
    """
    A single object placed on a board, as stored in the ``sparks`` table.

    ``text_content`` is overloaded by the storage schema (note body, MIME type or
    music metadata JSON); use ``kind`` and ``payload`` rather than reading it directly.
    """
    id: str
    board_id: str
    user_id: str | None = None
    type: str | None = None
    content_url: str | None = None
    title: str | None = None
    text_content: str | None = None
    x: float = 0
    y: float = 0
    width: float | None = None
    height: float | None = None
    created_at: str | None = None

    @property
    def kind(self) -> ContentKind:
        """Semantic kind. Raises UnknownKindError for an unrecognized kind-tag."""
        return classify(self.type, self.text_content, self.title)

    @property
    def payload(self) -> SparkPayload:
        """Kind-specific payload decoded from the legacy columns."""
        return decode_payload(self.type, self.text_content, self.title)


SparkPartial = create_partial_model(Spark)
