from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from sparkboard.models.content import PostKind

ATTACHMENT_COLUMNS = 'id,post_id,spark_id,title,subtitle,image_url,spotify_url,audio_url,media_type,created_at'
POST_SELECT = f'id,user_id,type,caption,created_at,attachments:community_attachments({ATTACHMENT_COLUMNS})'


class CommunityAttachment(BaseModel):
    """
    Display-ready projection of a shared spark, owned by a post.

    Also used unsaved (without ``id``/``post_id``) as the output of the projector.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    post_id: str | None = None
    spark_id: str | None = None
    title: str | None = None
    subtitle: str | None = None
    image_url: str | None = None
    external_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices('spotify_url', 'external_url'),
        serialization_alias='spotify_url',
    )
    audio_url: str | None = None
    media_type: str | None = None
    created_at: str | None = None

    def to_row(self, post_id: str) -> dict[str, Any]:
        """Insert payload for ``community_attachments``; unset fields are left out."""
        row = self.model_dump(by_alias=True, exclude_none=True, exclude={'id', 'created_at'})
        row['post_id'] = post_id
        return row


class CommunityPost(BaseModel):
    """A shareable wrapper around one or more attachments."""
    id: str
    user_id: str
    type: PostKind
    caption: str | None = None
    created_at: str | None = None
    attachments: list[CommunityAttachment] = Field(default_factory=list)

    @property
    def spark_ids(self) -> set[str]:
        return {a.spark_id for a in self.attachments if a.spark_id}
