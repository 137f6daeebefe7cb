"""Projection of sparks and boards into community post attachments."""
from __future__ import annotations

from pydantic import BaseModel

from sparkboard.classifier import decode_payload
from sparkboard.exceptions import UnknownKindError, UnsupportedForSharingError, ValidationError
from sparkboard.models.board import Board
from sparkboard.models.community import CommunityAttachment
from sparkboard.models.content import (
    MEDIA_TYPE_BY_CONTENT,
    ContentKind,
    FilePayload,
    MediaType,
    MusicPayload,
    NotePayload,
    PostKind,
    post_kind_for,
)
from sparkboard.models.spark import Spark

UNTITLED_NOTE = 'Untitled Note'
UNTITLED_TRACK = 'Untitled'
VOICE_RECORDING = 'Voice Recording'
VOICE_SUBTITLE = 'Audio recording'
FILE_TITLE = 'File'
FILE_SUBTITLE = 'Document'


class ShareProjection(BaseModel):
    """Everything needed to write a community post, computed without touching storage."""
    post_kind: PostKind
    caption: str | None = None
    attachments: list[CommunityAttachment]


def normalize_caption(caption: str | None) -> str | None:
    if caption is None:
        return None
    return caption.strip() or None


def project_attachment(spark: Spark, kind: ContentKind | None = None) -> CommunityAttachment:
    """
    Build the attachment for a single spark.

    Only the fields relevant to the spark's kind are set.

    :param spark: Spark to project
    :param kind: Already classified kind (classified from the spark if omitted)
    :return: Unsaved attachment
    :raises UnsupportedForSharingError: If the spark's kind is unknown
    """
    try:
        payload = decode_payload(spark.type, spark.text_content, spark.title)
    except UnknownKindError as e:
        raise UnsupportedForSharingError(f"Spark {spark.id} cannot be shared: {e}") from e
    kind = kind or payload.kind

    attachment = CommunityAttachment(spark_id=spark.id, media_type=MEDIA_TYPE_BY_CONTENT[kind].value)

    if kind is ContentKind.IMAGE:
        attachment.image_url = spark.content_url
        attachment.title = spark.title
    elif kind is ContentKind.NOTE:
        attachment.title = spark.title or UNTITLED_NOTE
        body = payload.body if isinstance(payload, NotePayload) else spark.text_content
        attachment.subtitle = body or None
    elif kind is ContentKind.VOICE_AUDIO:
        attachment.title = spark.title or VOICE_RECORDING
        attachment.subtitle = VOICE_SUBTITLE
        attachment.audio_url = spark.content_url
    elif kind is ContentKind.MUSIC_AUDIO:
        metadata = payload.metadata if isinstance(payload, MusicPayload) else None
        attachment.title = spark.title or UNTITLED_TRACK
        attachment.subtitle = metadata.artists if metadata else None
        attachment.image_url = metadata.album_image if metadata else None
        attachment.external_url = (metadata.spotify_url if metadata else None) or spark.content_url
    elif kind is ContentKind.FILE:
        attachment.title = spark.title or FILE_TITLE
        attachment.subtitle = FILE_SUBTITLE
        # Download link, not a decodable image
        attachment.image_url = spark.content_url
    else:
        raise UnsupportedForSharingError(f"Spark {spark.id} has unsupported kind {kind!r}")

    return attachment


def project_spark(spark: Spark, caption: str | None = None) -> ShareProjection:
    """
    Project a spark into a post kind plus a single attachment.

    :param spark: Spark to share
    :param caption: Optional user caption (trimmed, blank becomes None)
    :return: The share projection
    :raises UnsupportedForSharingError: If the spark's kind is unknown
    """
    try:
        kind = spark.kind
    except UnknownKindError as e:
        raise UnsupportedForSharingError(f"Spark {spark.id} cannot be shared: {e}") from e
    return ShareProjection(
        post_kind=post_kind_for(kind),
        caption=normalize_caption(caption),
        attachments=[project_attachment(spark, kind)],
    )


def project_board(board: Board, sparks: list[Spark], caption: str | None = None) -> ShareProjection:
    """
    Project a whole board into a sparklette post, one attachment per spark.

    :raises ValidationError: If the board has no sparks
    """
    if not sparks:
        raise ValidationError(f'Board "{board.name}" has no sparks to share')
    attachments = [
        CommunityAttachment(
            spark_id=spark.id,
            title=board.name,
            image_url=spark.content_url,
            media_type=MediaType.SPARK.value,
        )
        for spark in sparks
    ]
    return ShareProjection(
        post_kind=PostKind.SPARKLETTE,
        caption=normalize_caption(caption),
        attachments=attachments,
    )


def file_extension_label(spark: Spark) -> str | None:
    """Short type label for a file spark (e.g. 'PDF'), None for other kinds."""
    payload = spark.payload
    return payload.extension_label if isinstance(payload, FilePayload) else None
