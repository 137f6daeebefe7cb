"""
Interpretation of the legacy ``sparks`` columns.

The storage schema only knows three kind-tags and reuses ``text_content`` for
unrelated data, so the semantic kind is recovered from the tag plus the shape
of the free text. This module is the only place that shape is inspected;
everything else works with ``ContentKind`` and the tagged ``SparkPayload``.

Precedence (first match wins):

1. tag ``note`` -> note
2. tag ``audio`` -> music when the free text is a JSON object, else voice
3. tag ``image`` with a MIME-type-looking free text and a title -> file
   (files are stored under ``image`` because the column has no ``file`` tag)
4. tag ``image`` -> image
"""
from __future__ import annotations

import json
from typing import Any

from sparkboard.exceptions import UnknownKindError
from sparkboard.models.content import (
    ContentKind,
    FilePayload,
    ImagePayload,
    MusicMetadata,
    MusicPayload,
    NotePayload,
    SparkPayload,
    SparkTag,
    VoicePayload,
)


def parse_structured(text: str | None) -> dict[str, Any] | None:
    """
    Parse free text as a JSON object.

    Never raises: anything that is not a JSON object (including a bare JSON
    string or number) is reported as unstructured.

    :param text: Free text, may be None
    :return: The decoded object, or None
    """
    if not text:
        return None
    try:
        decoded = json.loads(text)
    except (ValueError, TypeError):
        return None
    return decoded if isinstance(decoded, dict) else None


def _looks_like_file(text_content: str | None, title: str | None) -> bool:
    return bool(
        text_content
        and parse_structured(text_content) is None
        and '/' in text_content
        and title
    )


def classify(kind_tag: str | None, text_content: str | None, title: str | None = None) -> ContentKind:
    """
    Determine the semantic kind of a stored spark.

    :param kind_tag: Value of the ``type`` column
    :param text_content: Value of the ``text_content`` column
    :param title: Value of the ``title`` column (only used to recognize files)
    :return: The content kind
    :raises UnknownKindError: If the kind-tag is not recognized
    """
    if kind_tag == SparkTag.NOTE.value:
        return ContentKind.NOTE
    if kind_tag == SparkTag.AUDIO.value:
        if parse_structured(text_content) is not None:
            return ContentKind.MUSIC_AUDIO
        return ContentKind.VOICE_AUDIO
    if kind_tag == SparkTag.IMAGE.value:
        if _looks_like_file(text_content, title):
            return ContentKind.FILE
        return ContentKind.IMAGE
    raise UnknownKindError(f"Unknown spark kind-tag: {kind_tag!r}")


def decode_payload(kind_tag: str | None, text_content: str | None, title: str | None = None) -> SparkPayload:
    """
    Decode the legacy columns into a tagged payload.

    :raises UnknownKindError: If the kind-tag is not recognized
    """
    kind = classify(kind_tag, text_content, title)
    if kind is ContentKind.NOTE:
        return NotePayload(body=text_content or '')
    if kind is ContentKind.MUSIC_AUDIO:
        return MusicPayload(metadata=MusicMetadata.model_validate(parse_structured(text_content)))
    if kind is ContentKind.VOICE_AUDIO:
        return VoicePayload()
    if kind is ContentKind.FILE:
        return FilePayload(mime_type=text_content)
    return ImagePayload()


def encode_payload(payload: SparkPayload) -> dict[str, Any]:
    """
    Encode a tagged payload into the legacy ``type`` / ``text_content`` columns.

    :param payload: Kind-specific payload
    :return: Column values to merge into a ``sparks`` row
    """
    if isinstance(payload, NotePayload):
        return {'type': SparkTag.NOTE.value, 'text_content': payload.body}
    if isinstance(payload, MusicPayload):
        return {'type': SparkTag.AUDIO.value, 'text_content': json.dumps(payload.metadata.to_json_dict())}
    if isinstance(payload, VoicePayload):
        return {'type': SparkTag.AUDIO.value, 'text_content': None}
    if isinstance(payload, FilePayload):
        return {'type': SparkTag.IMAGE.value, 'text_content': payload.mime_type}
    return {'type': SparkTag.IMAGE.value, 'text_content': None}
