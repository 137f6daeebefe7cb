"""
Content kinds, feed kinds, and the tagged spark payload.

Two enumerations are kept apart on purpose: ``ContentKind`` is what a spark
*is*, ``PostKind`` is how the community feed groups it. ``POST_KIND_BY_CONTENT``
is the only bridge between them.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SparkTag(str, Enum):
    """Kind-tags accepted by the ``sparks.type`` column."""
    IMAGE = 'image'
    NOTE = 'note'
    AUDIO = 'audio'


class ContentKind(str, Enum):
    """Semantic kind of a spark."""
    IMAGE = 'image'
    NOTE = 'note'
    VOICE_AUDIO = 'voice'
    MUSIC_AUDIO = 'music'
    FILE = 'file'


class PostKind(str, Enum):
    """Kind of a community post, as displayed in the feed."""
    NOTE = 'note'
    IMAGE = 'image'
    MUSIC = 'music'
    SPARKLETTE = 'sparklette'
    AUDIO = 'audio'


class MediaType(str, Enum):
    """``community_attachments.media_type`` values written by this client."""
    IMAGE = 'image'
    NOTE = 'note'
    VOICE = 'voice'
    MUSIC = 'music'
    FILE = 'file'
    SPARK = 'spark'  # one spark of a shared board


# file and voice have no feed kind of their own and collapse to sparklette
POST_KIND_BY_CONTENT: dict[ContentKind, PostKind] = {
    ContentKind.IMAGE: PostKind.IMAGE,
    ContentKind.NOTE: PostKind.NOTE,
    ContentKind.FILE: PostKind.SPARKLETTE,
    ContentKind.VOICE_AUDIO: PostKind.SPARKLETTE,
    ContentKind.MUSIC_AUDIO: PostKind.MUSIC,
}

MEDIA_TYPE_BY_CONTENT: dict[ContentKind, MediaType] = {
    ContentKind.IMAGE: MediaType.IMAGE,
    ContentKind.NOTE: MediaType.NOTE,
    ContentKind.FILE: MediaType.FILE,
    ContentKind.VOICE_AUDIO: MediaType.VOICE,
    ContentKind.MUSIC_AUDIO: MediaType.MUSIC,
}


def post_kind_for(kind: ContentKind) -> PostKind:
    return POST_KIND_BY_CONTENT[kind]


class MusicMetadata(BaseModel):
    """
    Track metadata stored as JSON in a music spark's ``text_content``.

    Stored keys are camelCase (``albumImage``, ``spotifyUrl``...). Older rows may
    use ``artistName`` / ``albumArt``; both are accepted when reading.
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    artists: str | None = Field(default=None, validation_alias=AliasChoices('artists', 'artistName'))
    album_image: str | None = Field(
        default=None,
        validation_alias=AliasChoices('albumImage', 'albumArt', 'album_image'),
        serialization_alias='albumImage',
    )
    display_mode: str = Field(
        default='album',
        validation_alias=AliasChoices('displayMode', 'display_mode'),
        serialization_alias='displayMode',
    )
    spotify_uri: str | None = Field(
        default=None,
        validation_alias=AliasChoices('spotifyUri', 'spotify_uri'),
        serialization_alias='spotifyUri',
    )
    spotify_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices('spotifyUrl', 'spotify_url'),
        serialization_alias='spotifyUrl',
    )

    @field_validator('artists', 'album_image', 'spotify_uri', 'spotify_url', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        # Hand-written JSON in the column is not always strings
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return ', '.join(str(v) for v in value)
        return str(value)

    @field_validator('display_mode', mode='before')
    @classmethod
    def _coerce_display_mode(cls, value: Any) -> str:
        return value if value in ('album', 'text') else 'album'

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_track(cls, track: dict[str, Any], display_mode: str = 'album') -> MusicMetadata:
        """
        Build metadata from a Spotify Web API track object.

        :param track: Track JSON (``name``, ``artists``, ``album``, ``uri``, ``external_urls``)
        :param display_mode: 'album' to show album art, 'text' for a text card
        """
        artists = ', '.join(a.get('name', '') for a in track.get('artists') or [] if a.get('name'))
        images = (track.get('album') or {}).get('images') or []
        return cls(
            artists=artists,
            album_image=images[0].get('url') if images else None,
            display_mode=display_mode,
            spotify_uri=track.get('uri'),
            spotify_url=(track.get('external_urls') or {}).get('spotify'),
        )


class ImagePayload(BaseModel):
    kind: Literal[ContentKind.IMAGE] = ContentKind.IMAGE


class NotePayload(BaseModel):
    kind: Literal[ContentKind.NOTE] = ContentKind.NOTE
    body: str = ''


class VoicePayload(BaseModel):
    kind: Literal[ContentKind.VOICE_AUDIO] = ContentKind.VOICE_AUDIO


class MusicPayload(BaseModel):
    kind: Literal[ContentKind.MUSIC_AUDIO] = ContentKind.MUSIC_AUDIO
    metadata: MusicMetadata = Field(default_factory=MusicMetadata)


class FilePayload(BaseModel):
    kind: Literal[ContentKind.FILE] = ContentKind.FILE
    mime_type: str

    @property
    def extension_label(self) -> str:
        """Upper-cased subtype of the MIME type, e.g. 'PDF' for application/pdf."""
        return self.mime_type.split('/')[-1].upper() or 'FILE'


SparkPayload = Annotated[
    Union[ImagePayload, NotePayload, VoicePayload, MusicPayload, FilePayload],
    Field(discriminator='kind'),
]
