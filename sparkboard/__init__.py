"""Sparkboard backend client.

A Python client for Sparkboard: mood boards of "sparks" (photos, notes, voice
recordings, music tracks and files) that can be shared to a community feed.

Example usage:
    from sparkboard import Sparkboard

    async with Sparkboard() as sb:
        await sb.login(email="user@example.com", password="password")
        boards = await sb.board_api.get_boards(sb.actor)
        for board in boards:
            print(f"Board: {board.name}")
"""

from sparkboard.sparkboard import Sparkboard
from sparkboard.client import Client
from sparkboard.classifier import classify, decode_payload, encode_payload
from sparkboard.projector import project_spark, project_board
from sparkboard.exceptions import (
    SparkboardError,
    AuthenticationError,
    NotAuthenticatedError,
    APIError,
    ConfigurationError,
    ValidationError,
    NetworkError,
    UnknownKindError,
    UnsupportedForSharingError,
    CompensationError,
)

# Models
from sparkboard.models.board import Board, BoardPartial
from sparkboard.models.spark import Spark, SparkPartial
from sparkboard.models.community import CommunityPost, CommunityAttachment
from sparkboard.models.content import ContentKind, PostKind, MediaType
from sparkboard.models.user import Actor, Profile

# Services
from sparkboard.services.share_service import ShareService
from sparkboard.services.spark_service import SparkService

__version__ = "0.1.0"

__all__ = [
    # Main entry point
    "Sparkboard",
    "Client",
    # Domain functions
    "classify",
    "decode_payload",
    "encode_payload",
    "project_spark",
    "project_board",
    # Exceptions
    "SparkboardError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "APIError",
    "ConfigurationError",
    "ValidationError",
    "NetworkError",
    "UnknownKindError",
    "UnsupportedForSharingError",
    "CompensationError",
    # Models
    "Board",
    "BoardPartial",
    "Spark",
    "SparkPartial",
    "CommunityPost",
    "CommunityAttachment",
    "ContentKind",
    "PostKind",
    "MediaType",
    "Actor",
    "Profile",
    # Services
    "ShareService",
    "SparkService",
]
