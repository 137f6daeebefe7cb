"""Input checks run before anything is sent to the backend."""
import re

from sparkboard.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIME_TYPE_PATTERN = re.compile(r'^[\w.+-]+/[\w.+-]+$')

MIN_PASSWORD_LENGTH = 6
MAX_BOARD_NAME_LENGTH = 60
MAX_CAPTION_LENGTH = 500
MAX_TITLE_LENGTH = 200


def validate_email(email: str) -> None:
    """
    Check an email looks like user@host.tld.

    :raises ValidationError: If it does not
    """
    if not email or not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")


def validate_password(password: str, min_length: int = MIN_PASSWORD_LENGTH) -> None:
    """
    Check a password is long enough for the auth service to accept it.

    :param password: Plaintext password
    :param min_length: Minimum length (default 6, the backend's own minimum)
    :raises ValidationError: If the password is shorter
    """
    if not password or len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")


def validate_non_empty(value: str | None, field_name: str) -> None:
    """
    Reject None, empty and whitespace-only strings.

    :param value: Value to check
    :param field_name: Used in the error message
    :raises ValidationError: If there is no visible text
    """
    if not value or not value.strip():
        raise ValidationError(f"{field_name} cannot be empty")


def validate_id(value: str | None, field_name: str = "ID") -> None:
    validate_non_empty(value, field_name)


def validate_board_name(name: str, max_length: int = MAX_BOARD_NAME_LENGTH) -> None:
    """
    Board names are required and at most 60 characters once trimmed.

    :raises ValidationError: If the name is blank or too long
    """
    validate_non_empty(name, "Board name")
    validate_string_length(name.strip(), "Board name", max_length=max_length)


def validate_caption(caption: str | None, max_length: int = MAX_CAPTION_LENGTH) -> None:
    """
    Captions are optional; a given one may be at most 500 characters once trimmed.

    :raises ValidationError: If the caption is too long
    """
    if caption and len(caption.strip()) > max_length:
        raise ValidationError(f"Caption cannot exceed {max_length} characters")


def validate_title(title: str | None, max_length: int = MAX_TITLE_LENGTH) -> None:
    if title is not None:
        validate_string_length(title, "Title", max_length=max_length)


def validate_note_body(body: str | None) -> None:
    validate_non_empty(body, "Note text")


def validate_mime_type(mime_type: str | None) -> None:
    """
    Check a MIME type has the type/subtype form, e.g. ``application/pdf``.

    File sparks are only recognized when their stored MIME type contains a '/'.

    :raises ValidationError: If the value is not a MIME type
    """
    if not mime_type or not MIME_TYPE_PATTERN.match(mime_type):
        raise ValidationError(f"Invalid MIME type: {mime_type!r}")


def validate_size(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise ValidationError("Spark size must be positive")


def validate_string_length(
    value: str,
    field_name: str,
    min_length: int | None = None,
    max_length: int | None = None
) -> None:
    """
    Check a string's length is within bounds.

    :param value: String to check
    :param field_name: Used in the error message
    :param min_length: Inclusive lower bound (optional)
    :param max_length: Inclusive upper bound (optional)
    :raises ValidationError: If the value is None or out of bounds
    """
    if value is None:
        raise ValidationError(f"{field_name} cannot be None")
    if min_length is not None and len(value) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field_name} cannot exceed {max_length} characters")
