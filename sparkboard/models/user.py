from __future__ import annotations

from typing import Any

from pydantic import BaseModel


def _first(metadata: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = metadata.get(key)
        if value:
            return str(value)
    return None


class Actor(BaseModel):
    """
    The authenticated user an operation runs as.

    Passed explicitly into every authoring call. Profile fields come from
    free-form auth metadata and may all be missing.
    """
    id: str
    email: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_auth_user(
        cls,
        user: dict[str, Any],
        access_token: str | None = None,
        refresh_token: str | None = None
    ) -> Actor:
        """
        Build an actor from an auth user record.

        Metadata keys are accepted in both snake_case and camelCase.
        """
        metadata = user.get('user_metadata') or {}
        return cls(
            id=user['id'],
            email=user.get('email'),
            access_token=access_token,
            refresh_token=refresh_token,
            first_name=_first(metadata, 'first_name', 'firstName'),
            last_name=_first(metadata, 'last_name', 'lastName'),
            username=_first(metadata, 'username'),
            avatar_url=_first(metadata, 'profile_picture', 'profilePicture', 'avatar_url'),
        )

    @property
    def display_name(self) -> str:
        full_name = ' '.join(part for part in (self.first_name, self.last_name) if part)
        if full_name:
            return full_name
        if self.username:
            return self.username
        if self.email:
            return self.email.split('@')[0]
        return 'Anonymous'


class Profile(BaseModel):
    """Public profile row, used to label feed authors."""
    id: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_picture: str | None = None

    @property
    def display_name(self) -> str:
        full_name = ' '.join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.username or 'Anonymous'
