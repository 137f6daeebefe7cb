from typing import Any

from sparkboard.api.base_api import BaseApi
from sparkboard.exceptions import APIError, AuthenticationError, NotAuthenticatedError
from sparkboard.models.user import Actor
from sparkboard.utils.validation import validate_email, validate_password, validate_non_empty


class AccountApi(BaseApi):

    async def login(self, email: str, password: str) -> Actor:
        """
        Signs in with email and password and attaches the session to the client.

        :param email: Registered email
        :param password: Registered password (plaintext)
        :return: The signed-in actor
        :raises ValidationError: If email or password format is invalid
        :raises AuthenticationError: If the credentials are rejected
        """
        validate_email(email)
        validate_password(password)

        try:
            session = await self._client.sign_in_with_password(email, password)
        except APIError as e:
            if e.status_code in (400, 401, 403):
                raise AuthenticationError(f"Login failed: {e}") from e
            raise
        return self._start_session(session)

    async def restore_session(self, refresh_token: str) -> Actor:
        """
        Exchanges a refresh token for a fresh session.

        :param refresh_token: Refresh token from a previous session
        :return: The signed-in actor
        :raises AuthenticationError: If the token is rejected
        """
        validate_non_empty(refresh_token, "refresh_token")
        try:
            session = await self._client.refresh_session(refresh_token)
        except APIError as e:
            if e.status_code in (400, 401, 403):
                raise AuthenticationError(f"Session refresh failed: {e}") from e
            raise
        return self._start_session(session)

    async def get_current_actor(self) -> Actor:
        """
        Looks up the user behind the client's current session.

        :return: The signed-in actor
        :raises NotAuthenticatedError: If there is no session or it is no longer valid
        """
        if not self._client.access_token:
            raise NotAuthenticatedError("No active session")
        try:
            user = await self._client.get_user()
        except APIError as e:
            if e.status_code in (401, 403):
                raise NotAuthenticatedError("Session expired") from e
            raise
        if not user or not user.get('id'):
            raise NotAuthenticatedError("No active session")
        return Actor.from_auth_user(user, access_token=self._client.access_token)

    def logout(self) -> None:
        self._client.clear_session()

    def _start_session(self, session: dict[str, Any] | None) -> Actor:
        if not session or not session.get('access_token') or not session.get('user'):
            raise AuthenticationError("Login failed: no session returned")
        self._client.set_session(session['access_token'])
        return Actor.from_auth_user(
            session['user'],
            access_token=session['access_token'],
            refresh_token=session.get('refresh_token'),
        )
