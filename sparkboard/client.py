import logging
from collections import deque
from typing import Any, Literal

import httpx
from httpx import Response, Timeout
from loguru import logger

from sparkboard.exceptions import APIError, NetworkError, ValidationError
from sparkboard.utils.settings import Settings, get_settings

# Suppress verbose httpx debug logging
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

REST_PATH = '/rest/v1'
STORAGE_PATH = '/storage/v1'
AUTH_PATH = '/auth/v1'
USER_AGENT = 'sparkboard-python/0.1.0'

SENSITIVE_HEADERS = {'apikey', 'authorization', 'cookie', 'set-cookie'}
SENSITIVE_KEYS = {'password', 'token', 'access_token', 'refresh_token', 'secret'}

HttpMethod = Literal['GET', 'POST', 'PATCH', 'DELETE']

# A filter value is either a plain value (equality) or an (operator, value) pair,
# e.g. {'board_id': 'b1'} or {'id': ('in', ['a', 'b'])}.
Filters = dict[str, Any]


def _sanitize_for_logging(data: dict | None, sensitive_keys: set[str] | None = None) -> dict[str, Any] | None:
    """Remove sensitive data from dict before logging."""
    if data is None:
        return None
    sensitive_keys = sensitive_keys or SENSITIVE_KEYS
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in sensitive_keys:
            result[key] = '[REDACTED]'
        elif isinstance(value, dict):
            result[key] = _sanitize_for_logging(value, sensitive_keys)
        else:
            result[key] = value
    return result


def _sanitize_headers(headers: dict | None) -> dict | None:
    """Remove sensitive headers before logging."""
    if headers is None:
        return None
    return {k: '[REDACTED]' if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def _error_message(response: Response) -> str:
    """Pull a readable message out of a REST, auth or storage error body."""
    try:
        error_body = response.json()
    except Exception:
        return response.text
    if not isinstance(error_body, dict):
        return response.text
    for key in ('message', 'error_description', 'msg', 'error'):
        if error_body.get(key):
            return str(error_body[key])
    return response.text


def _handle_response_error(response: Response) -> None:
    """Check response status and raise appropriate exception."""
    if response.status_code >= 400:
        raise APIError(f"HTTP {response.status_code}: {_error_message(response)}", status_code=response.status_code)


def _format_filter_value(value: Any) -> str:
    if isinstance(value, tuple):
        operator, operand = value
        if isinstance(operand, (list, tuple, set)):
            return f"{operator}.({','.join(str(v) for v in operand)})"
        return f"{operator}.{operand}"
    if value is None:
        return 'is.null'
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def build_filter_params(filters: Filters | None) -> dict[str, str]:
    """
    Convert a filter mapping into REST query parameters.

    :param filters: Column -> value or (operator, value)
    :return: Query parameters, e.g. {'board_id': 'eq.b1'}
    """
    if not filters:
        return {}
    return {column: _format_filter_value(value) for column, value in filters.items()}


class Client:
    """
    Thin async client for the hosted backend's REST, storage and auth surfaces.

    All requests carry the project's anon key; once a session is set, the
    user's access token replaces it as the bearer credential.
    """

    def __init__(self, base_url: str, anon_key: str, history_len: int = 30) -> None:
        self.base_url = base_url.rstrip('/')
        self.anon_key = anon_key
        self.access_token: str | None = None
        self.http2_client = httpx.AsyncClient(
            http2=True,
            base_url=self.base_url,
            headers={
                'apikey': anon_key,
                'authorization': f'Bearer {anon_key}',
                'user-agent': USER_AGENT,
                'accept': 'application/json',
            },
            timeout=Timeout(timeout=20.0)
        )
        self.history: deque[Response] = deque(maxlen=history_len)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Client":
        """
        Build a client from configuration.

        :raises ConfigurationError: If the backend URL or anon key is missing
        """
        base_url, anon_key = (settings or get_settings()).require_backend()
        return cls(base_url, anon_key)

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http2_client.aclose()

    async def _request(
        self,
        method: HttpMethod,
        url: str,
        data: dict[str, Any] | list[dict[str, Any]] | None = None,
        content: bytes | None = None,
        query_params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | Timeout | None = None
    ) -> Any:
        """
        Make an HTTP request with common error handling and logging.

        :param method: HTTP method (GET, POST, PATCH, DELETE)
        :param url: Request path, relative to the project URL
        :param data: JSON body data (for POST/PATCH)
        :param content: Raw body bytes (uploads); takes precedence over data
        :param query_params: Query parameters
        :param headers: Additional headers
        :param timeout: Optional per-request timeout (seconds or Timeout object)
        :return: Parsed JSON body, or None for an empty body
        :raises NetworkError: On connection/timeout errors
        :raises APIError: On HTTP errors or non-JSON responses
        """
        # Filter out None values from query params
        if query_params:
            query_params = {k: v for k, v in query_params.items() if v is not None}

        # Log request with sanitized data
        logger.debug(
            f'{method} request to {url}',
            data=_sanitize_for_logging(data) if isinstance(data, dict) else data,
            content_length=len(content) if content is not None else None,
            query_params=query_params,
            headers=_sanitize_headers(headers)
        )

        try:
            request_kwargs: dict[str, Any] = {
                'url': url,
                'params': query_params,
                'headers': headers,
            }
            if content is not None:
                request_kwargs['content'] = content
            elif method in ('POST', 'PATCH') and data is not None:
                request_kwargs['json'] = data
            if timeout is not None:
                request_kwargs['timeout'] = timeout

            response = await self.http2_client.request(method, **request_kwargs)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {e}")
        except httpx.RequestError as e:
            raise NetworkError(f"Network error: {e}")

        # Track response history
        self.history.append(response)

        # Check for HTTP errors
        _handle_response_error(response)

        if response.status_code == 204 or not response.content:
            logger.debug(f'Response ({response.status_code}), empty body')
            return None

        # Parse JSON response
        try:
            json_body = response.json()
            logger.debug(f'Response ({response.status_code}), body: {json_body}')
        except Exception:
            logger.debug(f'Response ({response.status_code}), body: {response.text}')
            raise APIError(f'Non-JSON response ({response.status_code}): {response.text}', status_code=response.status_code)

        return json_body

    # --- Session ---

    def set_session(self, access_token: str) -> None:
        """Use the user's access token as the bearer credential for all further requests."""
        self.access_token = access_token
        self.http2_client.headers['authorization'] = f'Bearer {access_token}'

    def clear_session(self) -> None:
        self.access_token = None
        self.http2_client.headers['authorization'] = f'Bearer {self.anon_key}'

    # --- Records ---

    async def insert(self, table: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row and return the created record.

        :param table: Table name
        :param fields: Column values
        :return: The created record as stored
        :raises APIError: If the backend rejects the insert or returns no row
        """
        rows = await self.insert_many(table, [fields])
        if not rows:
            raise APIError(f'Insert into {table} returned no record')
        return rows[0]

    async def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert several rows in a single request and return the created records."""
        json_body = await self._request(
            'POST',
            f'{REST_PATH}/{table}',
            data=rows,
            headers={'prefer': 'return=representation'}
        )
        return json_body or []

    async def query(
        self,
        table: str,
        filters: Filters | None = None,
        order: str | None = None,
        select: str = '*',
        limit: int | None = None
    ) -> list[dict[str, Any]]:
        """
        Read rows from a table.

        :param table: Table name
        :param filters: Column filters (equality unless an (operator, value) pair is given)
        :param order: Ordering, e.g. 'created_at.desc'
        :param select: Column selection, may embed related tables
        :param limit: Maximum rows to return
        :return: List of records
        """
        params: dict[str, Any] = {'select': select, 'order': order, 'limit': limit}
        params.update(build_filter_params(filters))
        json_body = await self._request('GET', f'{REST_PATH}/{table}', query_params=params)
        return json_body or []

    async def update(self, table: str, filters: Filters, fields: dict[str, Any]) -> list[dict[str, Any]]:
        """Update rows matching filters and return the updated records."""
        if not filters:
            raise ValidationError("Refusing to update without a filter")
        json_body = await self._request(
            'PATCH',
            f'{REST_PATH}/{table}',
            data=fields,
            query_params=build_filter_params(filters),
            headers={'prefer': 'return=representation'}
        )
        return json_body or []

    async def delete(self, table: str, filters: Filters) -> None:
        """
        Delete rows matching filters.

        :raises ValidationError: If no filter is given (would delete every row)
        """
        if not filters:
            raise ValidationError("Refusing to delete without a filter")
        await self._request('DELETE', f'{REST_PATH}/{table}', query_params=build_filter_params(filters))

    # --- Storage ---

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str, upsert: bool = False) -> None:
        """
        Upload bytes to object storage.

        :param bucket: Bucket name
        :param path: Object path within the bucket
        :param data: Object contents
        :param content_type: MIME type stored with the object
        :param upsert: Overwrite an existing object (default False)
        """
        await self._request(
            'POST',
            f'{STORAGE_PATH}/object/{bucket}/{path}',
            content=data,
            headers={
                'content-type': content_type,
                'x-upsert': 'true' if upsert else 'false',
            },
            timeout=Timeout(timeout=60.0)
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f'{self.base_url}{STORAGE_PATH}/object/public/{bucket}/{path}'

    # --- Auth ---

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        return await self._request(
            'POST',
            f'{AUTH_PATH}/token',
            data={'email': email, 'password': password},
            query_params={'grant_type': 'password'}
        )

    async def refresh_session(self, refresh_token: str) -> dict[str, Any]:
        return await self._request(
            'POST',
            f'{AUTH_PATH}/token',
            data={'refresh_token': refresh_token},
            query_params={'grant_type': 'refresh_token'}
        )

    async def get_user(self) -> dict[str, Any]:
        """Return the user record for the current session token."""
        return await self._request('GET', f'{AUTH_PATH}/user')
