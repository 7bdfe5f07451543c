"""Luarmor API client."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from ..errors import ApiError, AuthError, FileError, GatewayTimeoutError
from .models import KeyDetails
from .ratelimit import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.luarmor.net/v3"


def check_response(response: httpx.Response, ignore_timeout: bool = False) -> httpx.Response:
    """Raise for the statuses that always mean a misconfigured run.

    400 and 403 are authentication problems whatever the caller asked for.
    504 is an error unless ``ignore_timeout`` is set, in which case the
    response is handed back so the caller can inspect it. Every other
    status is returned unchanged.
    """
    status = response.status_code
    if status == 400:
        raise AuthError("400, is your API key valid?", 400, api_message(response))
    if status == 403:
        raise AuthError(
            "403, is your IP whitelisted and is your API key correct?",
            403,
            api_message(response),
        )
    if status == 504 and not ignore_timeout:
        raise GatewayTimeoutError(response=api_message(response))
    return response


def api_message(response: httpx.Response) -> str | None:
    """Extract the ``message`` field Luarmor puts in error bodies."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or None


def read_script(file_path: str | Path) -> str:
    """Read the script source that will be uploaded."""
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"could not read script file {file_path}: {e}") from e


class LuarmorClient:
    """Client for the parts of the Luarmor v3 API used to update scripts."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Luarmor client.

        Args:
            base_url: API root, including the version segment
            timeout: Request timeout in seconds
            rate_limiter: Limiter every request is sent through
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RateLimiter()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> LuarmorClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _send(
        self,
        method: str,
        path: str,
        headers: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        ignore_timeout: bool = False,
        timeout: httpx.Timeout | None = None,
    ) -> httpx.Response:
        """Send a request through the rate limiter and interpret its status.

        With ``ignore_timeout`` a read timeout (the body was sent, no answer
        came back) is reported like a gateway timeout: a 504 response is
        returned instead of raising.
        """
        extra: dict[str, Any] = {"timeout": timeout} if timeout is not None else {}
        request = self.client.build_request(method, path, headers=headers, json=json, **extra)
        try:
            response = await self.rate_limiter.send(self.client, request)
        except httpx.ReadTimeout as e:
            if not ignore_timeout:
                raise ApiError(f"{method} request failed: {e}") from e
            logger.warning("%s request timed out on the client side: %s", method, e)
            response = httpx.Response(504, request=request, text=str(e) or "timed out")
        except httpx.HTTPError as e:
            raise ApiError(f"{method} request failed: {e}") from e

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return check_response(response, ignore_timeout=ignore_timeout)

    async def get_key_details(self, api_key: str) -> KeyDetails:
        """Fetch the projects and scripts visible to *api_key*."""
        response = await self._send("GET", f"/keys/{api_key}/details")
        if response.status_code >= 400:
            raise ApiError(
                f"could not fetch key details: HTTP {response.status_code}",
                response.status_code,
                api_message(response),
            )
        try:
            return KeyDetails.model_validate(response.json())
        except ValueError as e:
            raise ApiError(f"unexpected key details response: {e}", response.status_code) from e

    async def update_script(
        self,
        script_id: str,
        project_id: str,
        file_path: str | Path,
        api_key: str,
    ) -> httpx.Response:
        """
        Upload the contents of *file_path* as the new body of a script.

        A 504 is returned rather than raised: the gateway gives up on large
        uploads that the API still goes on to apply. The response is read
        without a time limit, and a read timeout also yields a 504.

        Returns:
            The raw upload response
        """
        script = read_script(file_path)
        logger.info(
            "Uploading %s (%d characters) to project %s script %s",
            file_path,
            len(script),
            project_id,
            script_id,
        )
        return await self._send(
            "PUT",
            f"/projects/{project_id}/scripts/{script_id}",
            headers={"Authorization": api_key, "Content-Type": "application/json"},
            json={"script": script},
            ignore_timeout=True,
            # No read limit, slow uploads end in a gateway 504
            timeout=httpx.Timeout(self.timeout, read=None),
        )
