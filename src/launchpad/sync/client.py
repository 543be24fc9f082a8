"""
Launcher Client - async HTTP client for the registry API.

Every failure, whether an HTTP error status or a transport problem,
surfaces as RequestFailedError so callers handle one exception type.
"""

import logging
from typing import Any

import httpx

from launchpad.core.exceptions import LaunchpadError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:3105"
DEFAULT_TIMEOUT_SECONDS = 10.0


class RequestFailedError(LaunchpadError):
    """A registry API call did not succeed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        method: str | None = None,
        path: str | None = None,
    ):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if method and path:
            details["request"] = f"{method} {path}"
        super().__init__(message, details=details)
        self.status_code = status_code
        self.error_type = error_type

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class LauncherClient:
    """
    Thin async wrapper over the HTTP surface.

    Usage:
        async with LauncherClient("http://launchpad:3105", token=token) as client:
            apps = await client.list_apps()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"accept": "application/json"}
        if token:
            headers["authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise RequestFailedError(
                f"Network error: {e.__class__.__name__}", method=method, path=path
            ) from e

        if response.is_error:
            message = f"HTTP {response.status_code}"
            error_type = None
            try:
                error = response.json().get("error", {})
                message = error.get("message") or message
                error_type = error.get("type")
            except (ValueError, AttributeError):
                pass
            raise RequestFailedError(
                message,
                status_code=response.status_code,
                error_type=error_type,
                method=method,
                path=path,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RequestFailedError(
                "Response was not JSON", status_code=response.status_code, method=method, path=path
            ) from e

    async def list_apps(self) -> list[dict[str, Any]]:
        """Fetch the full ordered snapshot."""
        data = await self._request("GET", "/api/apps")
        if not isinstance(data, list):
            raise RequestFailedError("Snapshot was not a list", method="GET", path="/api/apps")
        return data

    async def create_app(self, record: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/api/apps", json=record)

    async def update_app(self, app_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/api/apps/{app_id}", json=fields)

    async def delete_app(self, app_id: str) -> None:
        await self._request("DELETE", f"/api/apps/{app_id}")

    async def reorder(self, ordered_ids: list[str]) -> None:
        await self._request("PUT", "/api/apps/reorder", json={"order": ordered_ids})

    async def get_settings(self) -> dict[str, str]:
        return await self._request("GET", "/api/settings")

    async def put_settings(self, values: dict[str, Any]) -> dict[str, str]:
        return await self._request("PUT", "/api/settings", json=values)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "LauncherClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
