import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The backend could not be reached or answered with an error envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RobotApiClient:
    """Thin async wrapper over the control panel REST API."""

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self) -> "RobotApiClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            raise ApiError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            raise ApiError(f"{method} {path} returned invalid JSON", response.status_code)

        if response.status_code >= 400 or not body.get("success", False):
            raise ApiError(body.get("message") or f"HTTP {response.status_code}", response.status_code)
        return body

    async def _get_data(self, path: str) -> Any:
        return (await self._request("GET", path))["data"]

    async def health(self) -> dict:
        return await self._request("GET", "/health")

    async def get_robot_status(self) -> dict:
        return await self._get_data("/robot/status")

    async def get_sensors(self) -> dict:
        return await self._get_data("/sensors")

    async def get_tasks(self) -> list:
        return await self._get_data("/tasks")

    async def get_statistics(self) -> dict:
        return await self._get_data("/statistics")

    async def send_command(self, command: str) -> dict:
        return await self._request("POST", "/robot/control", {"command": command})

    async def send_action(self, action: str) -> dict:
        return await self._request("POST", "/robot/control", {"action": action})
