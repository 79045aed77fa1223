"""Async HTTP client for the Task Manager REST API."""

from typing import Any

import httpx

from ..core.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """
    Ошибка ответа API.

    code / message берутся из конверта {"error": {...}}, если он есть.
    """

    def __init__(self, status_code: int, message: str, code: str = "HTTP_ERROR"):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"{status_code} {code}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            return cls(response.status_code, response.text or response.reason_phrase)

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return cls(
                response.status_code,
                error.get("message", response.reason_phrase),
                error.get("code", "HTTP_ERROR"),
            )
        return cls(response.status_code, str(body))


class TaskManagerAPI:
    """
    Тонкая обёртка над REST API: один метод на endpoint, JSON на входе и выходе.

    Использование:
        async with TaskManagerAPI("http://localhost:8000") as api:
            projects = await api.list_projects()

    В тестах передаётся transport=httpx.ASGITransport(app=app).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api", transport=transport, timeout=timeout
        )

    async def __aenter__(self) -> "TaskManagerAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("API request failed", extra={"method": method, "path": path})
            raise ApiError(0, str(e), "NETWORK_ERROR") from e

        if response.is_error:
            raise ApiError.from_response(response)
        if not response.content:
            return None
        if response.headers.get("content-type", "").startswith("text/csv"):
            return response.text
        return response.json()

    # ----- projects -----

    async def list_projects(self) -> list[dict]:
        return await self._request("GET", "/projects")

    async def create_project(self, name: str | None = None, notes: str | None = None) -> dict:
        return await self._request("POST", "/projects", json={"name": name, "notes": notes})

    async def update_project(self, project_id: int, **changes: Any) -> dict:
        return await self._request("PUT", f"/projects/{project_id}", json=changes)

    async def delete_project(self, project_id: int) -> dict:
        return await self._request("DELETE", f"/projects/{project_id}")

    # ----- tasks -----

    async def list_tasks(self, **filters: Any) -> list[dict]:
        params = {key: value for key, value in filters.items() if value not in (None, "", [])}
        return await self._request("GET", "/tasks", params=params)

    async def create_task(self, **fields: Any) -> dict:
        return await self._request("POST", "/tasks", json=fields)

    async def update_task(self, task_id: int, **changes: Any) -> dict:
        return await self._request("PUT", f"/tasks/{task_id}", json=changes)

    async def toggle_done(self, task_id: int) -> dict:
        return await self._request("POST", f"/tasks/{task_id}/toggle-done")

    async def delete_task(self, task_id: int) -> dict:
        return await self._request("DELETE", f"/tasks/{task_id}")

    async def export_csv(self, context: str = "") -> str:
        return await self._request("GET", "/tasks/export.csv", params={"context": context})

    # ----- persons & settings -----

    async def create_person(self, name: str, color: str | None = None) -> dict:
        return await self._request("POST", "/persons", json={"name": name, "color": color})

    async def delete_person(self, person_id: int) -> dict:
        return await self._request("DELETE", f"/persons/{person_id}")

    async def get_settings(self) -> dict:
        return await self._request("GET", "/settings")

    async def save_types(self, types: list[dict]) -> list[dict]:
        return await self._request("PUT", "/settings/types", json={"types": types})

    async def save_statuses(self, statuses: list[dict]) -> list[dict]:
        return await self._request("PUT", "/settings/statuses", json={"statuses": statuses})

    async def save_persons(self, persons: list[dict]) -> list[dict]:
        return await self._request("PUT", "/settings/persons", json={"persons": persons})
