"""
Todo Labels Client — HTTP API Binding
======================================

What:  Thin async wrapper over the backend's /todos and /labels endpoints.
How:   One httpx.AsyncClient per TodoApiClient; responses are parsed into the
       same Pydantic schemas the backend serializes with.
Who:   Used by TodoStore. Tests inject an AsyncClient bound to the ASGI app.

Errors:
    Any non-2xx response raises ApiError carrying the backend's error code,
    message and request id. Transport failures (refused connection, timeout)
    raise ApiError with status_code 0 and error "network_error". Nothing is
    retried.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.config import settings
from app.schemas.todo import LabelResponse, TodoResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call, as reported to the user."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        request_id: Optional[str] = None,
    ):
        self.status_code = status_code
        self.error = error
        self.message = message
        self.request_id = request_id
        super().__init__(f"{status_code} {error}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("message")
        if message is None and "detail" in body:
            # FastAPI's own 422 body: {"detail": [...]}
            message = str(body["detail"])
        return cls(
            status_code=response.status_code,
            error=body.get("error", "http_error"),
            message=message or response.reason_phrase or "Request failed",
            request_id=body.get("request_id") or response.headers.get("X-Request-ID"),
        )


class TodoApiClient:
    """
    Async client for the Todo Labels API.

    Usage:
        async with TodoApiClient("http://localhost:3000") as api:
            todo = await api.create_todo("buy milk")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TodoApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ── Todos ─────────────────────────────────────────────────────────────

    async def list_todos(self, label_id: Optional[int] = None) -> List[TodoResponse]:
        params = {"label_id": label_id} if label_id is not None else None
        response = await self._request("GET", "/todos", params=params)
        return [TodoResponse.model_validate(item) for item in response.json()]

    async def get_todo(self, todo_id: int) -> TodoResponse:
        response = await self._request("GET", f"/todos/{todo_id}")
        return TodoResponse.model_validate(response.json())

    async def create_todo(self, text: str, labels: Sequence[int] = ()) -> TodoResponse:
        response = await self._request(
            "POST", "/todos", json={"text": text, "labels": list(labels)}
        )
        return TodoResponse.model_validate(response.json())

    async def update_todo(
        self,
        todo_id: int,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
        labels: Optional[Sequence[int]] = None,
    ) -> TodoResponse:
        """PATCH only the fields that are given."""
        payload: Dict[str, Any] = {}
        if text is not None:
            payload["text"] = text
        if completed is not None:
            payload["completed"] = completed
        if labels is not None:
            payload["labels"] = list(labels)
        response = await self._request("PATCH", f"/todos/{todo_id}", json=payload)
        return TodoResponse.model_validate(response.json())

    async def delete_todo(self, todo_id: int) -> None:
        await self._request("DELETE", f"/todos/{todo_id}")

    # ── Labels ────────────────────────────────────────────────────────────

    async def list_labels(self) -> List[LabelResponse]:
        response = await self._request("GET", "/labels")
        return [LabelResponse.model_validate(item) for item in response.json()]

    async def create_label(self, name: str) -> LabelResponse:
        response = await self._request("POST", "/labels", json={"name": name})
        return LabelResponse.model_validate(response.json())

    async def delete_label(self, label_id: int) -> None:
        await self._request("DELETE", f"/labels/{label_id}")

    # ── Transport ─────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, str(e))
            raise ApiError(
                status_code=0,
                error="network_error",
                message="Could not reach the server. Check your connection and try again.",
            ) from e

        if response.is_error:
            error = ApiError.from_response(response)
            logger.warning("%s %s → %d %s", method, path, response.status_code, error.error)
            raise error
        return response
