"""HTTP client for the remote task store."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

import httpx
from pydantic import ValidationError

from ..config import Settings
from .errors import TaskApiError
from .models import TaskListEnvelope, TaskRecord

logger = logging.getLogger(__name__)

_BAD_GATEWAY = 502


class TaskBackend(Protocol):
    """Operations the coordinators need from the task store."""

    async def fetch_all(self) -> list[TaskRecord]: ...

    async def create(self, record: TaskRecord) -> Optional[TaskRecord]: ...

    async def update(
        self, task_id: str, fields: Mapping[str, Any]
    ) -> Optional[TaskRecord]: ...

    async def delete(self, task_id: str) -> None: ...


class TaskApiClient:
    """Talk to the REST task resource (``/products``) over httpx.

    Every failure, whether network, HTTP status or undecodable body, surfaces
    as :class:`TaskApiError`.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def _base_url(self) -> str:
        return self._settings.resource_url

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.request_timeout, connect=10.0),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, url: str, *, json: Any = None
    ) -> Any:
        client = self._get_http_client()
        try:
            response = await client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            raise TaskApiError(_BAD_GATEWAY, f"{method} {url} failed: {exc}") from exc

        if response.status_code >= 400:
            detail = self._extract_error_detail(response)
            raise TaskApiError(response.status_code, detail)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TaskApiError(_BAD_GATEWAY, f"Invalid JSON from {url}: {exc}") from exc

    @staticmethod
    def _extract_error_detail(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict):
            return body.get("remark") or body.get("message") or body.get("error") or body
        return body

    @staticmethod
    def _record_from_body(body: Any) -> Optional[TaskRecord]:
        """Accept either a bare record or one wrapped in ``data``."""

        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]
        if not isinstance(body, dict):
            return None
        try:
            return TaskRecord.model_validate(body)
        except ValidationError:
            logger.warning("Ignoring unparseable task echo: %s", body)
            return None

    async def fetch_all(self) -> list[TaskRecord]:
        body = await self._request("GET", self._base_url)
        try:
            envelope = TaskListEnvelope.model_validate(body or {})
        except ValidationError as exc:
            raise TaskApiError(_BAD_GATEWAY, f"Invalid task list payload: {exc}") from exc

        records: list[TaskRecord] = []
        for item in envelope.data:
            try:
                records.append(TaskRecord.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping invalid task row: %s (%s)", item, exc.errors()[0]["msg"])
        skipped = len(envelope.data) - len(records)
        logger.info("Fetched %s task(s), skipped %s", len(records), skipped)
        return records

    async def create(self, record: TaskRecord) -> Optional[TaskRecord]:
        body = await self._request("POST", self._base_url, json=record.to_payload())
        return self._record_from_body(body)

    async def update(
        self, task_id: str, fields: Mapping[str, Any]
    ) -> Optional[TaskRecord]:
        body = await self._request(
            "PUT", f"{self._base_url}/{task_id}", json=dict(fields)
        )
        return self._record_from_body(body)

    async def delete(self, task_id: str) -> None:
        await self._request("DELETE", f"{self._base_url}/{task_id}")


__all__ = ["TaskApiClient", "TaskBackend"]
