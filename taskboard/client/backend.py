"""
Taskboard Backend Client — Outbound HTTP calls to the task backend.

Endpoints (relative to {base_url}{api_prefix}):
    GET    GetTasks                                → list of tasks
    POST   InsertTask                              → create task
    POST   UpdateTask?id=&organizationId=          → update task
    DELETE DeleteTask?id=&organizationId=          → delete task
    GET    GetFormSettings                         → list of field descriptors
    POST   SaveFormSettings                        → persist field descriptors

Uses one httpx.AsyncClient (connection pooled, timeout from config).
Every call is logged; transport failures and non-2xx statuses both raise
TaskboardIntegrationError. No retries.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from taskboard.engine.config import BackendConfig
from taskboard.engine.errors import TaskboardIntegrationError
from taskboard.engine.logging import log, log_backend_call
from taskboard.records.field import FieldDescriptor, parse_fields
from taskboard.records.task import Task

logger = logging.getLogger("taskboard.client.backend")


class BackendClient:
    """
    Async client for the six backend endpoints.

    Args:
        config: Backend section of the resolved TaskboardConfig.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
        log_payload: Include request bodies in the structured backend log.
    """

    def __init__(
        self,
        config: BackendConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log_payload: bool = False,
    ):
        self._config = config
        self._transport = transport
        self._log_payload = log_payload
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> BackendConfig:
        return self._config

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(self._config.timeout_seconds, connect=10.0),
                headers={"Content-Type": "application/json"},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the pooled httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # -----------------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------------

    async def get_tasks(self) -> List[Task]:
        body = await self._request("GET", "GetTasks")
        if not isinstance(body, list):
            raise TaskboardIntegrationError(
                "GetTasks did not return a list",
                endpoint="GetTasks",
                method="GET",
            )
        return [dict(item) for item in body]

    async def insert_task(self, payload: Mapping[str, Any]) -> None:
        await self._request("POST", "InsertTask", json=dict(payload))

    async def update_task(
        self,
        task_id: str,
        organization_id: str,
        payload: Mapping[str, Any],
    ) -> None:
        await self._request(
            "POST",
            "UpdateTask",
            params={"id": task_id, "organizationId": organization_id},
            json=dict(payload),
        )

    async def delete_task(self, task_id: str, organization_id: str) -> None:
        await self._request(
            "DELETE",
            "DeleteTask",
            params={"id": task_id, "organizationId": organization_id},
        )

    # -----------------------------------------------------------------------
    # Form settings
    # -----------------------------------------------------------------------

    async def get_form_settings(self) -> List[FieldDescriptor]:
        body = await self._request("GET", "GetFormSettings")
        # Settings written by the old {key, fields} producer are unwrapped
        if isinstance(body, dict) and isinstance(body.get("fields"), list):
            body = body["fields"]
        if not isinstance(body, list):
            raise TaskboardIntegrationError(
                "GetFormSettings did not return a list",
                endpoint="GetFormSettings",
                method="GET",
            )
        try:
            return parse_fields(body)
        except ValueError as e:
            raise TaskboardIntegrationError(
                f"GetFormSettings returned malformed descriptors: {e}",
                endpoint="GetFormSettings",
                method="GET",
            ) from e

    async def save_form_settings(self, fields: Sequence[FieldDescriptor]) -> None:
        """POST the full ordered descriptor list as a bare JSON array."""
        await self._request(
            "POST",
            "SaveFormSettings",
            json=[f.to_payload() for f in fields],
        )

    # -----------------------------------------------------------------------
    # HTTP
    # -----------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        url = self._config.endpoint_url(endpoint)
        start_time = time.monotonic()

        try:
            response = await self._get_client().request(
                method, url, params=params, json=json
            )
        except httpx.HTTPError as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            self._log_call(method, url, None, duration_ms, json, error=str(e))
            raise TaskboardIntegrationError(
                f"{method} {endpoint} failed: {e}",
                endpoint=endpoint,
                method=method,
            ) from e

        duration_ms = (time.monotonic() - start_time) * 1000
        status = response.status_code

        if not response.is_success:
            self._log_call(method, url, status, duration_ms, json, error=f"HTTP {status}")
            raise TaskboardIntegrationError(
                f"{method} {endpoint} returned HTTP {status}",
                endpoint=endpoint,
                method=method,
                status_code=status,
                response_body=response.text[:500],
            )

        self._log_call(method, url, status, duration_ms, json)

        if method == "GET":
            try:
                return response.json()
            except ValueError as e:
                raise TaskboardIntegrationError(
                    f"{method} {endpoint} returned a non-JSON body",
                    endpoint=endpoint,
                    method=method,
                    status_code=status,
                ) from e
        return None

    def _log_call(
        self,
        method: str,
        url: str,
        status: Optional[int],
        duration_ms: float,
        body: Optional[Any],
        error: Optional[str] = None,
    ) -> None:
        if error:
            logger.warning(f"{method} {url} failed: {error}")
        else:
            logger.debug(f"{method} {url} → {status} ({duration_ms:.1f}ms)")
        log(log_backend_call(
            method=method,
            url=url,
            status_code=status,
            duration_ms=duration_ms,
            success=error is None,
            error=error,
            log_payload=self._log_payload,
            request_body=body,
        ))
