"""httpx implementation of the live-coverage API."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from politiquensemble_live.data import (
    AnswerInput,
    CoverageInput,
    CoveragePatch,
    EditorAssignment,
    EditorInput,
    LiveCoverage,
    LiveUpdate,
    Question,
    QuestionInput,
    QuestionStatus,
    UpdateInput,
)
from politiquensemble_live.errors import APIError, NotFoundError, TransportError

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "connect.sid"


class HttpLiveCoverageAPI:
    """Talk to the live-coverage endpoints over HTTP.

    Admin endpoints need an authenticated session; pass the session cookie the
    site issued at login (or set ``POLITIQUENSEMBLE_SESSION``), or a bearer
    token when the deployment sits behind a token proxy.

    Args:
        base_url: Site root, e.g. ``https://politiquensemble.fr``.
        timeout: Per-request timeout in seconds.
        session_cookie: Value of the ``connect.sid`` session cookie.
        token: Bearer token sent in the ``Authorization`` header.
        transport: Custom httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        session_cookie: str | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        session_cookie = session_cookie or os.environ.get("POLITIQUENSEMBLE_SESSION")
        cookies = {SESSION_COOKIE_NAME: session_cookie} if session_cookie else None
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            cookies=cookies,
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpLiveCoverageAPI:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Send one request and decode the JSON body.

        Raises:
            TransportError: No response was received.
            NotFoundError: The server answered 404.
            APIError: Any other non-2xx answer.
        """
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportError(f"{method} {path}: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning("%s %s -> %d %s", method, path, response.status_code, message)
            if response.status_code == 404:
                raise NotFoundError(response.status_code, message)
            raise APIError(response.status_code, message)

        if not response.content:
            return None
        return response.json()

    # Public endpoints

    async def list_active_coverages(self) -> list[LiveCoverage]:
        data = await self._request("GET", "/api/live-coverages")
        return [LiveCoverage.from_api(item) for item in data or []]

    async def get_coverage_by_slug(self, slug: str) -> LiveCoverage:
        return LiveCoverage.from_api(await self._request("GET", f"/api/live-coverages/{slug}"))

    async def get_updates(self, coverage_id: int) -> list[LiveUpdate]:
        data = await self._request("GET", f"/api/live-coverages/{coverage_id}/updates")
        return [LiveUpdate.from_api(item) for item in data or []]

    async def get_editors(self, coverage_id: int) -> list[EditorAssignment]:
        data = await self._request("GET", f"/api/live-coverages/{coverage_id}/editors")
        return [EditorAssignment.from_api(item) for item in data or []]

    async def submit_question(self, coverage_id: int, question: QuestionInput) -> Question:
        data = await self._request(
            "POST",
            f"/api/live-coverages/{coverage_id}/questions",
            json=question.to_payload(),
        )
        return Question.from_api(data)

    # Admin endpoints

    async def list_coverages(self) -> list[LiveCoverage]:
        data = await self._request("GET", "/api/admin/live-coverages")
        return [LiveCoverage.from_api(item) for item in data or []]

    async def get_coverage(self, coverage_id: int) -> LiveCoverage:
        data = await self._request("GET", f"/api/admin/live-coverages/{coverage_id}")
        return LiveCoverage.from_api(data)

    async def create_coverage(self, coverage: CoverageInput) -> LiveCoverage:
        data = await self._request("POST", "/api/admin/live-coverages", json=coverage.to_payload())
        return LiveCoverage.from_api(data)

    async def update_coverage(self, coverage_id: int, patch: CoveragePatch) -> LiveCoverage:
        data = await self._request(
            "PUT", f"/api/admin/live-coverages/{coverage_id}", json=patch.to_payload()
        )
        return LiveCoverage.from_api(data)

    async def delete_coverage(self, coverage_id: int) -> None:
        await self._request("DELETE", f"/api/admin/live-coverages/{coverage_id}")

    async def add_editor(self, coverage_id: int, editor: EditorInput) -> EditorAssignment:
        data = await self._request(
            "POST",
            f"/api/admin/live-coverages/{coverage_id}/editors",
            json=editor.to_payload(),
        )
        return EditorAssignment.from_api(data)

    async def remove_editor(self, coverage_id: int, editor_id: int) -> None:
        await self._request("DELETE", f"/api/admin/live-coverages/{coverage_id}/editors/{editor_id}")

    async def create_update(self, coverage_id: int, update: UpdateInput) -> LiveUpdate:
        data = await self._request(
            "POST",
            f"/api/admin/live-coverages/{coverage_id}/updates",
            json=update.to_payload(),
        )
        return LiveUpdate.from_api(data)

    async def delete_update(self, update_id: int) -> None:
        await self._request("DELETE", f"/api/admin/live-coverages/updates/{update_id}")

    async def get_questions(
        self,
        coverage_id: int,
        *,
        status: QuestionStatus | None = None,
    ) -> list[Question]:
        params = {"status": str(status)} if status else None
        data = await self._request(
            "GET", f"/api/admin/live-coverages/{coverage_id}/questions", params=params
        )
        return [Question.from_api(item) for item in data or []]

    async def set_question_status(self, question_id: int, status: QuestionStatus) -> Question:
        data = await self._request(
            "PUT",
            f"/api/admin/live-coverages/questions/{question_id}/status",
            json={"status": str(status)},
        )
        return Question.from_api(data)

    async def answer_question(self, question_id: int, answer: AnswerInput) -> LiveUpdate:
        data = await self._request(
            "POST",
            f"/api/admin/live-coverages/questions/{question_id}/answer",
            json=answer.to_payload(),
        )
        return LiveUpdate.from_api(data)


def _error_message(response: httpx.Response) -> str:
    """Pull the server's ``message`` field, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
