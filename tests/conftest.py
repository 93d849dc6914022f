"""Shared fixtures: an in-memory fake of the site's API and a fake clock."""

from __future__ import annotations

import asyncio
import itertools
import json
import re
from collections.abc import AsyncIterator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from politiquensemble_live.api.http import HttpLiveCoverageAPI
from politiquensemble_live.cache import QueryCache

BASE_URL = "https://test.politiquensemble.local"
EPOCH = datetime(2026, 5, 7, 20, 0, tzinfo=UTC)


def iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


class FakeBackend:
    """Minimal in-memory version of the live-coverage REST endpoints.

    ``fail(method, path, status, message)`` makes the next matching request
    fail once with a JSON error body.
    """

    def __init__(self) -> None:
        self.coverages: dict[int, dict[str, Any]] = {}
        self.updates: dict[int, dict[str, Any]] = {}
        self.editors: dict[int, dict[str, Any]] = {}
        self.questions: dict[int, dict[str, Any]] = {}
        self.requests: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], tuple[int, str]] = {}
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)
        routes = [
            ("GET", r"/api/live-coverages", self._list_active),
            ("GET", r"/api/live-coverages/(\d+)/updates", self._get_updates),
            ("GET", r"/api/live-coverages/(\d+)/editors", self._get_editors),
            ("POST", r"/api/live-coverages/(\d+)/questions", self._submit_question),
            ("GET", r"/api/live-coverages/([^/]+)", self._get_by_slug),
            ("GET", r"/api/admin/live-coverages", self._list_all),
            ("POST", r"/api/admin/live-coverages", self._create_coverage),
            ("GET", r"/api/admin/live-coverages/(\d+)", self._get_coverage),
            ("PUT", r"/api/admin/live-coverages/(\d+)", self._update_coverage),
            ("DELETE", r"/api/admin/live-coverages/(\d+)", self._delete_coverage),
            ("POST", r"/api/admin/live-coverages/(\d+)/editors", self._add_editor),
            ("DELETE", r"/api/admin/live-coverages/(\d+)/editors/(\d+)", self._remove_editor),
            ("POST", r"/api/admin/live-coverages/(\d+)/updates", self._create_update),
            ("DELETE", r"/api/admin/live-coverages/updates/(\d+)", self._delete_update),
            ("GET", r"/api/admin/live-coverages/(\d+)/questions", self._get_questions),
            ("PUT", r"/api/admin/live-coverages/questions/(\d+)/status", self._set_status),
            ("POST", r"/api/admin/live-coverages/questions/(\d+)/answer", self._answer),
        ]
        self._routes: list[tuple[str, re.Pattern[str], Callable[..., httpx.Response]]] = [
            (m, re.compile(p), h) for m, p, h in routes
        ]

    # -- seeding helpers --

    def now(self) -> str:
        return iso(EPOCH + timedelta(seconds=next(self._ticks)))

    def add_coverage(self, coverage_id: int | None = None, **fields: Any) -> dict[str, Any]:
        cid = coverage_id if coverage_id is not None else next(self._ids)
        row = {
            "id": cid,
            "title": "Soirée électorale",
            "slug": f"soiree-electorale-{cid}",
            "subject": "Élections législatives",
            "context": "",
            "imageUrl": None,
            "active": True,
            "createdAt": self.now(),
            "updatedAt": self.now(),
        }
        row.update(fields)
        self.coverages[cid] = row
        return row

    def add_update(self, coverage_id: int, content: str, **fields: Any) -> dict[str, Any]:
        uid = next(self._ids)
        row = {
            "id": uid,
            "coverageId": coverage_id,
            "content": content,
            "timestamp": self.now(),
            "important": False,
            "isAnswer": False,
            "questionId": None,
        }
        row.update(fields)
        self.updates[uid] = row
        return row

    def add_question(self, coverage_id: int, username: str, content: str, **fields: Any) -> dict[str, Any]:
        qid = next(self._ids)
        row = {
            "id": qid,
            "coverageId": coverage_id,
            "username": username,
            "content": content,
            "status": "pending",
            "answered": False,
            "timestamp": self.now(),
        }
        row.update(fields)
        self.questions[qid] = row
        return row

    def fail(self, method: str, path: str, status: int = 500, message: str = "Erreur serveur") -> None:
        self._failures[(method, path)] = (status, message)

    def count(self, method: str, path: str) -> int:
        return self.requests.count((method, path))

    # -- transport --

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.requests.append((method, path))
        if (method, path) in self._failures:
            status, message = self._failures.pop((method, path))
            return httpx.Response(status, json={"message": message})
        body = json.loads(request.content) if request.content else {}
        for route_method, pattern, handler in self._routes:
            match = pattern.fullmatch(path)
            if route_method == method and match:
                return handler(request, body, *match.groups())
        return httpx.Response(404, json={"message": "Not found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # -- routes --

    def _not_found(self, what: str) -> httpx.Response:
        return httpx.Response(404, json={"message": f"{what} not found"})

    def _list_active(self, request, body):
        return httpx.Response(200, json=[c for c in self.coverages.values() if c["active"]])

    def _list_all(self, request, body):
        return httpx.Response(200, json=list(self.coverages.values()))

    def _get_by_slug(self, request, body, slug):
        for c in self.coverages.values():
            if c["slug"] == slug:
                return httpx.Response(200, json=c)
        return self._not_found("Live coverage")

    def _get_coverage(self, request, body, cid):
        c = self.coverages.get(int(cid))
        return httpx.Response(200, json=c) if c else self._not_found("Live coverage")

    def _create_coverage(self, request, body):
        return httpx.Response(201, json=self.add_coverage(**body))

    def _update_coverage(self, request, body, cid):
        c = self.coverages.get(int(cid))
        if not c:
            return self._not_found("Live coverage")
        c.update(body)
        return httpx.Response(200, json=c)

    def _delete_coverage(self, request, body, cid):
        cid = int(cid)
        if self.coverages.pop(cid, None) is None:
            return self._not_found("Live coverage")
        for table in (self.updates, self.editors, self.questions):
            for key in [k for k, v in table.items() if v["coverageId"] == cid]:
                del table[key]
        return httpx.Response(200, json={"success": True})

    def _get_updates(self, request, body, cid):
        rows = [u for u in self.updates.values() if u["coverageId"] == int(cid)]
        return httpx.Response(200, json=rows)

    def _create_update(self, request, body, cid):
        content = body.pop("content")
        return httpx.Response(201, json=self.add_update(int(cid), content, **body))

    def _delete_update(self, request, body, uid):
        if self.updates.pop(int(uid), None) is None:
            return self._not_found("Update")
        return httpx.Response(200, json={"success": True})

    def _get_editors(self, request, body, cid):
        rows = [e for e in self.editors.values() if e["coverageId"] == int(cid)]
        return httpx.Response(200, json=rows)

    def _add_editor(self, request, body, cid):
        eid = next(self._ids)
        row = {
            "id": eid,
            "coverageId": int(cid),
            "editorId": body["editorId"],
            "role": body.get("role"),
            "editor": {"displayName": f"User {body['editorId']}", "title": None, "avatarUrl": None},
        }
        self.editors[eid] = row
        return httpx.Response(201, json=row)

    def _remove_editor(self, request, body, cid, editor_id):
        for key, row in list(self.editors.items()):
            if row["coverageId"] == int(cid) and row["editorId"] == int(editor_id):
                del self.editors[key]
                return httpx.Response(200, json={"success": True})
        return self._not_found("Editor")

    def _get_questions(self, request, body, cid):
        rows = [q for q in self.questions.values() if q["coverageId"] == int(cid)]
        status = request.url.params.get("status")
        if status:
            rows = [q for q in rows if q["status"] == status]
        return httpx.Response(200, json=rows)

    def _submit_question(self, request, body, cid):
        return httpx.Response(201, json=self.add_question(int(cid), body["username"], body["content"]))

    def _set_status(self, request, body, qid):
        q = self.questions.get(int(qid))
        if not q:
            return self._not_found("Question")
        q["status"] = body["status"]
        return httpx.Response(200, json=q)

    def _answer(self, request, body, qid):
        q = self.questions.get(int(qid))
        if not q:
            return self._not_found("Question")
        update = self.add_update(
            body["coverageId"],
            body["content"],
            important=body.get("important", False),
            isAnswer=True,
            questionId=q["id"],
        )
        q["status"] = "approved"
        q["answered"] = True
        return httpx.Response(201, json=update)


class FakeClock:
    """Virtual time for ``RepeatingTask``: sleeping coroutines wake on ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._sleepers: list[tuple[float, asyncio.Future[None]]] = []

    async def sleep(self, seconds: float) -> None:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.now + seconds, future))
        await future

    async def advance(self, seconds: float) -> None:
        """Move time forward, waking every sleeper whose deadline passes, in order."""
        target = self.now + seconds
        await _settle()
        while True:
            due = [s for s in self._sleepers if s[0] <= target]
            if not due:
                break
            deadline, future = min(due, key=lambda s: s[0])
            self._sleepers.remove((deadline, future))
            self.now = deadline
            if not future.done():
                future.set_result(None)
            await _settle()
        self.now = target

    @property
    def sleeping(self) -> int:
        return sum(1 for _, f in self._sleepers if not f.done())


async def _settle() -> None:
    for _ in range(20):
        await asyncio.sleep(0)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def api(backend: FakeBackend) -> AsyncIterator[HttpLiveCoverageAPI]:
    client = HttpLiveCoverageAPI(BASE_URL, transport=backend.transport())
    yield client
    await client.aclose()


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
