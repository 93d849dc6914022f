"""Tests for the httpx API client against an in-memory backend."""

import httpx
import pytest
from conftest import BASE_URL, FakeBackend

from politiquensemble_live.api import HttpLiveCoverageAPI
from politiquensemble_live.data import (
    AnswerInput,
    CoverageInput,
    CoveragePatch,
    EditorInput,
    QuestionInput,
    QuestionStatus,
    UpdateInput,
)
from politiquensemble_live.errors import APIError, NotFoundError, TransportError


class TestPublicEndpoints:
    async def test_list_active(self, backend: FakeBackend, api: HttpLiveCoverageAPI) -> None:
        backend.add_coverage(1)
        backend.add_coverage(2, active=False)

        coverages = await api.list_active_coverages()

        assert [c.id for c in coverages] == [1]
        assert backend.requests == [("GET", "/api/live-coverages")]

    async def test_get_by_slug(self, backend: FakeBackend, api: HttpLiveCoverageAPI) -> None:
        backend.add_coverage(7, slug="second-tour")
        coverage = await api.get_coverage_by_slug("second-tour")
        assert coverage.id == 7

    async def test_get_updates(self, backend: FakeBackend, api: HttpLiveCoverageAPI) -> None:
        backend.add_coverage(7)
        backend.add_update(7, "Ouverture des bureaux", important=True)
        backend.add_update(8, "Autre direct")

        updates = await api.get_updates(7)

        assert [u.content for u in updates] == ["Ouverture des bureaux"]
        assert updates[0].important

    async def test_submit_question(self, backend: FakeBackend, api: HttpLiveCoverageAPI) -> None:
        backend.add_coverage(7)
        question = await api.submit_question(7, QuestionInput(username="ana", content="Quand ?"))
        assert question.status is QuestionStatus.PENDING
        assert backend.count("POST", "/api/live-coverages/7/questions") == 1


class TestAdminEndpoints:
    async def test_create_coverage_sends_camel_case(
        self, backend: FakeBackend, api: HttpLiveCoverageAPI
    ) -> None:
        created = await api.create_coverage(
            CoverageInput(title="Soirée électorale", subject="Législatives", image_url="https://i/x")
        )
        assert created.slug == "soiree-electorale"
        assert backend.coverages[created.id]["imageUrl"] == "https://i/x"

    async def test_update_coverage_partial(
        self, backend: FakeBackend, api: HttpLiveCoverageAPI
    ) -> None:
        backend.add_coverage(7, title="Soirée électorale")
        updated = await api.update_coverage(7, CoveragePatch(active=False))
        assert updated.active is False
        assert updated.title == "Soirée électorale"

    async def test_delete_coverage(self, backend: FakeBackend, api: HttpLiveCoverageAPI) -> None:
        backend.add_coverage(7)
        await api.delete_coverage(7)
        assert 7 not in backend.coverages

    async def test_editors(self, backend: FakeBackend, api: HttpLiveCoverageAPI) -> None:
        backend.add_coverage(7)
        editor = await api.add_editor(7, EditorInput(editor_id=12, role="Fact-checker"))
        assert editor.editor_id == 12
        assert editor.editor is not None

        assert [e.editor_id for e in await api.get_editors(7)] == [12]
        await api.remove_editor(7, 12)
        assert await api.get_editors(7) == []

    async def test_create_and_delete_update(
        self, backend: FakeBackend, api: HttpLiveCoverageAPI
    ) -> None:
        backend.add_coverage(7)
        update = await api.create_update(7, UpdateInput(content="Participation à 17h : 38 %"))
        assert update.coverage_id == 7
        await api.delete_update(update.id)
        assert backend.requests[-1] == ("DELETE", f"/api/admin/live-coverages/updates/{update.id}")

    async def test_questions_status_filter(
        self, backend: FakeBackend, api: HttpLiveCoverageAPI
    ) -> None:
        backend.add_coverage(7)
        backend.add_question(7, "ana", "Quand ?")
        backend.add_question(7, "bob", "Où ?", status="rejected")

        pending = await api.get_questions(7, status=QuestionStatus.PENDING)

        assert [q.username for q in pending] == ["ana"]
        assert len(await api.get_questions(7)) == 2

    async def test_set_status_and_answer(
        self, backend: FakeBackend, api: HttpLiveCoverageAPI
    ) -> None:
        backend.add_coverage(7)
        qid = backend.add_question(7, "ana", "Quand ?")["id"]

        approved = await api.set_question_status(qid, QuestionStatus.APPROVED)
        assert approved.status is QuestionStatus.APPROVED

        update = await api.answer_question(
            qid, AnswerInput(content="Demain 10h", important=True, coverage_id=7)
        )
        assert update.is_answer
        assert update.question_id == qid
        assert backend.questions[qid]["answered"] is True


class TestErrors:
    async def test_not_found(self, api: HttpLiveCoverageAPI) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await api.get_coverage_by_slug("inconnu")
        assert exc_info.value.status_code == 404

    async def test_server_message_surfaced(
        self, backend: FakeBackend, api: HttpLiveCoverageAPI
    ) -> None:
        backend.add_coverage(7)
        backend.fail("GET", "/api/live-coverages/7/updates", 500, "Base de données indisponible")

        with pytest.raises(APIError) as exc_info:
            await api.get_updates(7)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Base de données indisponible"
        assert not isinstance(exc_info.value, NotFoundError)

    async def test_reason_phrase_without_json(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="<html>"))
        async with HttpLiveCoverageAPI(BASE_URL, transport=transport) as api:
            with pytest.raises(APIError) as exc_info:
                await api.list_active_coverages()
        assert exc_info.value.message == "Bad Gateway"

    async def test_transport_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with HttpLiveCoverageAPI(BASE_URL, transport=httpx.MockTransport(refuse)) as api:
            with pytest.raises(TransportError):
                await api.list_active_coverages()


class TestAuthentication:
    async def test_session_cookie_and_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        monkeypatch.delenv("POLITIQUENSEMBLE_SESSION", raising=False)
        async with HttpLiveCoverageAPI(
            BASE_URL,
            session_cookie="s%3Aabc",
            token="tok",
            transport=httpx.MockTransport(record),
        ) as api:
            await api.list_coverages()

        assert seen[0].headers["Authorization"] == "Bearer tok"
        assert "connect.sid=s%3Aabc" in seen[0].headers["Cookie"]

    async def test_session_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        monkeypatch.setenv("POLITIQUENSEMBLE_SESSION", "from-env")
        async with HttpLiveCoverageAPI(BASE_URL, transport=httpx.MockTransport(record)) as api:
            await api.list_coverages()

        assert "connect.sid=from-env" in seen[0].headers["Cookie"]
        assert "Authorization" not in seen[0].headers
