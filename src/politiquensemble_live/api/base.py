from typing import Protocol

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


class LiveCoverageAPI(Protocol):
    """Interface to the site's live-coverage REST endpoints.

    Every method raises ``TransportError`` when no response arrives and
    ``APIError`` (or ``NotFoundError``) on a non-2xx response.
    """

    # Public endpoints

    async def list_active_coverages(self) -> list[LiveCoverage]: ...

    async def get_coverage_by_slug(self, slug: str) -> LiveCoverage: ...

    async def get_updates(self, coverage_id: int) -> list[LiveUpdate]: ...

    async def get_editors(self, coverage_id: int) -> list[EditorAssignment]: ...

    async def submit_question(self, coverage_id: int, question: QuestionInput) -> Question: ...

    # Admin endpoints

    async def list_coverages(self) -> list[LiveCoverage]: ...

    async def get_coverage(self, coverage_id: int) -> LiveCoverage: ...

    async def create_coverage(self, coverage: CoverageInput) -> LiveCoverage: ...

    async def update_coverage(self, coverage_id: int, patch: CoveragePatch) -> LiveCoverage: ...

    async def delete_coverage(self, coverage_id: int) -> None: ...

    async def add_editor(self, coverage_id: int, editor: EditorInput) -> EditorAssignment: ...

    async def remove_editor(self, coverage_id: int, editor_id: int) -> None: ...

    async def create_update(self, coverage_id: int, update: UpdateInput) -> LiveUpdate: ...

    async def delete_update(self, update_id: int) -> None: ...

    async def get_questions(
        self,
        coverage_id: int,
        *,
        status: QuestionStatus | None = None,
    ) -> list[Question]: ...

    async def set_question_status(self, question_id: int, status: QuestionStatus) -> Question: ...

    async def answer_question(self, question_id: int, answer: AnswerInput) -> LiveUpdate: ...
