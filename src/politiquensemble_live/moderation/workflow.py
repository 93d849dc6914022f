"""Moderation of audience questions for a coverage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from politiquensemble_live.api.base import LiveCoverageAPI
from politiquensemble_live.cache import QueryCache, questions_key, updates_key
from politiquensemble_live.data import (
    AnswerInput,
    LiveUpdate,
    Question,
    QuestionInput,
    QuestionStatus,
)
from politiquensemble_live.moderation import states
from politiquensemble_live.mutations import run_mutation
from politiquensemble_live.notifications import LoggingNotifier, Notifier, Toast

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class ModerationQueues:
    """Questions of one coverage split by status, newest first."""

    pending: list[Question] = field(default_factory=list)
    approved: list[Question] = field(default_factory=list)
    rejected: list[Question] = field(default_factory=list)

    @classmethod
    def from_questions(cls, questions: list[Question]) -> ModerationQueues:
        ordered = sorted(questions, key=lambda q: q.timestamp or _OLDEST, reverse=True)
        return cls(
            pending=[q for q in ordered if q.status == QuestionStatus.PENDING],
            approved=[q for q in ordered if q.status == QuestionStatus.APPROVED],
            rejected=[q for q in ordered if q.status == QuestionStatus.REJECTED],
        )


class ModerationWorkflow:
    """Approve, reject and answer audience questions.

    Guards run locally first, so an action that the state machine forbids
    raises ``InvalidTransitionError`` without any request. Accepted actions go
    through ``run_mutation``: the displayed state only changes once the
    invalidated queries have been refetched from the server.

    Args:
        api: Live-coverage API client.
        cache: Shared query cache.
        notifier: Receives success and error toasts.
    """

    def __init__(
        self,
        api: LiveCoverageAPI,
        cache: QueryCache,
        notifier: Notifier | None = None,
    ) -> None:
        self._api = api
        self._cache = cache
        self._notifier = notifier or LoggingNotifier()

    async def questions(
        self,
        coverage_id: int,
        *,
        status: QuestionStatus | None = None,
    ) -> list[Question]:
        """All questions of a coverage, or only those with ``status``."""
        questions: list[Question] = await self._cache.fetch(
            questions_key(coverage_id), lambda: self._api.get_questions(coverage_id)
        )
        if status is None:
            return questions
        return [q for q in questions if q.status == status]

    async def queues(self, coverage_id: int) -> ModerationQueues:
        return ModerationQueues.from_questions(await self.questions(coverage_id))

    async def submit_question(self, coverage_id: int, username: str, content: str) -> Question:
        """Public submission; the new question starts pending."""
        payload = QuestionInput(username=username, content=content)
        return await run_mutation(
            lambda: self._api.submit_question(coverage_id, payload),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[questions_key(coverage_id)],
            success=Toast(
                "Question envoyée",
                "Votre question a été transmise à l'équipe et sera modérée.",
            ),
            failure_prefix="Impossible d'envoyer la question. ",
        )

    async def approve(self, question: Question) -> Question:
        states.approve(question)
        return await self._set_status(question, QuestionStatus.APPROVED)

    async def reject(self, question: Question) -> Question:
        states.reject(question)
        return await self._set_status(question, QuestionStatus.REJECTED)

    async def answer(self, question: Question, content: str, important: bool = False) -> LiveUpdate:
        """Publish a reply as a new timeline update and mark the question answered.

        The server does both in one call. The question list and the coverage
        timeline are invalidated together afterwards.

        Raises:
            InvalidTransitionError: The question is not approved or already answered.
            pydantic.ValidationError: ``content`` is blank.
            LiveCoverageError: The server call failed.
        """
        states.mark_answered(question)
        payload = AnswerInput(content=content, important=important, coverage_id=question.coverage_id)
        update = await run_mutation(
            lambda: self._api.answer_question(question.id, payload),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[questions_key(question.coverage_id), updates_key(question.coverage_id)],
            success=Toast("Réponse publiée", "Votre réponse a été publiée avec succès."),
            failure_prefix="Impossible de publier la réponse. ",
        )
        logger.info("Question %d answered by update %d", question.id, update.id)
        return update

    async def _set_status(self, question: Question, status: QuestionStatus) -> Question:
        updated = await run_mutation(
            lambda: self._api.set_question_status(question.id, status),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[questions_key(question.coverage_id)],
            success=Toast(
                "Statut mis à jour",
                "Le statut de la question a été mis à jour avec succès.",
            ),
            failure_prefix="Impossible de mettre à jour le statut de la question. ",
        )
        logger.info("Question %d is now %s", question.id, status)
        return updated
