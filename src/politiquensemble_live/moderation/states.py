"""Question moderation state machine.

    pending --approve--> approved --answer--> approved + answered
    pending --reject---> rejected

``rejected`` and ``answered`` are terminal. Transitions return a new
``Question``; the input is never modified.
"""

from dataclasses import replace

from politiquensemble_live.data import Question, QuestionStatus
from politiquensemble_live.errors import InvalidTransitionError


def can_approve(question: Question) -> bool:
    return question.status == QuestionStatus.PENDING


def can_reject(question: Question) -> bool:
    return question.status == QuestionStatus.PENDING


def can_answer(question: Question) -> bool:
    return question.status == QuestionStatus.APPROVED and not question.answered


def _refuse(question: Question, action: str) -> InvalidTransitionError:
    state = "answered" if question.answered else str(question.status)
    return InvalidTransitionError(f"Cannot {action} question {question.id}: it is {state}")


def approve(question: Question) -> Question:
    if not can_approve(question):
        raise _refuse(question, "approve")
    return replace(question, status=QuestionStatus.APPROVED)


def reject(question: Question) -> Question:
    if not can_reject(question):
        raise _refuse(question, "reject")
    return replace(question, status=QuestionStatus.REJECTED)


def mark_answered(question: Question) -> Question:
    if not can_answer(question):
        raise _refuse(question, "answer")
    return replace(question, answered=True)
