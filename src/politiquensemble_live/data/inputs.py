"""Validated write payloads.

Each model is checked before any request is sent, so a form-level mistake
raises ``pydantic.ValidationError`` without touching the network.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from politiquensemble_live.formatting import slugify


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class _Payload(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}

    def to_payload(self) -> dict[str, Any]:
        """JSON body with the API's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class CoverageInput(_Payload):
    """Fields of a new or fully edited live coverage.

    The slug is derived from the title when left empty.
    """

    title: str = Field(min_length=5)
    subject: str = Field(min_length=5)
    slug: str
    context: str = ""
    image_url: str | None = Field(default=None, alias="imageUrl")
    active: bool = True
    end_date: datetime | None = Field(default=None, alias="endDate")

    @model_validator(mode="before")
    @classmethod
    def default_slug(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("slug") or "").strip():
            data = {**data, "slug": slugify(str(data.get("title") or ""))}
        return data

    @field_validator("slug")
    @classmethod
    def slug_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class CoveragePatch(_Payload):
    """Partial edit of a live coverage; unset fields are left unchanged."""

    title: str | None = Field(default=None, min_length=5)
    subject: str | None = Field(default=None, min_length=5)
    slug: str | None = None
    context: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    active: bool | None = None
    end_date: datetime | None = Field(default=None, alias="endDate")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class UpdateInput(_Payload):
    """A timeline entry posted by an editor."""

    content: str
    image_url: str | None = Field(default=None, alias="imageUrl")
    important: bool = False

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("image_url")
    @classmethod
    def empty_image_is_none(cls, v: str | None) -> str | None:
        return v or None


class EditorInput(_Payload):
    """Assignment of a user to a coverage."""

    editor_id: int = Field(alias="editorId", gt=0)
    role: str | None = None

    @field_validator("role")
    @classmethod
    def empty_role_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class QuestionInput(_Payload):
    """A question submitted from the public coverage page."""

    username: str
    content: str

    @field_validator("username", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _not_blank(v)


class AnswerInput(_Payload):
    """A moderator's published reply to an approved question."""

    content: str
    important: bool = False
    coverage_id: int = Field(alias="coverageId")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _not_blank(v)
