"""Snippet model and its persisted record shape."""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

DEFAULT_LANGUAGE = "plaintext"

# Python attribute name -> key used in the persisted document.
RECORD_KEYS = {
    "id": "id",
    "title": "title",
    "language": "language",
    "tags": "tags",
    "code": "code",
    "is_favorite": "isFavorite",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def snippet_id_new() -> str:
    """Return a fresh opaque snippet id."""
    return str(uuid.uuid4())


def tags_normalize(tags: Any) -> list[str]:
    """Strip tags, drop blank or ``None`` entries and duplicates, keep order."""
    if not tags:
        return []
    if isinstance(tags, str):
        tags = [tags]
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        if tag is None:
            continue
        tag = str(tag).strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def tags_parse(text: str | None) -> list[str]:
    """Split comma-separated user input (``"a, b,,c"``) into a tag list."""
    if not text or not text.strip():
        return []
    return tags_normalize(text.split(","))


class Snippet(SQLModel):
    """A titled, tagged, language-labelled block of code."""

    id: str = Field(default_factory=snippet_id_new)
    title: str = ""
    language: str = DEFAULT_LANGUAGE
    tags: list[str] = Field(default_factory=list)
    code: str = ""
    is_favorite: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_clean(cls, value: Any) -> list[str]:
        return tags_normalize(value)

    @field_validator("title", "code", "language", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _updated_not_before_created(self) -> "Snippet":
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
        return self

    def to_record(self) -> dict:
        """Return the JSON-ready record written to the snippet document."""
        data = self.model_dump(mode="json")
        return {RECORD_KEYS[key]: data[key] for key in RECORD_KEYS}

    @classmethod
    def from_record(cls, record: dict) -> "Snippet":
        """Build a snippet from a document record.

        Accepts both the camelCase document keys and the Python attribute
        names. Raises ``pydantic.ValidationError`` for unusable records.
        """
        if not isinstance(record, dict):
            raise TypeError(f"snippet record must be an object, not {type(record).__name__}")
        data = {}
        for attr, key in RECORD_KEYS.items():
            if key in record:
                data[attr] = record[key]
            elif attr in record:
                data[attr] = record[attr]
        return cls.model_validate(data)

    def has_content(self) -> bool:
        """True if both the title and the code hold more than whitespace."""
        return bool((self.title or "").strip()) and bool((self.code or "").strip())

    def matches_text(self, term: str) -> bool:
        """Return True if lower-cased *term* occurs in the title, code or a tag."""
        if term in (self.title or "").lower() or term in (self.code or "").lower():
            return True
        return any(term in (tag or "").lower() for tag in self.tags or [])

    def __str__(self) -> str:
        return self.title
