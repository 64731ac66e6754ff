"""Cursor pagination envelope."""

import base64
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of results. ``next_cursor`` is opaque; pass it back unchanged."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Cursor for the next page, or null on the last page.",
    )
    has_more: bool = Field(default=False)


def encode_cursor(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode()).decode()


def decode_cursor(cursor: str) -> str:
    """Decode a cursor. Raises ValueError if it is not valid base64 text."""
    try:
        return base64.urlsafe_b64decode(cursor.encode()).decode()
    except Exception as e:
        raise ValueError("Invalid cursor") from e
