"""Base repository with common data-access operations."""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import tuple_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.teamgate.schemas.pagination import decode_cursor, encode_cursor

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Data access only. Services own commit and rollback."""

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Newest-first keyset pagination on ``(cursor_field, id)``.

        The id breaks ties between rows sharing a ``cursor_field`` value.
        Returns (items, next_cursor, has_more). An undecodable cursor starts
        from the first page.
        """
        id_field = self.model.id  # type: ignore[attr-defined]
        if cursor:
            try:
                raw_value, raw_id = decode_cursor(cursor).rsplit("|", 1)
                query = query.where(
                    tuple_(cursor_field, id_field)
                    < (_parse_cursor_value(raw_value), UUID(raw_id))
                )
            except (ValueError, TypeError):
                pass

        query = query.order_by(cursor_field.desc(), id_field.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            last = items[-1]
            value = getattr(last, cursor_field.key)
            if value is not None:
                raw = value.isoformat() if isinstance(value, datetime) else str(value)
                next_cursor = encode_cursor(f"{raw}|{last.id}")  # type: ignore[attr-defined]

        return items, next_cursor, has_more


def _parse_cursor_value(raw: str) -> datetime | str:
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return raw
