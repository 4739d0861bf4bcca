"""SQL implementation of the DocumentStore protocol."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from backend.formflow.db.models import Base, Document


def _match_clause(field: str, value: Any) -> Any:
    """Typed JSON-path comparison for a top-level document field."""
    column = Document.data[field]
    if isinstance(value, bool):
        return column.as_boolean() == value
    if isinstance(value, int):
        return column.as_integer() == value
    if isinstance(value, float):
        return column.as_float() == value
    return column.as_string() == str(value)


class SqlDocumentStore:
    """SQL implementation of DocumentStore over a single ``document`` table."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def ensure_schema(self) -> None:
        """Create the document table if it does not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Release pooled connections."""
        await self._engine.dispose()

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Get document by id."""
        async with AsyncSession(self._engine) as session:
            row = await session.get(Document, (collection, doc_id))
            return dict(row.data) if row is not None else None

    async def put(self, collection: str, doc_id: str, document: dict[str, Any]) -> None:
        """Create or replace a document."""
        async with AsyncSession(self._engine) as session:
            row = await session.get(Document, (collection, doc_id))

            if row is None:
                session.add(Document(collection=collection, doc_id=doc_id, data=document))
            else:
                row.data = document

            await session.commit()

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document."""
        async with AsyncSession(self._engine) as session:
            await session.execute(
                delete(Document).where(
                    Document.collection == collection, Document.doc_id == doc_id
                )
            )
            await session.commit()

    async def query(
        self,
        collection: str,
        *,
        field: str,
        value: Any,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Query documents by top-level field."""
        query = (
            select(Document)
            .where(Document.collection == collection)
            .where(_match_clause(field, value))
        )

        if order_by is not None:
            sort_key = Document.data[order_by].as_float()
            query = query.order_by(sort_key.desc() if descending else sort_key.asc())

        if limit is not None:
            query = query.limit(limit)

        async with AsyncSession(self._engine) as session:
            result = await session.execute(query)
            return [dict(row.data) for row in result.scalars().all()]
