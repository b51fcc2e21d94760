import logging
from typing import Annotated, Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy import case, delete, desc, func, inspect, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models, schemas
from app.core.config import settings
from app.core.database import get_db

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# STATEMENT STORE
# Purpose: one place that talks to the statements database.
# The chat operations only see this facade, never the session itself.
# Nothing here validates queries; execute_query runs exactly what it is given.
# -----------------------------------------------------------------------------


def _apply_filters(stmt, filters: Optional[schemas.StatementFilters]):
    """Add the optional WHERE clauses shared by listing and counting."""
    if filters is None:
        return stmt

    if filters.start_date:
        stmt = stmt.where(models.Statement.date >= filters.start_date)
    if filters.end_date:
        stmt = stmt.where(models.Statement.date <= filters.end_date)
    if filters.type:
        stmt = stmt.where(models.Statement.type == filters.type.value)
    if filters.min_amount is not None:
        stmt = stmt.where(models.Statement.amount >= filters.min_amount)
    if filters.max_amount is not None:
        stmt = stmt.where(models.Statement.amount <= filters.max_amount)

    return stmt


def _describe_tables(sync_session) -> Dict[str, Any]:
    # Inspector needs a sync connection, so this runs inside session.run_sync
    inspector = inspect(sync_session.connection())
    table_names = inspector.get_table_names()
    pk_columns = set(
        inspector.get_pk_constraint(models.Statement.__tablename__).get(
            "constrained_columns", []
        )
    )

    columns = [
        {
            "name": column["name"],
            "type": str(column["type"]),
            "nullable": column["nullable"],
            "default": column.get("default"),
            "primary_key": column["name"] in pk_columns,
        }
        for column in inspector.get_columns(models.Statement.__tablename__)
    ]

    return {
        "tables": [{"name": name} for name in table_names],
        "statements_schema": columns,
    }


class StatementStore:
    """Thin async facade over the statements tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_schema(self) -> Dict[str, Any]:
        """
        Describe the database for the chat model.

        Returns:
            Dict with table names, the statements column layout and a few
            sample rows.
        """
        schema = await self.db.run_sync(_describe_tables)

        result = await self.db.execute(
            text(
                f"SELECT * FROM {models.Statement.__tablename__} LIMIT :limit"
            ),
            {"limit": settings.SCHEMA_SAMPLE_ROWS},
        )
        schema["sample_data"] = [dict(row) for row in result.mappings().all()]

        return schema

    async def execute_query(self, query: str) -> List[Dict[str, Any]]:
        """Run a raw query verbatim and return its rows as dicts."""
        logger.info(f"Executing SQL query: {query}")
        result = await self.db.execute(text(query))
        rows = [dict(row) for row in result.mappings().all()]
        logger.info(f"Query returned {len(rows)} rows")
        return rows

    async def get_statistics(self) -> schemas.StatementStatistics:
        """Count statements and total the credit and debit amounts."""
        stmt = select(
            func.count(models.Statement.id).label("statements_count"),
            func.coalesce(
                func.sum(
                    case(
                        (models.Statement.type == "credit", models.Statement.amount),
                        else_=0,
                    )
                ),
                0,
            ).label("total_credits"),
            func.coalesce(
                func.sum(
                    case(
                        (models.Statement.type == "debit", models.Statement.amount),
                        else_=0,
                    )
                ),
                0,
            ).label("total_debits"),
        )

        result = await self.db.execute(stmt)
        row = result.one()

        return schemas.StatementStatistics(
            statements_count=row.statements_count or 0,
            total_credits=float(row.total_credits or 0),
            total_debits=float(row.total_debits or 0),
        )

    async def get_statements(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[schemas.StatementFilters] = None,
    ) -> List[models.Statement]:
        """Most recent statements first (date, then insertion time)."""
        stmt = _apply_filters(select(models.Statement), filters).order_by(
            desc(models.Statement.date), desc(models.Statement.created_at)
        )

        if limit:
            stmt = stmt.limit(limit)
            if offset:
                stmt = stmt.offset(offset)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_statements(
        self, filters: Optional[schemas.StatementFilters] = None
    ) -> int:
        stmt = _apply_filters(select(func.count(models.Statement.id)), filters)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def get_statement(self, statement_id: int) -> Optional[models.Statement]:
        return await self.db.get(models.Statement, statement_id)

    async def create_statement(
        self, statement: schemas.StatementCreate
    ) -> models.Statement:
        data = statement.model_dump()
        data["type"] = statement.type.value

        new_statement = models.Statement(**data)
        self.db.add(new_statement)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(new_statement)

        logger.info(f"Saved statement {new_statement.id} ({new_statement.type})")
        return new_statement

    async def update_statement(
        self, statement_id: int, changes: schemas.StatementUpdate
    ) -> Optional[models.Statement]:
        """
        Apply the fields that were sent to one statement.

        Returns:
            The updated statement, or None when it does not exist or the
            update carries no fields.
        """
        values = changes.model_dump(exclude_unset=True, exclude_none=True)
        if not values:
            return None

        statement = await self.get_statement(statement_id)
        if statement is None:
            return None

        if "type" in values:
            values["type"] = values["type"].value

        for key, value in values.items():
            setattr(statement, key, value)

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(statement)

        logger.info(f"Updated statement {statement_id}: {sorted(values)}")
        return statement

    async def save_statements(
        self, statements: List[schemas.StatementCreate], clear_existing: bool = False
    ) -> int:
        """
        Insert a batch of statements in one transaction.

        Args:
            statements: Rows to insert.
            clear_existing: Delete every stored statement first.

        Returns:
            Number of statements saved. On any failure nothing is saved or
            deleted.
        """
        try:
            if clear_existing:
                await self.db.execute(delete(models.Statement))

            for statement in statements:
                data = statement.model_dump()
                data["type"] = statement.type.value
                self.db.add(models.Statement(**data))

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Saved {len(statements)} statements (clear_existing={clear_existing})")
        return len(statements)

    async def delete_statement(self, statement_id: int) -> bool:
        statement = await self.get_statement(statement_id)
        if statement is None:
            return False

        try:
            await self.db.delete(statement)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Deleted statement {statement_id}")
        return True


# Bridge for routes: same session as get_db, wrapped in the facade
async def get_store(db: Annotated[AsyncSession, Depends(get_db)]):
    return StatementStore(db)
