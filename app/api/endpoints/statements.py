import logging
import math
from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core import schemas
from app.core.config import settings
from app.core.store import StatementStore, get_store

router = APIRouter(prefix="/statements", tags=["Statements"])

store_dep = Annotated[StatementStore, Depends(get_store)]


@router.get("", response_model=schemas.StatementPage)
async def list_statements(
    store: store_dep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=settings.MAX_PAGE_SIZE),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    type: Optional[schemas.StatementType] = None,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
):
    """
    Paginated statements, most recent first, with optional filters.
    """
    filters = schemas.StatementFilters(
        start_date=start_date,
        end_date=end_date,
        type=type,
        min_amount=min_amount,
        max_amount=max_amount,
    )
    offset = (page - 1) * limit

    statements = await store.get_statements(limit=limit, offset=offset, filters=filters)
    total_count = await store.count_statements(filters)
    total_pages = math.ceil(total_count / limit)

    return {
        "data": statements,
        "pagination": {
            "page": page,
            "limit": limit,
            "total_count": total_count,
            "total_pages": total_pages,
            "has_next_page": page < total_pages,
            "has_prev_page": page > 1,
        },
    }


@router.get("/{statement_id}", response_model=schemas.StatementResponse)
async def get_statement(statement_id: int, store: store_dep):
    statement = await store.get_statement(statement_id)
    if statement is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Statement not found")
    return statement


@router.post(
    "",
    response_model=schemas.StatementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_statement(statement: schemas.StatementCreate, store: store_dep):
    try:
        return await store.create_statement(statement)
    except Exception as error:
        logging.error(f"Failed to save statement: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save statement"
        )


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def save_statements(payload: schemas.StatementBulkCreate, store: store_dep):
    """
    Store a batch of extracted statements in one transaction,
    optionally replacing everything already saved.
    """
    try:
        count = await store.save_statements(
            payload.statements, clear_existing=payload.clear_existing
        )
    except Exception as error:
        logging.error(f"Failed to save statements: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save statements"
        )
    return {"count": count}


@router.api_route(
    "/{statement_id}",
    methods=["PUT", "PATCH"],
    response_model=schemas.StatementResponse,
)
async def update_statement(
    statement_id: int, changes: schemas.StatementUpdate, store: store_dep
):
    try:
        statement = await store.update_statement(statement_id, changes)
    except Exception as error:
        logging.error(f"Failed to update statement {statement_id}: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update statement"
        )

    if statement is None:
        raise HTTPException(
            status.HTTP_404_NOT_FOUND, "Statement not found or no changes made"
        )
    return statement


@router.delete("/{statement_id}")
async def delete_statement(statement_id: int, store: store_dep):
    deleted = await store.delete_statement(statement_id)
    if not deleted:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Statement not found")
    return {"deleted": statement_id}
