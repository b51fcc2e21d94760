import logging
from typing import Annotated, Any, Dict, List, Union

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import DBAPIError

from app.core import schemas
from app.core.chat import operations, tools
from app.core.store import StatementStore, get_store

router = APIRouter(prefix="/chat", tags=["Chat"])

store_dep = Annotated[StatementStore, Depends(get_store)]


@router.get("/schema")
async def get_schema(store: store_dep) -> Dict[str, Any]:
    """Tables, statement columns and sample rows."""
    try:
        return await operations.get_table_schema(store)
    except Exception as error:
        logging.error(f"Failed to read schema: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to read database schema"
        )


@router.get("/summary", response_model=schemas.DataSummary)
async def get_summary(store: store_dep):
    try:
        return await operations.get_data_summary(store)
    except Exception as error:
        logging.error(f"Failed to build data summary: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to build data summary"
        )


@router.post(
    "/validate", response_model=Union[schemas.ValidQuery, schemas.InvalidQuery]
)
async def validate_query(payload: schemas.QueryRequest):
    """Check a query without running it. Rejections are a normal 200 result."""
    return await operations.validate_sql_query(payload.query)


@router.post("/query", response_model=schemas.QueryResult)
async def run_query(payload: schemas.QueryRequest, store: store_dep):
    """
    Validate, then execute a read-only query.
    Nothing reaches the database unless validation passes.
    """
    validation = await operations.validate_sql_query(payload.query)
    if not validation.valid:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            {"reason": validation.reason, "suggestion": validation.suggestion},
        )

    try:
        rows = await operations.execute_query(store, validation.query)
    except DBAPIError as error:
        # The engine rejected SQL that passed the keyword checks
        logging.error(f"Query failed: {error}")
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Query failed: {error.orig}")
    except Exception as error:
        logging.error(f"Query execution error: {error}")
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to execute query"
        )

    return {"query": validation.query, "results": rows, "row_count": len(rows)}


@router.get("/tools")
async def list_tools() -> List[Dict[str, Any]]:
    """Tool definitions in function-calling format."""
    return tools.get_llm_formatted_tools()


@router.post("/tools/{tool_name}")
async def call_tool(tool_name: str, payload: schemas.ToolCallRequest, store: store_dep):
    try:
        return await tools.execute_tool_call(store, tool_name, payload.parameters)
    except tools.UnknownToolError as error:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(error))
    except tools.ToolCallError as error:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(error))
    except DBAPIError as error:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Query failed: {error.orig}")
    except Exception:
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to execute {tool_name}"
        )
