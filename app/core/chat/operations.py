import logging
from typing import Any, Dict, List

from app.core import schemas
from app.core.chat.validation import validate_query
from app.core.store import StatementStore

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CHAT OPERATIONS
# Purpose: the four calls the chat assistant can make against the data.
# execute_query trusts its caller: run validate_sql_query first.
# -----------------------------------------------------------------------------


async def get_table_schema(store: StatementStore) -> Dict[str, Any]:
    return await store.get_schema()


async def execute_query(store: StatementStore, query: str) -> List[Dict[str, Any]]:
    return await store.execute_query(query)


async def get_data_summary(store: StatementStore) -> schemas.DataSummary:
    """
    Build the high-level summary shown to the assistant.

    Both dates are taken from the single most recent statement the store
    returns, so earliest_date and latest_date are always equal.

    Returns:
        DataSummary with totals and dates (None when there are no statements).
    """
    try:
        stats = await store.get_statistics()
        statements = await store.get_statements(limit=1)
    except Exception as e:
        logger.error(f"Error getting data summary: {e}")
        raise

    earliest_date = statements[0].date if statements else None
    latest_date = statements[0].date if statements else None

    return schemas.DataSummary(
        total_transactions=stats.statements_count,
        total_credits=stats.total_credits,
        total_debits=stats.total_debits,
        earliest_date=earliest_date,
        latest_date=latest_date,
    )


async def validate_sql_query(query: str) -> schemas.ValidationResult:
    return validate_query(query)
