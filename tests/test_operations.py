import logging
from datetime import date

import pytest

from app.core import schemas
from app.core.chat import operations
from app.core.store import StatementStore


class FailingStatisticsStore:
    """Store stub whose statistics call blows up."""

    def __init__(self, error: Exception):
        self.error = error
        self.statements_requested = False

    async def get_statistics(self):
        raise self.error

    async def get_statements(self, limit=None, offset=None, filters=None):
        self.statements_requested = True
        return []


class FailingStatementsStore:
    def __init__(self, error: Exception):
        self.error = error

    async def get_statistics(self):
        return schemas.StatementStatistics(statements_count=1)

    async def get_statements(self, limit=None, offset=None, filters=None):
        raise self.error


@pytest.mark.asyncio
async def test_summary_empty_store(store: StatementStore):
    """No statements: zero totals and no dates"""
    summary = await operations.get_data_summary(store)

    assert summary.total_transactions == 0
    assert summary.total_credits == 0
    assert summary.total_debits == 0
    assert summary.earliest_date is None
    assert summary.latest_date is None


@pytest.mark.asyncio
async def test_summary_totals(store: StatementStore, test_statements):
    summary = await operations.get_data_summary(store)

    assert summary.total_transactions == 3
    assert summary.total_credits == 1500.0
    assert summary.total_debits == 240.5


@pytest.mark.asyncio
async def test_summary_dates_both_come_from_latest_statement(
    store: StatementStore, test_statements
):
    """Both bounds are read from the single most recent statement"""
    summary = await operations.get_data_summary(store)

    assert summary.earliest_date == date(2024, 2, 3)
    assert summary.latest_date == date(2024, 2, 3)


@pytest.mark.asyncio
async def test_summary_propagates_statistics_error(caplog):
    error = RuntimeError("database is locked")
    failing_store = FailingStatisticsStore(error)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(RuntimeError) as excinfo:
            await operations.get_data_summary(failing_store)

    assert excinfo.value is error
    assert failing_store.statements_requested is False
    assert "Error getting data summary: database is locked" in caplog.text


@pytest.mark.asyncio
async def test_summary_propagates_statements_error():
    error = ConnectionError("connection reset")

    with pytest.raises(ConnectionError) as excinfo:
        await operations.get_data_summary(FailingStatementsStore(error))

    assert excinfo.value is error


@pytest.mark.asyncio
async def test_execute_query_is_a_pass_through(store: StatementStore, test_statements):
    rows = await operations.execute_query(
        store, "SELECT COUNT(*) AS total FROM statements WHERE type = 'debit'"
    )
    assert rows == [{"total": 2}]


@pytest.mark.asyncio
async def test_table_schema(store: StatementStore):
    schema = await operations.get_table_schema(store)

    assert {"name": "statements"} in schema["tables"]
    assert schema["sample_data"] == []
