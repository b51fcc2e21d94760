import pytest

from app.core.chat import tools
from app.core.store import StatementStore


def test_llm_formatted_tools():
    formatted = tools.get_llm_formatted_tools()

    assert [t["function"]["name"] for t in formatted] == [
        "get_database_schema",
        "execute_sql_query",
        "get_data_summary",
        "validate_sql_query",
    ]
    assert all(t["type"] == "function" for t in formatted)
    sql_tool = formatted[1]["function"]
    assert sql_tool["parameters"]["required"] == ["query"]


@pytest.mark.asyncio
async def test_sql_tool_flags_transaction_data(store: StatementStore, test_statements):
    result = await tools.execute_tool_call(
        store, "execute_sql_query", {"query": "SELECT * FROM statements"}
    )

    assert result["row_count"] == 3
    assert result["is_transaction_data"] is True
    assert result["formatted_results"] == result["results"]


@pytest.mark.asyncio
async def test_sql_tool_other_tables_not_transaction_data(store: StatementStore):
    result = await tools.execute_tool_call(
        store,
        "execute_sql_query",
        {"query": "SELECT name FROM sqlite_master WHERE type = 'table'"},
    )

    assert result["is_transaction_data"] is False
    assert result["formatted_results"] is None
    assert {"name": "statements"} in result["results"]


@pytest.mark.asyncio
async def test_sql_tool_rejected_query_is_not_executed(
    store: StatementStore, test_statements
):
    result = await tools.execute_tool_call(
        store, "execute_sql_query", {"query": "delete from statements"}
    )

    assert result["valid"] is False
    assert result["reason"] == "Only SELECT queries are allowed"
    assert await store.count_statements() == 3


@pytest.mark.asyncio
async def test_summary_tool_is_json_ready(store: StatementStore, test_statements):
    result = await tools.execute_tool_call(store, "get_data_summary", {})

    assert result["total_transactions"] == 3
    assert result["latest_date"] == "2024-02-03"


@pytest.mark.asyncio
async def test_validate_tool(store: StatementStore):
    result = await tools.execute_tool_call(
        store, "validate_sql_query", {"query": "select 1"}
    )
    assert result == {
        "valid": False,
        "reason": "Query must include FROM clause",
        "suggestion": "Add a FROM clause to specify which table(s) to query",
    }


@pytest.mark.asyncio
async def test_schema_tool(store: StatementStore):
    result = await tools.execute_tool_call(store, "get_database_schema", {})
    assert "statements_schema" in result


@pytest.mark.asyncio
@pytest.mark.parametrize("tool_name", ["execute_sql_query", "validate_sql_query"])
async def test_query_tools_require_query(store: StatementStore, tool_name):
    with pytest.raises(tools.MissingParameterError):
        await tools.execute_tool_call(store, tool_name, {})


@pytest.mark.asyncio
async def test_unknown_tool(store: StatementStore):
    with pytest.raises(tools.UnknownToolError, match="Unknown tool: drop_everything"):
        await tools.execute_tool_call(store, "drop_everything", {})


@pytest.mark.asyncio
@pytest.mark.parametrize("query", [5, ["select * from statements"], {"sql": "x"}])
async def test_query_tools_reject_non_string_query(store: StatementStore, query):
    with pytest.raises(tools.InvalidParameterError):
        await tools.execute_tool_call(store, "execute_sql_query", {"query": query})


@pytest.mark.asyncio
async def test_empty_query_is_missing(store: StatementStore):
    with pytest.raises(tools.MissingParameterError):
        await tools.execute_tool_call(store, "validate_sql_query", {"query": ""})
