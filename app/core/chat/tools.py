import logging
from typing import Any, Dict, List

from app.core.chat import operations
from app.core.store import StatementStore

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# TOOLS MODULE
# Purpose: expose the chat operations as function-calling tools for an LLM
# and run the calls it makes.
# -----------------------------------------------------------------------------


class ToolCallError(ValueError):
    """A tool call that cannot be run as requested."""


class UnknownToolError(ToolCallError):
    pass


class MissingParameterError(ToolCallError):
    pass


class InvalidParameterError(ToolCallError):
    pass


TOOLS: List[Dict[str, Any]] = [
    {
        "name": "get_database_schema",
        "description": (
            "Get the schema/structure of the database tables and sample data "
            "to understand what data is available"
        ),
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "execute_sql_query",
        "description": (
            "Execute a SQL SELECT query on the database and return the results. "
            "Only SELECT statements are allowed."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": (
                        "The SQL SELECT query to execute. Must be a valid SELECT "
                        "statement. Example: "
                        "\"SELECT * FROM statements WHERE type = 'credit' LIMIT 10\""
                    ),
                }
            },
            "required": ["query"],
        },
    },
    {
        "name": "get_data_summary",
        "description": (
            "Get a summary of the financial data including total transactions, "
            "credits, debits, and date range"
        ),
        "parameters": {"type": "object", "properties": {}, "required": []},
    },
    {
        "name": "validate_sql_query",
        "description": (
            "Validate a SQL query before execution to check for syntax and "
            "security issues"
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The SQL query to validate",
                }
            },
            "required": ["query"],
        },
    },
]


def get_llm_formatted_tools() -> List[Dict[str, Any]]:
    """Wrap TOOLS in the OpenAI-style function-calling envelope."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool["name"],
                "description": tool["description"],
                "parameters": tool["parameters"],
            },
        }
        for tool in TOOLS
    ]


def _require_query(tool_name: str, parameters: Dict[str, Any]) -> str:
    query = parameters.get("query")
    if query is None or query == "":
        raise MissingParameterError(f"Tool {tool_name} requires a 'query' parameter")
    if not isinstance(query, str):
        raise InvalidParameterError(
            f"Tool {tool_name} expects 'query' to be a string, got {type(query).__name__}"
        )
    return query


async def _run_sql_tool(store: StatementStore, query: str) -> Dict[str, Any]:
    validation = await operations.validate_sql_query(query)
    if not validation.valid:
        logger.warning(f"Rejected SQL query: {validation.reason}")
        return validation.model_dump()

    results = await operations.execute_query(store, validation.query)

    lowered = query.lower()
    is_transaction_query = "select" in lowered and "statements" in lowered

    return {
        "query": query,
        "results": results,
        "row_count": len(results),
        "is_transaction_data": is_transaction_query,
        "formatted_results": results if is_transaction_query else None,
    }


async def execute_tool_call(
    store: StatementStore, tool_name: str, parameters: Dict[str, Any]
) -> Any:
    """
    Run one tool call requested by the chat model.

    Args:
        store: Statement store bound to the current request.
        tool_name: One of the names in TOOLS.
        parameters: Decoded arguments of the call.

    Returns:
        JSON-serializable result. A rejected SQL query comes back as the
        validation result instead of being executed.

    Raises:
        UnknownToolError: tool_name is not in TOOLS.
        MissingParameterError: a required "query" is absent.
        InvalidParameterError: "query" is not a string.
    """
    logger.info(f"Executing tool: {tool_name} with parameters: {parameters}")

    try:
        if tool_name == "get_database_schema":
            result = await operations.get_table_schema(store)
        elif tool_name == "execute_sql_query":
            result = await _run_sql_tool(store, _require_query(tool_name, parameters))
        elif tool_name == "get_data_summary":
            summary = await operations.get_data_summary(store)
            result = summary.model_dump(mode="json")
        elif tool_name == "validate_sql_query":
            validation = await operations.validate_sql_query(
                _require_query(tool_name, parameters)
            )
            result = validation.model_dump()
        else:
            raise UnknownToolError(f"Unknown tool: {tool_name}")
    except Exception as e:
        logger.error(f"Error executing tool {tool_name}: {e}")
        raise

    logger.info(f"Tool {tool_name} completed")
    return result
