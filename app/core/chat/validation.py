from typing import Callable, List, Optional, Tuple

from app.core.schemas import InvalidQuery, ValidQuery, ValidationResult


# -----------------------------------------------------------------------------
# QUERY VALIDATION
# Purpose: gate every chat-supplied SQL string before it reaches the database.
# Checks are plain substring tests on the trimmed, lowercased text, run in
# order; the first failing rule decides the result. Nothing is rewritten.
# -----------------------------------------------------------------------------

# Order matters: the first match is the keyword reported back
FORBIDDEN_KEYWORDS: Tuple[str, ...] = (
    "drop",
    "delete",
    "insert",
    "update",
    "alter",
    "create",
    "truncate",
    "exec",
    "execute",
)


def _check_select(clean_query: str) -> Optional[InvalidQuery]:
    if not clean_query.startswith("select"):
        return InvalidQuery(
            reason="Only SELECT queries are allowed",
            suggestion="Start your query with SELECT",
        )
    return None


def _check_forbidden_keywords(clean_query: str) -> Optional[InvalidQuery]:
    # Substring match, so "created_at" trips "create" as well
    for keyword in FORBIDDEN_KEYWORDS:
        if keyword in clean_query:
            return InvalidQuery(
                reason=f"Query contains forbidden keyword: {keyword}",
                suggestion="Only SELECT statements are allowed for data retrieval",
            )
    return None


def _check_from_clause(clean_query: str) -> Optional[InvalidQuery]:
    if "from" not in clean_query:
        return InvalidQuery(
            reason="Query must include FROM clause",
            suggestion="Add a FROM clause to specify which table(s) to query",
        )
    return None


RULES: List[Callable[[str], Optional[InvalidQuery]]] = [
    _check_select,
    _check_forbidden_keywords,
    _check_from_clause,
]


def validate_query(query: str) -> ValidationResult:
    """
    Decide whether a query may be executed.

    Args:
        query: Raw SQL text from the caller.

    Returns:
        ValidQuery carrying the original text, or InvalidQuery with the
        reason of the first rule that failed and a suggestion.

    Example:
        validate_query("select 1")
        # InvalidQuery(reason="Query must include FROM clause", ...)
    """
    clean_query = query.strip().lower()

    for rule in RULES:
        rejection = rule(clean_query)
        if rejection is not None:
            return rejection

    return ValidQuery(query=query)
