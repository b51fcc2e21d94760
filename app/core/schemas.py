import datetime as dt
from typing import Optional, List, Dict, Any, Literal, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =========================
# Enums
# =========================
class StatementType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


# =========================
# STATEMENT
# =========================
class StatementBase(BaseModel):
    date: dt.date
    description: str = Field(min_length=1)
    amount: float = Field(gt=0)
    type: StatementType
    source: str = "manual"


class StatementCreate(StatementBase):
    pass


class StatementUpdate(BaseModel):
    """Partial update, only the fields that were sent are applied."""

    date: Optional[dt.date] = None
    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, gt=0)
    type: Optional[StatementType] = None
    source: Optional[str] = None


class StatementBulkCreate(BaseModel):
    statements: List[StatementCreate]
    clear_existing: bool = False


class StatementResponse(StatementBase):
    id: int
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class StatementFilters(BaseModel):
    """Optional, inclusive filters shared by listing and counting."""

    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    type: Optional[StatementType] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class StatementPage(BaseModel):
    data: List[StatementResponse]
    pagination: Pagination


# =========================
# STATISTICS / SUMMARY
# =========================
class StatementStatistics(BaseModel):
    statements_count: int = 0
    total_credits: float = 0.0
    total_debits: float = 0.0


class DataSummary(BaseModel):
    total_transactions: int
    total_credits: float
    total_debits: float
    earliest_date: Optional[dt.date] = None
    latest_date: Optional[dt.date] = None


# =========================
# QUERY VALIDATION
# =========================
class ValidQuery(BaseModel):
    valid: Literal[True] = True
    query: str  # original text, never rewritten
    message: str = "Query validation passed"


class InvalidQuery(BaseModel):
    valid: Literal[False] = False
    reason: str
    suggestion: str


ValidationResult = Union[ValidQuery, InvalidQuery]


class QueryRequest(BaseModel):
    query: str  # empty text is left for the validator to reject


class QueryResult(BaseModel):
    query: str
    results: List[Dict[str, Any]]
    row_count: int


# =========================
# TOOLS
# =========================
class ToolCallRequest(BaseModel):
    parameters: Dict[str, Any] = {}
