from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    Float,
    Integer,
    String,
    TIMESTAMP,
    Text,
)
from sqlalchemy.sql import func

from app.core.database import Base


# =========================
# Statement
# =========================
class Statement(Base):
    """
    A single bank statement line.

    Amounts are stored positive; the direction lives in `type`:
    - credit: money received
    - debit: money spent
    """

    __tablename__ = "statements"
    __table_args__ = (
        CheckConstraint("type IN ('credit', 'debit')", name="ck_statements_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    type = Column(String, nullable=False, index=True)

    source = Column(String, nullable=False, default="manual", index=True)  # upload filename or "manual"

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
