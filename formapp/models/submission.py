"""Submission ORM — one row per form submission.

Invariants:
    - id (UUID-v4 string) and submittedAt are always supplied by the submission store;
      the id is immutable once inserted
    - Column names are camelCase to match the provisioned table; attributes are snake_case
    - Rows are inserted, read and deleted, never updated
    - interests is a JSON column so strings and lists round-trip unchanged; a table
      provisioned outside the app must declare it JSON or JSONB (a TEXT column would
      hold strings JSON-quoted)
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from formapp.db.base import Base


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column("firstName", Text, nullable=False)
    last_name: Mapped[str] = mapped_column("lastName", Text, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    interests: Mapped[Any] = mapped_column(JSON, nullable=False)
    subscription: Mapped[str] = mapped_column(Text, nullable=False)
    frequency: Mapped[str] = mapped_column(
        String(50), nullable=False, default="weekly",
    )
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    terms_accepted: Mapped[bool] = mapped_column(
        "termsAccepted", Boolean, nullable=False, default=False,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        "submittedAt",
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
