"""One-time password reset codes, one per (role, login)."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from housedesk.db.base import Base
from housedesk.models.enums import Role


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class PasswordCode(Base):
    __tablename__ = "password_codes"

    role: Mapped[Role] = mapped_column(
        Enum(Role, name="account_role", values_callable=lambda x: [e.value for e in x]),
        primary_key=True,
    )
    login: Mapped[str] = mapped_column(String(255), primary_key=True)
    code: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
