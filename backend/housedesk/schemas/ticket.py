"""Pydantic schemas for tickets and their lifecycle actions."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from housedesk.core.sanitize import clean_multiline, clean_single_line
from housedesk.models.enums import TicketStatus

MAX_TEXT_LEN = 4000
MAX_RESPONSE_LEN = 4000


class TicketCreate(BaseModel):
    text: str = Field(min_length=3, max_length=MAX_TEXT_LEN)

    @field_validator("text", mode="before")
    @classmethod
    def normalize_text(cls, value: str) -> str:
        return clean_multiline(value)


class TicketFinalize(BaseModel):
    # Status and response are checked by the lifecycle so that unknown or
    # non-final targets come back as INVALID_STATUS.
    status: str
    response: str = Field(default="", max_length=MAX_RESPONSE_LEN)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: str) -> str:
        return clean_single_line(value).lower()

    @field_validator("response", mode="before")
    @classmethod
    def normalize_response(cls, value: str | None) -> str:
        return clean_multiline(value)


class TicketOut(BaseModel):
    id: int
    organization_id: int
    owner_id: int
    operator_id: int | None
    category_id: int | None
    text: str
    response: str | None
    status: TicketStatus
    created_at: dt.datetime
    category_name: str | None = None
    operator_name: str | None = None
    owner_name: str | None = None
    owner_address: str | None = None

    class Config:
        from_attributes = True
