"""Pydantic schemas for organizations, operators and owners."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

from housedesk.core.sanitize import clean_email, clean_id_list, clean_phone, clean_single_line

MAX_NAME_LEN = 255
MAX_ADDRESS_LEN = 500
MAX_RESPONSIBLE_CATEGORIES = 64


class _PhoneMixin(BaseModel):
    phone: str = Field(min_length=5, max_length=32)

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, value: str) -> str:
        return clean_phone(value)


class OrganizationIn(BaseModel):
    name: str = Field(min_length=2, max_length=MAX_NAME_LEN)
    email: EmailStr
    flats_count: int = Field(default=0, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return clean_email(value)


class OrganizationOut(BaseModel):
    id: int
    name: str
    email: str
    flats_count: int

    class Config:
        from_attributes = True


class OperatorIn(_PhoneMixin):
    name: str = Field(min_length=2, max_length=MAX_NAME_LEN)
    responsible_categories: list[int] = Field(default_factory=list, max_length=MAX_RESPONSIBLE_CATEGORIES)

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return clean_single_line(value)

    @field_validator("responsible_categories", mode="before")
    @classmethod
    def normalize_categories(cls, value: list[int] | None) -> list[int]:
        return clean_id_list(value)


class OperatorOut(BaseModel):
    id: int
    organization_id: int
    phone: str
    name: str
    responsible_categories: list[int]

    class Config:
        from_attributes = True


class OwnerIn(_PhoneMixin):
    name: str = Field(min_length=2, max_length=MAX_NAME_LEN)
    address: str = Field(default="", max_length=MAX_ADDRESS_LEN)

    @field_validator("name", "address", mode="before")
    @classmethod
    def normalize_text(cls, value: str | None) -> str:
        return clean_single_line(value)


class OwnerOut(BaseModel):
    id: int
    organization_id: int
    phone: str
    name: str
    address: str

    class Config:
        from_attributes = True


class AdminOut(BaseModel):
    id: int
    email: str

    class Config:
        from_attributes = True
