"""Auth-related schemas (login, password reset, current account)."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from housedesk.core.sanitize import clean_single_line
from housedesk.models.enums import Role

MIN_PASSWORD_LEN = 8
MAX_PASSWORD_LEN = 128


class _AccountRef(BaseModel):
    role: Role
    login: str = Field(min_length=3, max_length=255)

    @field_validator("login", mode="before")
    @classmethod
    def normalize_login(cls, value: str) -> str:
        return clean_single_line(value)


class LoginRequest(_AccountRef):
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LEN)


class PasswordCodeRequest(_AccountRef):
    pass


class PasswordResetRequest(_AccountRef):
    code: str = Field(min_length=4, max_length=16)
    password: str = Field(min_length=MIN_PASSWORD_LEN, max_length=MAX_PASSWORD_LEN)

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return clean_single_line(value).replace(" ", "")


class PrincipalOut(BaseModel):
    role: Role
    id: int
    login: str
    organization_id: int | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    principal: PrincipalOut


class MessageResponse(BaseModel):
    message: str
