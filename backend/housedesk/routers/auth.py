"""Authentication endpoints (login, logout, password reset, current account)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from housedesk.core.config import settings
from housedesk.core.deps import get_current_principal
from housedesk.core.exceptions import NotFoundError
from housedesk.core.rbac import Principal
from housedesk.db.session import get_db
from housedesk.schemas.account import AdminOut, OperatorOut, OrganizationOut, OwnerOut
from housedesk.schemas.auth import (
    LoginRequest,
    MessageResponse,
    PasswordCodeRequest,
    PasswordResetRequest,
    PrincipalOut,
    TokenResponse,
)
from housedesk.services.auth import authenticate, get_account, issue_access_token, issue_password_code, reset_password
from housedesk.services.delivery import CodeSender, get_code_sender
from housedesk.models.enums import Role

router = APIRouter()

_ACCOUNT_SCHEMAS = {
    Role.admin: AdminOut,
    Role.organization: OrganizationOut,
    Role.operator: OperatorOut,
    Role.owner: OwnerOut,
}


def _principal_out(principal: Principal) -> PrincipalOut:
    return PrincipalOut(
        role=principal.role,
        id=principal.subject_id,
        login=principal.login,
        organization_id=getattr(principal, "organization_id", None),
    )


def _set_auth_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        settings.COOKIE_NAME,
        access_token,
        httponly=True,
        samesite="lax",
        secure=settings.ENV != "development",
        path="/",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> TokenResponse:
    principal = authenticate(db, payload.role, payload.login, payload.password)
    access_token = issue_access_token(principal)
    _set_auth_cookie(response, access_token)
    return TokenResponse(access_token=access_token, principal=_principal_out(principal))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    response.delete_cookie(settings.COOKIE_NAME, path="/")
    return MessageResponse(message="logged_out")


@router.post("/password-code", response_model=MessageResponse)
def request_password_code(
    payload: PasswordCodeRequest,
    db: Session = Depends(get_db),
    sender: CodeSender = Depends(get_code_sender),
) -> MessageResponse:
    issue_password_code(db, payload.role, payload.login, sender)
    return MessageResponse(message="password_code_sent")


@router.post("/password", response_model=MessageResponse)
def set_password(payload: PasswordResetRequest, db: Session = Depends(get_db)) -> MessageResponse:
    reset_password(db, payload.role, payload.login, payload.code, payload.password)
    return MessageResponse(message="password_updated")


@router.get("/me")
def get_me(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> dict:
    account = get_account(db, principal)
    if not account:
        raise NotFoundError("account_not_found", details={"role": principal.role.value})
    schema = _ACCOUNT_SCHEMAS[principal.role]
    return {
        "principal": _principal_out(principal).model_dump(mode="json"),
        "account": schema.model_validate(account).model_dump(mode="json"),
    }
