"""Common FastAPI dependencies for authentication and authorization."""

from __future__ import annotations

from fastapi import Depends, Request

from housedesk.core.config import settings
from housedesk.core.exceptions import AuthenticationException, ExpiredTokenError, InsufficientPermissionsError
from housedesk.core.rbac import (
    OperatorPrincipal,
    OrganizationPrincipal,
    OwnerPrincipal,
    Principal,
    has_permission,
    principal_from_claims,
)
from housedesk.core.security import ACCESS_TOKEN_TYPE, decode_token


def _extract_bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    cleaned = token.strip()
    return cleaned or None


def get_current_principal(request: Request) -> Principal:
    token = _extract_bearer_token(request) or request.cookies.get(settings.COOKIE_NAME)
    if not token:
        raise AuthenticationException(
            "not_authenticated",
            error_code="NOT_AUTHENTICATED",
            status_code=401,
        )

    try:
        payload = decode_token(token)
    except ValueError as exc:
        if str(exc) == "expired_token":
            raise ExpiredTokenError("access_token_expired")
        raise AuthenticationException(
            "invalid_token",
            error_code="INVALID_TOKEN",
            status_code=401,
        )
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationException(
            "invalid_token",
            error_code="INVALID_TOKEN",
            status_code=401,
        )
    try:
        return principal_from_claims(payload)
    except ValueError:
        raise AuthenticationException(
            "invalid_token",
            error_code="INVALID_TOKEN",
            status_code=401,
        )


def require_permission(permission: str):
    def _checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not has_permission(principal, permission):
            raise InsufficientPermissionsError("forbidden")
        return principal

    return _checker


def require_organization(principal: Principal = Depends(get_current_principal)) -> OrganizationPrincipal:
    if not isinstance(principal, OrganizationPrincipal):
        raise InsufficientPermissionsError("forbidden")
    return principal


def require_operator(principal: Principal = Depends(get_current_principal)) -> OperatorPrincipal:
    if not isinstance(principal, OperatorPrincipal):
        raise InsufficientPermissionsError("forbidden")
    return principal


def require_owner(principal: Principal = Depends(get_current_principal)) -> OwnerPrincipal:
    if not isinstance(principal, OwnerPrincipal):
        raise InsufficientPermissionsError("forbidden")
    return principal
