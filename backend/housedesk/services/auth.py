"""Service helpers for login and password reset across the four account roles."""

from __future__ import annotations

import datetime as dt
import logging
import secrets

from sqlalchemy.orm import Session

from housedesk.core.config import settings
from housedesk.core.exceptions import AuthenticationException, NotFoundError
from housedesk.core.rbac import (
    AdminPrincipal,
    OperatorPrincipal,
    OrganizationPrincipal,
    OwnerPrincipal,
    Principal,
    principal_claims,
)
from housedesk.core.sanitize import clean_email, clean_phone
from housedesk.core.security import create_access_token, hash_password, verify_password
from housedesk.models.account import Admin, Operator, Organization, Owner
from housedesk.models.enums import Role
from housedesk.models.password_code import PasswordCode
from housedesk.services.delivery import CodeSender, deliver_password_code

logger = logging.getLogger(__name__)

Account = Admin | Organization | Operator | Owner

PASSWORD_CODE_DIGITS = 6


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _to_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def normalize_login(role: Role, login: str) -> str:
    if role in {Role.admin, Role.organization}:
        return clean_email(login)
    return clean_phone(login)


def find_account(db: Session, role: Role, login: str) -> Account | None:
    login = normalize_login(role, login)
    if role == Role.admin:
        return db.query(Admin).filter(Admin.email == login).first()
    if role == Role.organization:
        return db.query(Organization).filter(Organization.email == login).first()
    if role == Role.operator:
        return db.query(Operator).filter(Operator.phone == login).first()
    return db.query(Owner).filter(Owner.phone == login).first()


def get_account(db: Session, principal: Principal) -> Account | None:
    if isinstance(principal, AdminPrincipal):
        return db.get(Admin, principal.admin_id)
    if isinstance(principal, OrganizationPrincipal):
        return db.get(Organization, principal.organization_id)
    if isinstance(principal, OperatorPrincipal):
        return db.get(Operator, principal.operator_id)
    return db.get(Owner, principal.owner_id)


def principal_for(account: Account) -> Principal:
    if isinstance(account, Admin):
        return AdminPrincipal(admin_id=account.id, login=account.email)
    if isinstance(account, Organization):
        return OrganizationPrincipal(organization_id=account.id, login=account.email)
    if isinstance(account, Operator):
        return OperatorPrincipal(
            operator_id=account.id,
            organization_id=account.organization_id,
            login=account.phone,
        )
    return OwnerPrincipal(owner_id=account.id, organization_id=account.organization_id, login=account.phone)


def authenticate(db: Session, role: Role, login: str, password: str) -> Principal:
    account = find_account(db, role, login)
    if not account:
        raise AuthenticationException("invalid_credentials", error_code="INVALID_CREDENTIALS", status_code=401)
    if not account.password_hash:
        raise AuthenticationException(
            "password_reset_required",
            error_code="PASSWORD_RESET_REQUIRED",
            status_code=403,
        )
    if not verify_password(password, account.password_hash):
        logger.warning("Login failed: %s %s", role.value, normalize_login(role, login))
        raise AuthenticationException("invalid_credentials", error_code="INVALID_CREDENTIALS", status_code=401)
    return principal_for(account)


def issue_access_token(principal: Principal) -> str:
    return create_access_token(principal_claims(principal))


def generate_password_code() -> str:
    return f"{secrets.randbelow(10 ** PASSWORD_CODE_DIGITS):0{PASSWORD_CODE_DIGITS}d}"


def issue_password_code(db: Session, role: Role, login: str, sender: CodeSender) -> PasswordCode:
    login = normalize_login(role, login)
    if not find_account(db, role, login):
        raise NotFoundError("account_not_found", details={"role": role.value})

    code = db.get(PasswordCode, (role, login))
    if code is None:
        code = PasswordCode(role=role, login=login)
    code.code = generate_password_code()
    code.created_at = _utcnow()
    db.add(code)
    db.commit()
    db.refresh(code)

    deliver_password_code(sender, role, login, code.code)
    logger.info("Password code issued: %s %s", role.value, login)
    return code


def reset_password(db: Session, role: Role, login: str, code: str, new_password: str) -> Principal:
    login = normalize_login(role, login)
    account = find_account(db, role, login)
    stored = db.get(PasswordCode, (role, login))
    if not account or not stored:
        raise AuthenticationException("invalid_password_code", error_code="INVALID_PASSWORD_CODE", status_code=403)

    max_age = dt.timedelta(minutes=settings.PASSWORD_CODE_EXPIRE_MINUTES)
    if _utcnow() - _to_utc(stored.created_at) > max_age:
        logger.warning("Password reset failed: expired code (%s %s)", role.value, login)
        raise AuthenticationException("password_code_expired", error_code="PASSWORD_CODE_EXPIRED", status_code=403)
    if not secrets.compare_digest(stored.code, code):
        logger.warning("Password reset failed: wrong code (%s %s)", role.value, login)
        raise AuthenticationException("invalid_password_code", error_code="INVALID_PASSWORD_CODE", status_code=403)

    account.password_hash = hash_password(new_password)
    db.add(account)
    db.delete(stored)
    db.commit()
    logger.info("Password reset: %s %s", role.value, login)
    return principal_for(account)
