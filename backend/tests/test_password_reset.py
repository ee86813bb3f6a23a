from __future__ import annotations

import datetime as dt

import pytest

from housedesk.core.exceptions import AuthenticationException, NotFoundError
from housedesk.core.rbac import OrganizationPrincipal, OwnerPrincipal
from housedesk.models.enums import Role
from housedesk.models.password_code import PasswordCode
from housedesk.services.auth import authenticate, issue_password_code, reset_password


class _RecordingSender:
    def __init__(self) -> None:
        self.emails: list[tuple[str, str]] = []
        self.sms: list[tuple[str, str]] = []

    def send_email(self, email: str, text: str) -> None:
        self.emails.append((email, text))

    def send_sms(self, phone: str, text: str) -> None:
        self.sms.append((phone, text))


def test_owner_code_goes_out_by_sms_with_normalized_phone(db, tenant) -> None:
    sender = _RecordingSender()

    code = issue_password_code(db, Role.owner, "+1 (555) 000-1000", sender)

    assert code.login == "+15550001000"
    assert len(code.code) == 6 and code.code.isdigit()
    assert sender.emails == []
    assert sender.sms == [("+15550001000", f"password reset code: {code.code}")]


def test_organization_code_goes_out_by_email(db, tenant) -> None:
    sender = _RecordingSender()

    issue_password_code(db, Role.organization, "Board@Maple.example", sender)

    assert [email for email, _ in sender.emails] == ["board@maple.example"]
    assert sender.sms == []


def test_code_for_unknown_account_is_not_issued(db, tenant) -> None:
    with pytest.raises(NotFoundError):
        issue_password_code(db, Role.operator, "+19990000000", _RecordingSender())

    assert db.query(PasswordCode).count() == 0


def test_fresh_code_sets_password_and_allows_login(db, tenant) -> None:
    code = issue_password_code(db, Role.owner, "+15550001000", _RecordingSender()).code

    with pytest.raises(AuthenticationException) as before:
        authenticate(db, Role.owner, "+15550001000", "whatever")
    assert before.value.message == "password_reset_required"

    principal = reset_password(db, Role.owner, "+15550001000", code, "correct horse battery")

    assert principal == OwnerPrincipal(owner_id=tenant.owner_id, organization_id=tenant.organization_id, login="+15550001000")
    assert db.get(PasswordCode, (Role.owner, "+15550001000")) is None
    assert authenticate(db, Role.owner, "+15550001000", "correct horse battery") == principal


def test_reissuing_replaces_the_previous_code(db, tenant) -> None:
    first = issue_password_code(db, Role.organization, "board@maple.example", _RecordingSender()).code
    second = issue_password_code(db, Role.organization, "board@maple.example", _RecordingSender()).code

    assert db.query(PasswordCode).count() == 1
    if first != second:
        with pytest.raises(AuthenticationException):
            reset_password(db, Role.organization, "board@maple.example", first, "long enough password")

    principal = reset_password(db, Role.organization, "board@maple.example", second, "long enough password")
    assert principal == OrganizationPrincipal(organization_id=tenant.organization_id, login="board@maple.example")


def test_expired_code_is_rejected(db, tenant) -> None:
    code = issue_password_code(db, Role.owner, "+15550001000", _RecordingSender())
    value = code.code
    code.created_at = dt.datetime.now(dt.timezone.utc) - dt.timedelta(minutes=61)
    db.commit()

    with pytest.raises(AuthenticationException) as exc:
        reset_password(db, Role.owner, "+15550001000", value, "correct horse battery")

    assert exc.value.message == "password_code_expired"
    assert exc.value.status_code == 403


def test_wrong_code_is_rejected(db, tenant) -> None:
    value = issue_password_code(db, Role.owner, "+15550001000", _RecordingSender()).code
    wrong = "000000" if value != "000000" else "111111"

    with pytest.raises(AuthenticationException) as exc:
        reset_password(db, Role.owner, "+15550001000", wrong, "correct horse battery")

    assert exc.value.message == "invalid_password_code"
    assert db.get(PasswordCode, (Role.owner, "+15550001000")) is not None


def test_wrong_password_is_rejected(db, tenant) -> None:
    value = issue_password_code(db, Role.owner, "+15550001000", _RecordingSender()).code
    reset_password(db, Role.owner, "+15550001000", value, "correct horse battery")

    with pytest.raises(AuthenticationException) as exc:
        authenticate(db, Role.owner, "+15550001000", "wrong horse battery")

    assert exc.value.status_code == 401
