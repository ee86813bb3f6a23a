"""Delivery of password reset codes over email and SMS."""

from __future__ import annotations

import logging
from typing import Protocol

from housedesk.models.enums import Role

logger = logging.getLogger(__name__)

EMAIL_ROLES = frozenset({Role.admin, Role.organization})


class CodeSender(Protocol):
    def send_email(self, email: str, text: str) -> None: ...

    def send_sms(self, phone: str, text: str) -> None: ...


class LoggingCodeSender:
    """Writes outgoing messages to the log instead of a gateway."""

    def send_email(self, email: str, text: str) -> None:
        logger.info("Email to %s: %s", email, text)

    def send_sms(self, phone: str, text: str) -> None:
        logger.info("SMS to %s: %s", phone, text)


def deliver_password_code(sender: CodeSender, role: Role, login: str, code: str) -> None:
    text = f"password reset code: {code}"
    if role in EMAIL_ROLES:
        sender.send_email(login, text)
    else:
        sender.send_sms(login, text)


def get_code_sender() -> CodeSender:
    return LoggingCodeSender()
