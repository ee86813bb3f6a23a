"""Authenticated identities and the per-role permission policy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from housedesk.models.enums import Role
from housedesk.models.ticket import Ticket

Permission = str


@dataclass(frozen=True)
class AdminPrincipal:
    role: ClassVar[Role] = Role.admin
    admin_id: int
    login: str

    @property
    def subject_id(self) -> int:
        return self.admin_id


@dataclass(frozen=True)
class OrganizationPrincipal:
    role: ClassVar[Role] = Role.organization
    organization_id: int
    login: str

    @property
    def subject_id(self) -> int:
        return self.organization_id


@dataclass(frozen=True)
class OperatorPrincipal:
    role: ClassVar[Role] = Role.operator
    operator_id: int
    organization_id: int
    login: str

    @property
    def subject_id(self) -> int:
        return self.operator_id


@dataclass(frozen=True)
class OwnerPrincipal:
    role: ClassVar[Role] = Role.owner
    owner_id: int
    organization_id: int
    login: str

    @property
    def subject_id(self) -> int:
        return self.owner_id


Principal = AdminPrincipal | OrganizationPrincipal | OperatorPrincipal | OwnerPrincipal


ROLE_PERMISSIONS: dict[Role, set[Permission]] = {
    Role.admin: {
        "manage_categories",
        "train_classifier",
        "manage_organizations",
        "view_categories",
    },
    Role.organization: {
        "manage_operators",
        "manage_owners",
        "view_tickets",
        "view_categories",
    },
    Role.operator: {
        "view_tickets",
        "claim_ticket",
        "finalize_ticket",
        "view_categories",
    },
    Role.owner: {
        "view_tickets",
        "create_ticket",
        "view_categories",
    },
}


def has_permission(principal: Principal, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(principal.role, set())


def principal_claims(principal: Principal) -> dict[str, Any]:
    claims: dict[str, Any] = {
        "sub": str(principal.subject_id),
        "role": principal.role.value,
        "login": principal.login,
    }
    organization_id = getattr(principal, "organization_id", None)
    if organization_id is not None and principal.role != Role.organization:
        claims["org"] = organization_id
    return claims


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Rebuild a principal from decoded token claims; raises ValueError on junk."""
    try:
        role = Role(payload.get("role"))
        subject_id = int(payload["sub"])
        login = str(payload.get("login") or "")
        if role == Role.admin:
            return AdminPrincipal(admin_id=subject_id, login=login)
        if role == Role.organization:
            return OrganizationPrincipal(organization_id=subject_id, login=login)
        organization_id = int(payload["org"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError("invalid_claims") from exc
    if role == Role.operator:
        return OperatorPrincipal(operator_id=subject_id, organization_id=organization_id, login=login)
    return OwnerPrincipal(owner_id=subject_id, organization_id=organization_id, login=login)


def can_view_ticket(principal: Principal, ticket: Ticket) -> bool:
    if isinstance(principal, OwnerPrincipal):
        return ticket.owner_id == principal.owner_id
    if isinstance(principal, OperatorPrincipal):
        return ticket.operator_id == principal.operator_id
    if isinstance(principal, OrganizationPrincipal):
        return ticket.organization_id == principal.organization_id
    return False
