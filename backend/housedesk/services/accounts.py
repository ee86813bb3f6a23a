"""Service helpers for organizations, operators and owners."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from housedesk.core.exceptions import BadRequestError, ConflictError
from housedesk.models.account import Operator, Organization, Owner
from housedesk.models.category import Category
from housedesk.schemas.account import OperatorIn, OrganizationIn, OwnerIn

logger = logging.getLogger(__name__)


def _commit_unique(db: Session, conflict: str, details: dict) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(conflict, details=details)


# ===== ORGANIZATIONS =====


def list_organizations(db: Session) -> list[Organization]:
    return db.query(Organization).order_by(Organization.name.asc()).all()


def create_organization(db: Session, data: OrganizationIn) -> Organization:
    organization = Organization(name=data.name, email=data.email, flats_count=data.flats_count)
    db.add(organization)
    _commit_unique(db, "email_exists", {"email": data.email})
    db.refresh(organization)
    logger.info("Organization created: %s", organization.id)
    return organization


def update_organization(db: Session, organization_id: int, data: OrganizationIn) -> Organization | None:
    organization = db.get(Organization, organization_id)
    if not organization:
        logger.warning("Organization update failed (not found): %s", organization_id)
        return None
    organization.name = data.name
    organization.email = data.email
    organization.flats_count = data.flats_count
    db.add(organization)
    _commit_unique(db, "email_exists", {"email": data.email})
    db.refresh(organization)
    return organization


def delete_organization(db: Session, organization_id: int) -> bool:
    organization = db.get(Organization, organization_id)
    if not organization:
        logger.warning("Organization delete failed (not found): %s", organization_id)
        return False
    db.delete(organization)
    db.commit()
    logger.info("Organization deleted: %s", organization_id)
    return True


# ===== OPERATORS =====


def _load_categories(db: Session, category_ids: list[int]) -> list[Category]:
    if not category_ids:
        return []
    categories = db.query(Category).filter(Category.id.in_(category_ids)).all()
    missing = set(category_ids) - {c.id for c in categories}
    if missing:
        raise BadRequestError("unknown_category", details={"category_ids": sorted(missing)})
    return categories


def get_organization_operator(db: Session, organization_id: int, operator_id: int) -> Operator | None:
    return (
        db.query(Operator)
        .filter(Operator.organization_id == organization_id, Operator.id == operator_id)
        .first()
    )


def create_operator(db: Session, organization_id: int, data: OperatorIn) -> Operator:
    operator = Operator(
        organization_id=organization_id,
        phone=data.phone,
        name=data.name,
        categories=_load_categories(db, data.responsible_categories),
    )
    db.add(operator)
    _commit_unique(db, "phone_exists", {"phone": data.phone})
    db.refresh(operator)
    logger.info("Operator created: %s in organization %s", operator.id, organization_id)
    return operator


def update_operator(db: Session, organization_id: int, operator_id: int, data: OperatorIn) -> Operator | None:
    operator = get_organization_operator(db, organization_id, operator_id)
    if not operator:
        logger.warning("Operator update failed (not found): %s", operator_id)
        return None
    operator.phone = data.phone
    operator.name = data.name
    operator.categories = _load_categories(db, data.responsible_categories)
    db.add(operator)
    _commit_unique(db, "phone_exists", {"phone": data.phone})
    db.refresh(operator)
    return operator


def delete_operator(db: Session, organization_id: int, operator_id: int) -> bool:
    operator = get_organization_operator(db, organization_id, operator_id)
    if not operator:
        logger.warning("Operator delete failed (not found): %s", operator_id)
        return False
    db.delete(operator)
    db.commit()
    logger.info("Operator deleted: %s", operator_id)
    return True


# ===== OWNERS =====


def list_organization_owners(db: Session, organization_id: int) -> list[Owner]:
    return (
        db.query(Owner)
        .filter(Owner.organization_id == organization_id)
        .order_by(Owner.name.asc())
        .all()
    )


def get_organization_owner(db: Session, organization_id: int, owner_id: int) -> Owner | None:
    return db.query(Owner).filter(Owner.organization_id == organization_id, Owner.id == owner_id).first()


def create_owner(db: Session, organization_id: int, data: OwnerIn) -> Owner:
    owner = Owner(organization_id=organization_id, phone=data.phone, name=data.name, address=data.address)
    db.add(owner)
    _commit_unique(db, "phone_exists", {"phone": data.phone})
    db.refresh(owner)
    logger.info("Owner created: %s in organization %s", owner.id, organization_id)
    return owner


def update_owner(db: Session, organization_id: int, owner_id: int, data: OwnerIn) -> Owner | None:
    owner = get_organization_owner(db, organization_id, owner_id)
    if not owner:
        logger.warning("Owner update failed (not found): %s", owner_id)
        return None
    owner.phone = data.phone
    owner.name = data.name
    owner.address = data.address
    db.add(owner)
    _commit_unique(db, "phone_exists", {"phone": data.phone})
    db.refresh(owner)
    return owner


def delete_owner(db: Session, organization_id: int, owner_id: int) -> bool:
    owner = get_organization_owner(db, organization_id, owner_id)
    if not owner:
        logger.warning("Owner delete failed (not found): %s", owner_id)
        return False
    db.delete(owner)
    db.commit()
    logger.info("Owner deleted: %s", owner_id)
    return True
