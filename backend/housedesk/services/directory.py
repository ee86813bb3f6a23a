"""Operator directory: who in an organization handles which categories."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from housedesk.models.account import Operator, operator_categories


def find_responsible_operators(db: Session, organization_id: int, category_id: int) -> list[Operator]:
    stmt = (
        select(Operator)
        .join(operator_categories, operator_categories.c.operator_id == Operator.id)
        .where(
            Operator.organization_id == organization_id,
            operator_categories.c.category_id == category_id,
        )
        .order_by(Operator.id.asc())
    )
    return list(db.scalars(stmt).unique().all())


def list_organization_operators(db: Session, organization_id: int) -> list[Operator]:
    return (
        db.query(Operator)
        .filter(Operator.organization_id == organization_id)
        .order_by(Operator.name.asc())
        .all()
    )
