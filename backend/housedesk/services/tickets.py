"""Ticket creation and role-scoped ticket queries."""

from __future__ import annotations

import datetime as dt
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from housedesk.core.exceptions import ClassifierUnavailableError, NotFoundError, StorageError
from housedesk.core.rbac import Principal, can_view_ticket
from housedesk.models.category import Category
from housedesk.models.enums import TicketStatus
from housedesk.models.ticket import Ticket
from housedesk.services.assignment import AssignmentEngine, get_assignment_engine
from housedesk.services.classifier import ClassifierPort

logger = logging.getLogger(__name__)


def _ticket_query(db: Session):
    return db.query(Ticket).options(
        joinedload(Ticket.category),
        joinedload(Ticket.operator),
        joinedload(Ticket.owner),
    )


def _classify(db: Session, classifier: ClassifierPort, text: str) -> int | None:
    try:
        category_id = classifier.classify(text)
    except ClassifierUnavailableError as exc:
        logger.warning("Ticket classification skipped: %s %s", exc.message, exc.details)
        return None
    # A model trained before a category was deleted can still emit its label.
    try:
        known = db.get(Category, category_id) is not None
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Category lookup failed: %s", category_id)
        return None
    if not known:
        logger.warning("Classifier returned unknown category: %s", category_id)
        return None
    return category_id


def create_ticket(
    db: Session,
    *,
    organization_id: int,
    owner_id: int,
    text: str,
    classifier: ClassifierPort,
    engine: AssignmentEngine | None = None,
) -> Ticket:
    """Classify, route and store a new ticket.

    Classification and assignment are best effort: the ticket is stored
    without a category or operator when either step yields nothing. Only the
    insert itself can fail the call.
    """
    engine = engine or get_assignment_engine()

    category_id = _classify(db, classifier, text)
    operator_id = engine.select_operator(db, organization_id, category_id)

    ticket = Ticket(
        organization_id=organization_id,
        owner_id=owner_id,
        category_id=category_id,
        operator_id=operator_id,
        text=text,
        response=None,
        status=TicketStatus.new,
        created_at=dt.datetime.now(dt.timezone.utc),
    )
    try:
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Ticket insert failed: organization=%s owner=%s", organization_id, owner_id)
        raise StorageError() from exc

    logger.info(
        "Ticket created: %s category=%s operator=%s",
        ticket.id,
        ticket.category_id,
        ticket.operator_id,
    )
    return ticket


def list_owner_tickets(db: Session, owner_id: int) -> list[Ticket]:
    return _ticket_query(db).filter(Ticket.owner_id == owner_id).order_by(Ticket.created_at.desc()).all()


def list_operator_tickets(db: Session, operator_id: int) -> list[Ticket]:
    return _ticket_query(db).filter(Ticket.operator_id == operator_id).order_by(Ticket.created_at.desc()).all()


def list_organization_tickets(db: Session, organization_id: int) -> list[Ticket]:
    return (
        _ticket_query(db)
        .filter(Ticket.organization_id == organization_id)
        .order_by(Ticket.created_at.desc())
        .all()
    )


def get_ticket_for_principal(db: Session, ticket_id: int, principal: Principal) -> Ticket:
    ticket = _ticket_query(db).filter(Ticket.id == ticket_id).first()
    if not ticket or not can_view_ticket(principal, ticket):
        raise NotFoundError("ticket_not_found", details={"ticket_id": ticket_id})
    return ticket
