"""Ticket status lifecycle: new -> in_progress -> resolved | rejected | irrelevant.

Every transition is written as a single conditional UPDATE that carries the
expected current status in its WHERE clause, so the guard check and the write
happen atomically in the database. Two operators racing to claim the same
ticket both issue the UPDATE, only one of them matches a row.

Callers must pass the id of the operator the ticket is assigned to; tickets
assigned to someone else are reported as not found.
"""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from housedesk.core.exceptions import BadRequestError, InvalidStatusError, InvalidTransitionError, NotFoundError, StorageError
from housedesk.models.enums import FINAL_STATUSES, TicketStatus, is_final
from housedesk.models.ticket import Ticket

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.new: frozenset({TicketStatus.in_progress}),
    TicketStatus.in_progress: FINAL_STATUSES,
    TicketStatus.resolved: frozenset(),
    TicketStatus.rejected: frozenset(),
    TicketStatus.irrelevant: frozenset(),
}


def next_status(current: TicketStatus, target: TicketStatus) -> TicketStatus:
    if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(details={"from": current.value, "to": target.value})
    return target


def _parse_final_status(value: TicketStatus | str) -> TicketStatus:
    try:
        status = TicketStatus(value)
    except ValueError:
        raise InvalidStatusError(details={"status": str(value)[:64]})
    if not is_final(status):
        raise InvalidStatusError(details={"status": status.value})
    return status


def get_operator_ticket(db: Session, operator_id: int, ticket_id: int) -> Ticket:
    ticket = (
        db.query(Ticket)
        .filter(Ticket.id == ticket_id, Ticket.operator_id == operator_id)
        .populate_existing()
        .first()
    )
    if not ticket:
        raise NotFoundError("ticket_not_found", details={"ticket_id": ticket_id})
    return ticket


def _compare_and_set(
    db: Session,
    *,
    operator_id: int,
    ticket_id: int,
    expected: TicketStatus,
    values: dict,
) -> bool:
    stmt = (
        update(Ticket)
        .where(
            Ticket.id == ticket_id,
            Ticket.operator_id == operator_id,
            Ticket.status == expected,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        if result.rowcount != 1:
            db.rollback()
            return False
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Ticket status write failed: %s", ticket_id)
        raise StorageError() from exc
    return True


def _rejected_transition(
    db: Session,
    *,
    operator_id: int,
    ticket_id: int,
    target: TicketStatus,
    message: str,
) -> InvalidTransitionError:
    # The row changed between our read and our write; report what it holds now.
    current = get_operator_ticket(db, operator_id, ticket_id)
    logger.info(
        "Ticket transition rejected: %s %s -> %s",
        ticket_id,
        current.status.value,
        target.value,
    )
    return InvalidTransitionError(
        message,
        details={"ticket_id": ticket_id, "from": current.status.value, "to": target.value},
    )


def claim_ticket(db: Session, *, operator_id: int, ticket_id: int) -> Ticket:
    ticket = get_operator_ticket(db, operator_id, ticket_id)
    if ticket.status != TicketStatus.new:
        raise InvalidTransitionError(
            "ticket_already_claimed" if ticket.status == TicketStatus.in_progress else "invalid_transition",
            details={"ticket_id": ticket_id, "from": ticket.status.value, "to": TicketStatus.in_progress.value},
        )

    applied = _compare_and_set(
        db,
        operator_id=operator_id,
        ticket_id=ticket_id,
        expected=TicketStatus.new,
        values={"status": TicketStatus.in_progress},
    )
    if not applied:
        raise _rejected_transition(
            db,
            operator_id=operator_id,
            ticket_id=ticket_id,
            target=TicketStatus.in_progress,
            message="ticket_already_claimed",
        )

    ticket = get_operator_ticket(db, operator_id, ticket_id)
    logger.info("Ticket claimed: %s by operator %s", ticket_id, operator_id)
    return ticket


def finalize_ticket(
    db: Session,
    *,
    operator_id: int,
    ticket_id: int,
    status: TicketStatus | str,
    response: str | None,
) -> Ticket:
    target = _parse_final_status(status)

    ticket = get_operator_ticket(db, operator_id, ticket_id)
    try:
        next_status(ticket.status, target)
    except InvalidTransitionError as exc:
        exc.details["ticket_id"] = ticket_id
        raise

    cleaned_response = (response or "").strip()
    if not cleaned_response:
        raise BadRequestError("response_required", details={"ticket_id": ticket_id})

    applied = _compare_and_set(
        db,
        operator_id=operator_id,
        ticket_id=ticket_id,
        expected=TicketStatus.in_progress,
        values={"status": target, "response": cleaned_response},
    )
    if not applied:
        raise _rejected_transition(
            db,
            operator_id=operator_id,
            ticket_id=ticket_id,
            target=target,
            message="invalid_transition",
        )

    ticket = get_operator_ticket(db, operator_id, ticket_id)
    logger.info("Ticket finalized: %s -> %s", ticket_id, target.value)
    return ticket
