"""Ticket endpoints: owner submission, role-scoped listing, operator lifecycle actions."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, status
from sqlalchemy.orm import Session

from housedesk.core.deps import get_current_principal, require_operator, require_owner, require_permission
from housedesk.core.exceptions import InsufficientPermissionsError
from housedesk.core.rbac import OperatorPrincipal, OrganizationPrincipal, OwnerPrincipal, Principal
from housedesk.db.session import get_db
from housedesk.schemas.ticket import TicketCreate, TicketFinalize, TicketOut
from housedesk.services.assignment import AssignmentEngine, get_assignment_engine
from housedesk.services.classifier import ClassifierPort, get_classifier
from housedesk.services.lifecycle import claim_ticket, finalize_ticket
from housedesk.services.tickets import (
    create_ticket,
    get_ticket_for_principal,
    list_operator_tickets,
    list_organization_tickets,
    list_owner_tickets,
)

router = APIRouter(dependencies=[Depends(get_current_principal)])

_view = Depends(require_permission("view_tickets"))
_create = Depends(require_permission("create_ticket"))
_claim = Depends(require_permission("claim_ticket"))
_finalize = Depends(require_permission("finalize_ticket"))


@router.get("/", response_model=list[TicketOut], dependencies=[_view])
def get_tickets(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> list[TicketOut]:
    if isinstance(principal, OwnerPrincipal):
        tickets = list_owner_tickets(db, principal.owner_id)
    elif isinstance(principal, OperatorPrincipal):
        tickets = list_operator_tickets(db, principal.operator_id)
    elif isinstance(principal, OrganizationPrincipal):
        tickets = list_organization_tickets(db, principal.organization_id)
    else:
        raise InsufficientPermissionsError("forbidden")
    return [TicketOut.model_validate(t) for t in tickets]


@router.post(
    "/",
    response_model=TicketOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[_create],
)
def submit_ticket(
    payload: TicketCreate,
    db: Session = Depends(get_db),
    principal: OwnerPrincipal = Depends(require_owner),
    classifier: ClassifierPort = Depends(get_classifier),
    engine: AssignmentEngine = Depends(get_assignment_engine),
) -> TicketOut:
    ticket = create_ticket(
        db,
        organization_id=principal.organization_id,
        owner_id=principal.owner_id,
        text=payload.text,
        classifier=classifier,
        engine=engine,
    )
    return TicketOut.model_validate(ticket)


@router.get("/{ticket_id}", response_model=TicketOut, dependencies=[_view])
def get_ticket_by_id(
    ticket_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> TicketOut:
    return TicketOut.model_validate(get_ticket_for_principal(db, ticket_id, principal))


@router.post("/{ticket_id}/claim", response_model=TicketOut, dependencies=[_claim])
def claim(
    ticket_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    principal: OperatorPrincipal = Depends(require_operator),
) -> TicketOut:
    ticket = claim_ticket(db, operator_id=principal.operator_id, ticket_id=ticket_id)
    return TicketOut.model_validate(ticket)


@router.post("/{ticket_id}/finalize", response_model=TicketOut, dependencies=[_finalize])
def finalize(
    ticket_id: int = Path(..., ge=1),
    payload: TicketFinalize = Body(...),
    db: Session = Depends(get_db),
    principal: OperatorPrincipal = Depends(require_operator),
) -> TicketOut:
    ticket = finalize_ticket(
        db,
        operator_id=principal.operator_id,
        ticket_id=ticket_id,
        status=payload.status,
        response=payload.response,
    )
    return TicketOut.model_validate(ticket)
