"""Organization endpoints for managing its operators."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from housedesk.core.deps import require_organization, require_permission
from housedesk.core.exceptions import NotFoundError
from housedesk.core.rbac import OrganizationPrincipal
from housedesk.db.session import get_db
from housedesk.schemas.account import OperatorIn, OperatorOut
from housedesk.services.accounts import create_operator, delete_operator, update_operator
from housedesk.services.directory import list_organization_operators

router = APIRouter(dependencies=[Depends(require_permission("manage_operators"))])


@router.get("/", response_model=list[OperatorOut])
def get_operators(
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> list[OperatorOut]:
    return [OperatorOut.model_validate(o) for o in list_organization_operators(db, principal.organization_id)]


@router.post("/", response_model=OperatorOut, status_code=status.HTTP_201_CREATED)
def add_operator(
    payload: OperatorIn,
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> OperatorOut:
    return OperatorOut.model_validate(create_operator(db, principal.organization_id, payload))


@router.put("/{operator_id}", response_model=OperatorOut)
def put_operator(
    payload: OperatorIn,
    operator_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> OperatorOut:
    operator = update_operator(db, principal.organization_id, operator_id, payload)
    if not operator:
        raise NotFoundError("operator_not_found", details={"operator_id": operator_id})
    return OperatorOut.model_validate(operator)


@router.delete("/{operator_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def remove_operator(
    operator_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> Response:
    if not delete_operator(db, principal.organization_id, operator_id):
        raise NotFoundError("operator_not_found", details={"operator_id": operator_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
