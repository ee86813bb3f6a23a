"""Organization endpoints for managing its owners."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from housedesk.core.deps import require_organization, require_permission
from housedesk.core.exceptions import NotFoundError
from housedesk.core.rbac import OrganizationPrincipal
from housedesk.db.session import get_db
from housedesk.schemas.account import OwnerIn, OwnerOut
from housedesk.services.accounts import create_owner, delete_owner, list_organization_owners, update_owner

router = APIRouter(dependencies=[Depends(require_permission("manage_owners"))])


@router.get("/", response_model=list[OwnerOut])
def get_owners(
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> list[OwnerOut]:
    return [OwnerOut.model_validate(o) for o in list_organization_owners(db, principal.organization_id)]


@router.post("/", response_model=OwnerOut, status_code=status.HTTP_201_CREATED)
def add_owner(
    payload: OwnerIn,
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> OwnerOut:
    return OwnerOut.model_validate(create_owner(db, principal.organization_id, payload))


@router.put("/{owner_id}", response_model=OwnerOut)
def put_owner(
    payload: OwnerIn,
    owner_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> OwnerOut:
    owner = update_owner(db, principal.organization_id, owner_id, payload)
    if not owner:
        raise NotFoundError("owner_not_found", details={"owner_id": owner_id})
    return OwnerOut.model_validate(owner)


@router.delete("/{owner_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def remove_owner(
    owner_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
    principal: OrganizationPrincipal = Depends(require_organization),
) -> Response:
    if not delete_owner(db, principal.organization_id, owner_id):
        raise NotFoundError("owner_not_found", details={"owner_id": owner_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
