"""Admin endpoints for organization management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from housedesk.core.deps import require_permission
from housedesk.core.exceptions import NotFoundError
from housedesk.db.session import get_db
from housedesk.schemas.account import OrganizationIn, OrganizationOut
from housedesk.services.accounts import (
    create_organization,
    delete_organization,
    list_organizations,
    update_organization,
)

router = APIRouter(dependencies=[Depends(require_permission("manage_organizations"))])


@router.get("/", response_model=list[OrganizationOut])
def get_organizations(db: Session = Depends(get_db)) -> list[OrganizationOut]:
    return [OrganizationOut.model_validate(o) for o in list_organizations(db)]


@router.post("/", response_model=OrganizationOut, status_code=status.HTTP_201_CREATED)
def add_organization(payload: OrganizationIn, db: Session = Depends(get_db)) -> OrganizationOut:
    return OrganizationOut.model_validate(create_organization(db, payload))


@router.put("/{organization_id}", response_model=OrganizationOut)
def put_organization(
    payload: OrganizationIn,
    organization_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> OrganizationOut:
    organization = update_organization(db, organization_id, payload)
    if not organization:
        raise NotFoundError("organization_not_found", details={"organization_id": organization_id})
    return OrganizationOut.model_validate(organization)


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, response_model=None)
def remove_organization(organization_id: int = Path(..., ge=1), db: Session = Depends(get_db)) -> Response:
    if not delete_organization(db, organization_id):
        raise NotFoundError("organization_not_found", details={"organization_id": organization_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
