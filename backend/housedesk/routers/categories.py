"""Category management and classifier training endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from housedesk.core.deps import get_current_principal, require_permission
from housedesk.core.exceptions import NotFoundError
from housedesk.db.session import get_db
from housedesk.schemas.category import (
    CategoryIn,
    CategoryOut,
    CategorySamplesIn,
    CategorySamplesResult,
    ClassifierTrainingOut,
)
from housedesk.services.categories import (
    create_category,
    delete_category,
    list_categories,
    rename_category,
    replace_samples,
    train_classifier,
)
from housedesk.services.classifier import ClassifierPort, get_classifier

router = APIRouter(dependencies=[Depends(get_current_principal)])

_view = Depends(require_permission("view_categories"))
_manage = Depends(require_permission("manage_categories"))
_train = Depends(require_permission("train_classifier"))


@router.get("/", response_model=list[CategoryOut], dependencies=[_view])
def get_categories(db: Session = Depends(get_db)) -> list[CategoryOut]:
    return [CategoryOut.model_validate(c) for c in list_categories(db)]


@router.post("/", response_model=CategoryOut, status_code=status.HTTP_201_CREATED, dependencies=[_manage])
def add_category(payload: CategoryIn, db: Session = Depends(get_db)) -> CategoryOut:
    return CategoryOut.model_validate(create_category(db, payload.name))


@router.put("/{category_id}", response_model=CategoryOut, dependencies=[_manage])
def put_category(
    payload: CategoryIn,
    category_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> CategoryOut:
    category = rename_category(db, category_id, payload.name)
    if not category:
        raise NotFoundError("category_not_found", details={"category_id": category_id})
    return CategoryOut.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[_manage],
)
def remove_category(category_id: int = Path(..., ge=1), db: Session = Depends(get_db)) -> Response:
    if not delete_category(db, category_id):
        raise NotFoundError("category_not_found", details={"category_id": category_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/samples", response_model=CategorySamplesResult, dependencies=[_manage])
def put_samples(payload: CategorySamplesIn, db: Session = Depends(get_db)) -> CategorySamplesResult:
    return CategorySamplesResult(count=replace_samples(db, payload.samples))


@router.post(
    "/samples/classifier",
    response_model=CategorySamplesResult,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[_train],
)
def start_training(
    db: Session = Depends(get_db),
    classifier: ClassifierPort = Depends(get_classifier),
) -> CategorySamplesResult:
    return CategorySamplesResult(count=train_classifier(db, classifier))


@router.get("/samples/classifier/training", response_model=ClassifierTrainingOut, dependencies=[_train])
def get_training(classifier: ClassifierPort = Depends(get_classifier)) -> ClassifierTrainingOut:
    return ClassifierTrainingOut(training=classifier.is_training())
