"""Category management and classifier training."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from housedesk.core.exceptions import BadRequestError
from housedesk.models.category import Category, CategorySample
from housedesk.schemas.category import CategorySampleIn
from housedesk.services.classifier import ClassifierPort

logger = logging.getLogger(__name__)


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.id.asc()).all()


def create_category(db: Session, name: str) -> Category:
    category = Category(name=name)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category created: %s (%s)", category.id, category.name)
    return category


def rename_category(db: Session, category_id: int, name: str) -> Category | None:
    category = db.get(Category, category_id)
    if not category:
        logger.warning("Category rename failed (not found): %s", category_id)
        return None
    category.name = name
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> bool:
    category = db.get(Category, category_id)
    if not category:
        logger.warning("Category delete failed (not found): %s", category_id)
        return False
    db.delete(category)
    db.commit()
    logger.info("Category deleted: %s", category_id)
    return True


def list_samples(db: Session) -> list[CategorySample]:
    return db.query(CategorySample).order_by(CategorySample.id.asc()).all()


def replace_samples(db: Session, samples: list[CategorySampleIn]) -> int:
    """Swap the whole training set in one transaction."""
    known = {row[0] for row in db.query(Category.id).all()}
    unknown = sorted({s.category_id for s in samples} - known)
    if unknown:
        raise BadRequestError("unknown_category", details={"category_ids": unknown})

    db.query(CategorySample).delete(synchronize_session=False)
    db.add_all(CategorySample(category_id=s.category_id, text=s.text) for s in samples)
    db.commit()
    logger.info("Category samples replaced: %s", len(samples))
    return len(samples)


def train_classifier(db: Session, classifier: ClassifierPort) -> int:
    samples = list_samples(db)
    if not samples:
        raise BadRequestError("no_category_samples")
    classifier.train(samples)
    return len(samples)
