"""Ticket categories and the labeled samples used to train the classifier."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from housedesk.db.base import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    samples: Mapped[list[CategorySample]] = relationship(
        "CategorySample",
        back_populates="category",
        cascade="all, delete-orphan",
    )


class CategorySample(Base):
    __tablename__ = "category_samples"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    category: Mapped[Category] = relationship("Category", back_populates="samples")
