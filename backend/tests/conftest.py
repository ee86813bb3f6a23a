from __future__ import annotations

import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

# The module-level engine must not try to reach Postgres during collection.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "development")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from housedesk.db.session import init_db  # noqa: E402
from housedesk.models.account import Operator, Organization, Owner  # noqa: E402
from housedesk.models.category import Category  # noqa: E402
from housedesk.models.enums import TicketStatus  # noqa: E402
from housedesk.models.ticket import Ticket  # noqa: E402


@pytest.fixture()
def engine(tmp_path):
    # File-backed so that several threads can hold their own connections.
    db_engine = create_engine(
        f"sqlite:///{tmp_path / 'housedesk.db'}",
        connect_args={"timeout": 30, "check_same_thread": False},
    )
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def tenant(db):
    """One organization with three categories, two operators and an owner."""
    plumbing = Category(id=3, name="plumbing")
    electricity = Category(id=7, name="electricity")
    heating = Category(id=9, name="heating")
    organization = Organization(name="Maple Court HOA", email="board@maple.example", flats_count=120)
    db.add_all([plumbing, electricity, heating, organization])
    db.flush()

    plumber = Operator(
        id=42,
        organization_id=organization.id,
        phone="+15550000042",
        name="Pat Plumber",
        categories=[plumbing],
    )
    electrician = Operator(
        id=43,
        organization_id=organization.id,
        phone="+15550000043",
        name="Eli Sparks",
        categories=[electricity, heating],
    )
    owner = Owner(
        organization_id=organization.id,
        phone="+15550001000",
        name="Olga Owner",
        address="12 Maple Court, flat 4",
    )
    db.add_all([plumber, electrician, owner])
    db.commit()

    return SimpleNamespace(
        organization_id=organization.id,
        owner_id=owner.id,
        plumber_id=plumber.id,
        electrician_id=electrician.id,
        categories={"plumbing": 3, "electricity": 7, "heating": 9},
    )


@pytest.fixture()
def make_ticket(db, tenant):
    def _make(
        *,
        status: TicketStatus = TicketStatus.new,
        operator_id: int | None = None,
        category_id: int | None = 3,
        text: str = "Kitchen tap is dripping",
    ) -> int:
        ticket = Ticket(
            organization_id=tenant.organization_id,
            owner_id=tenant.owner_id,
            operator_id=tenant.plumber_id if operator_id is None else operator_id,
            category_id=category_id,
            text=text,
            status=status,
        )
        db.add(ticket)
        db.commit()
        return ticket.id

    return _make


class FakeClassifier:
    """Classifier double returning a fixed label or raising a fixed error."""

    def __init__(self, label: int | None = None, error: Exception | None = None) -> None:
        self.label = label
        self.error = error
        self.classified: list[str] = []
        self.trained: list[list[tuple[int, str]]] = []
        self.training = False

    def train(self, samples) -> None:  # noqa: ANN001
        self.trained.append([(sample.category_id, sample.text) for sample in samples])

    def is_training(self) -> bool:
        return self.training

    def classify(self, text: str) -> int:
        self.classified.append(text)
        if self.error is not None:
            raise self.error
        return self.label


@pytest.fixture()
def fake_classifier():
    return FakeClassifier
