from __future__ import annotations

import random
from collections import Counter
from types import SimpleNamespace

from sqlalchemy.exc import OperationalError

from housedesk.models.account import Operator
from housedesk.services.assignment import AssignmentEngine
from housedesk.services.directory import find_responsible_operators


class _FakeDb:
    def __init__(self) -> None:
        self.rollbacks = 0

    def rollback(self) -> None:
        self.rollbacks += 1


def test_no_category_means_no_operator_and_no_lookup() -> None:
    def fail_lookup(db, organization_id, category_id):  # noqa: ANN001
        raise AssertionError("lookup must not run without a category")

    engine = AssignmentEngine(random.Random(1), lookup=fail_lookup)

    assert engine.select_operator(_FakeDb(), 1, None) is None


def test_no_responsible_operator_yields_none() -> None:
    engine = AssignmentEngine(random.Random(1), lookup=lambda _db, _org, _cat: [])

    assert engine.select_operator(_FakeDb(), 1, 3) is None


def test_lookup_failure_is_treated_as_no_operator() -> None:
    def broken_lookup(db, organization_id, category_id):  # noqa: ANN001
        raise OperationalError("SELECT 1", {}, Exception("connection reset"))

    db = _FakeDb()
    engine = AssignmentEngine(random.Random(1), lookup=broken_lookup)

    assert engine.select_operator(db, 1, 3) is None
    assert db.rollbacks == 1


def test_single_candidate_is_always_chosen() -> None:
    only = SimpleNamespace(id=42)
    engine = AssignmentEngine(random.Random(5), lookup=lambda _db, _org, _cat: [only])

    assert {engine.select_operator(_FakeDb(), 1, 3) for _ in range(20)} == {42}


def test_seeded_engines_make_identical_picks() -> None:
    candidates = [SimpleNamespace(id=i) for i in (10, 11, 12, 13)]

    def lookup(_db, _org, _cat):  # noqa: ANN001
        return candidates

    first = AssignmentEngine(random.Random(99), lookup=lookup)
    second = AssignmentEngine(random.Random(99), lookup=lookup)

    picks_a = [first.select_operator(_FakeDb(), 1, 3) for _ in range(50)]
    picks_b = [second.select_operator(_FakeDb(), 1, 3) for _ in range(50)]
    assert picks_a == picks_b


def test_directory_only_returns_operators_of_the_organization_and_category(db, tenant) -> None:
    assert [op.id for op in find_responsible_operators(db, tenant.organization_id, 3)] == [tenant.plumber_id]
    assert [op.id for op in find_responsible_operators(db, tenant.organization_id, 9)] == [tenant.electrician_id]
    assert find_responsible_operators(db, tenant.organization_id + 1, 3) == []


def test_picks_are_spread_across_responsible_operators(db, tenant) -> None:
    # A third operator in the same organization shares the electricity category.
    db.add(
        Operator(
            id=44,
            organization_id=tenant.organization_id,
            phone="+15550000044",
            name="Vera Volt",
            categories=[db.get(Operator, tenant.electrician_id).categories[0]],
        )
    )
    db.commit()

    engine = AssignmentEngine(random.Random(2024))
    picks = Counter(engine.select_operator(db, tenant.organization_id, 7) for _ in range(1000))

    assert set(picks) == {tenant.electrician_id, 44}
    assert picks[tenant.electrician_id] >= 400
    assert picks[44] >= 400
