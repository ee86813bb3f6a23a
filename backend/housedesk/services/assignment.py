"""Assignment of new tickets to a responsible operator.

Among the operators of the ticket's organization who are responsible for its
category, one is picked uniformly at random. Random choice spreads incoming
load across operators sharing a category; callers that need reproducible
picks (tests, replays) pass a seeded ``random.Random``.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from housedesk.core.config import settings
from housedesk.models.account import Operator
from housedesk.services.directory import find_responsible_operators

logger = logging.getLogger(__name__)

OperatorLookup = Callable[[Session, int, int], list[Operator]]


class AssignmentEngine:
    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        lookup: OperatorLookup = find_responsible_operators,
    ) -> None:
        self.rng = rng or random.Random(settings.ASSIGNMENT_RANDOM_SEED)
        self.lookup = lookup

    def select_operator(self, db: Session, organization_id: int, category_id: int | None) -> int | None:
        if category_id is None:
            return None

        try:
            candidates = self.lookup(db, organization_id, category_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception(
                "Operator lookup failed: organization=%s category=%s",
                organization_id,
                category_id,
            )
            return None

        if not candidates:
            logger.info(
                "No responsible operator: organization=%s category=%s",
                organization_id,
                category_id,
            )
            return None

        chosen = self.rng.choice(candidates)
        logger.debug(
            "Operator %s picked from %s candidates for category %s",
            chosen.id,
            len(candidates),
            category_id,
        )
        return chosen.id


_default_engine: AssignmentEngine | None = None


def get_assignment_engine() -> AssignmentEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = AssignmentEngine()
    return _default_engine
