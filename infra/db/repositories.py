# infra/db/repositories.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.domain.enums import GigStatus
from core.domain.expense import ExpenseRecord
from core.domain.gig import PATCHABLE_GIG_FIELDS, GigRecord
from core.domain.user import UserProfile
from core.exceptions import NotFoundError, PersistenceError, ValidationError
from core.interfaces import ExpenseRepository, GigRepository, UserProfileRepository
from infra.db.mappers import (
    expense_from_orm,
    expense_to_orm,
    gig_from_orm,
    gig_to_orm,
    profile_from_orm,
    profile_to_orm,
)
from infra.db.models import ExpenseORM, GigORM, UserProfileORM

logger = logging.getLogger(__name__)


def _coerce_patch_value(name: str, value: Any) -> Any:
    if name == "status" and value is not None:
        return value if isinstance(value, GigStatus) else GigStatus(str(value))
    if name == "got_paid_date" and isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


class SqlAlchemyGigRepository(GigRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, gig: GigRecord) -> GigRecord:
        obj = gig_to_orm(gig)
        self.session.add(obj)
        self.session.flush()
        return gig_from_orm(obj)

    def get(self, gig_id: int) -> Optional[GigRecord]:
        obj = self.session.get(GigORM, gig_id)
        return gig_from_orm(obj) if obj else None

    def list_by_user(self, user_id: int) -> List[GigRecord]:
        stmt = (
            select(GigORM)
            .where(GigORM.user_id == user_id)
            .order_by(GigORM.date, GigORM.id)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [gig_from_orm(row) for row in rows]

    def patch(self, gig_id: int, fields: Mapping[str, Any]) -> GigRecord:
        """Apply a partial update and commit it as one unit; nothing is kept on failure."""
        unknown = sorted(set(fields) - PATCHABLE_GIG_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be patched: {', '.join(unknown)}", code="GIG_PATCH_FIELDS")
        try:
            values = {name: _coerce_patch_value(name, value) for name, value in fields.items()}
        except ValueError as exc:
            raise ValidationError(str(exc), code="GIG_PATCH_VALUE") from exc

        obj = self.session.get(GigORM, gig_id)
        if obj is None:
            raise NotFoundError("Gig not found.", code="GIG_NOT_FOUND")
        try:
            for name, value in values.items():
                setattr(obj, name, value)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Patching gig %s failed", gig_id)
            raise PersistenceError("Could not save the gig update.", code="GIG_PATCH_FAILED") from exc
        return gig_from_orm(obj)


class SqlAlchemyExpenseRepository(ExpenseRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, expense: ExpenseRecord) -> ExpenseRecord:
        obj = expense_to_orm(expense)
        self.session.add(obj)
        self.session.flush()
        return expense_from_orm(obj)

    def delete(self, expense_id: int) -> None:
        obj = self.session.get(ExpenseORM, expense_id)
        if obj:
            self.session.delete(obj)

    def list_by_user(self, user_id: int) -> List[ExpenseRecord]:
        stmt = (
            select(ExpenseORM)
            .where(ExpenseORM.user_id == user_id)
            .order_by(ExpenseORM.date, ExpenseORM.id)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [expense_from_orm(row) for row in rows]


class SqlAlchemyUserProfileRepository(UserProfileRepository):
    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: int) -> Optional[UserProfile]:
        obj = self.session.get(UserProfileORM, user_id)
        return profile_from_orm(obj) if obj else None

    def upsert(self, profile: UserProfile) -> None:
        self.session.merge(profile_to_orm(profile))


__all__ = [
    "SqlAlchemyGigRepository",
    "SqlAlchemyExpenseRepository",
    "SqlAlchemyUserProfileRepository",
]
