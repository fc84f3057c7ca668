# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from core.domain.distance import DistanceRequest, DistanceResult
from core.domain.expense import ExpenseRecord
from core.domain.gig import GigRecord
from core.domain.user import UserProfile


class GigRepository(ABC):
    @abstractmethod
    def add(self, gig: GigRecord) -> GigRecord: ...

    @abstractmethod
    def get(self, gig_id: int) -> Optional[GigRecord]: ...

    @abstractmethod
    def list_by_user(self, user_id: int) -> List[GigRecord]: ...

    @abstractmethod
    def patch(self, gig_id: int, fields: Mapping[str, Any]) -> GigRecord: ...


class ExpenseRepository(ABC):
    @abstractmethod
    def add(self, expense: ExpenseRecord) -> ExpenseRecord: ...

    @abstractmethod
    def delete(self, expense_id: int) -> None: ...

    @abstractmethod
    def list_by_user(self, user_id: int) -> List[ExpenseRecord]: ...


class UserProfileRepository(ABC):
    @abstractmethod
    def get(self, user_id: int) -> Optional[UserProfile]: ...

    @abstractmethod
    def upsert(self, profile: UserProfile) -> None: ...


class DistanceCalculator(ABC):
    """Driving-distance lookup. Unresolved addresses return an error result, never raise."""

    @abstractmethod
    def distance(self, request: DistanceRequest) -> DistanceResult: ...


__all__ = [
    "GigRepository",
    "ExpenseRepository",
    "UserProfileRepository",
    "DistanceCalculator",
]
