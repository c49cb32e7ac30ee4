from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

import bcrypt

from finplan.models.summary import UserSummary
from finplan.models.user import User
from finplan.repositories.base import PlanningRepository, UserRepository
from finplan.services.bills_summary import BillsSummaryService

logger = logging.getLogger(__name__)


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


class UserService:
    def __init__(
        self,
        repo: UserRepository,
        planning_repo: PlanningRepository | None = None,
        summary_service: BillsSummaryService | None = None,
    ) -> None:
        self.repo = repo
        self.planning_repo = planning_repo
        self.summary_service = summary_service

    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        birthdate: date | None = None,
        salary: Decimal | None = None,
    ) -> User:
        existing = self.repo.get_by_email(email)
        if existing is not None:
            raise ValueError(f"Email '{email}' is already registered")
        user = User(
            name=name,
            email=email,
            birthdate=birthdate,
            salary=salary,
            password_hash=_hash_password(password),
        )
        result = self.repo.create(user)
        logger.info("User registered: %s", result.uuid)
        return result

    def authenticate(self, email: str, password: str) -> User | None:
        user = self.repo.get_by_email(email)
        if user is None:
            return None
        if bcrypt.checkpw(password.encode(), user.password_hash.encode()):
            return user
        return None

    def get_by_id(self, user_id: int) -> User | None:
        return self.repo.get_by_id(user_id)

    def get_by_uuid(self, uuid: str) -> User | None:
        return self.repo.get_by_uuid(uuid)

    def list_users(self) -> list[User]:
        return self.repo.list_all()

    def update_user(self, user: User, **changes: Any) -> User:
        if "email" in changes and changes["email"] != user.email:
            existing = self.repo.get_by_email(changes["email"])
            if existing is not None and existing.id != user.id:
                raise ValueError(f"Email '{changes['email']}' is already registered")
        candidate = User.model_validate({**user.model_dump(), **changes})
        result = self.repo.update(candidate)
        logger.info("User updated: %s, fields=%s", result.uuid, sorted(changes))
        return result

    def change_password(self, user: User, new_password: str) -> None:
        if user.id is None:
            raise ValueError("Cannot change password for user without an id")
        self.repo.update_password_hash(user.id, _hash_password(new_password))
        logger.info("Password changed for user: %s", user.uuid)

    def delete_user(self, user: User, permanent: bool = False) -> None:
        if user.id is None:
            raise ValueError("Cannot delete user without an id")
        if permanent:
            self.repo.hard_delete(user.id)
            logger.info("User %s permanently deleted", user.uuid)
            return
        self.repo.soft_delete(user.id)
        logger.info("User %s soft-deleted", user.uuid)

    def get_user_summary(self, user: User) -> UserSummary:
        if self.summary_service is None or self.planning_repo is None:
            raise RuntimeError("User summary is not configured")
        if user.id is None:
            raise ValueError("Cannot summarize user without an id")
        bills = self.summary_service.compute_summary(user.id)
        return UserSummary(
            id=user.uuid,
            name=user.name,
            salary=user.salary,
            bills_active_count=bills.bills_active_count,
            plannings_count=self.planning_repo.count_by_user(user.id),
            total_bills_value_monthly=bills.total_value,
            partial_value_next_month=bills.partial_value_next_month,
            partial_value_2_months_later=bills.partial_value_2_months_later,
            partial_value_3_months_later=bills.partial_value_3_months_later,
        )
