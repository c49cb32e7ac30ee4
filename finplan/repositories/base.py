from abc import ABC, abstractmethod

from finplan.models.bill import Bill
from finplan.models.planning import Planning
from finplan.models.user import User


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Bill | None: ...

    @abstractmethod
    def list_by_user(self, user_id: int) -> list[Bill]:
        """Non-deleted bills of a user in insertion order; empty when none exist."""

    @abstractmethod
    def update(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def soft_delete(self, bill_id: int) -> None: ...

    @abstractmethod
    def hard_delete(self, bill_id: int) -> None: ...


class PlanningRepository(ABC):
    @abstractmethod
    def create(self, planning: Planning) -> Planning: ...

    @abstractmethod
    def get_by_id(self, planning_id: int) -> Planning | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Planning | None: ...

    @abstractmethod
    def list_by_user(self, user_id: int) -> list[Planning]: ...

    @abstractmethod
    def count_by_user(self, user_id: int) -> int: ...

    @abstractmethod
    def update(self, planning: Planning) -> Planning: ...

    @abstractmethod
    def soft_delete(self, planning_id: int) -> None: ...

    @abstractmethod
    def hard_delete(self, planning_id: int) -> None: ...


class UserRepository(ABC):
    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> User | None: ...

    @abstractmethod
    def get_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def list_all(self) -> list[User]: ...

    @abstractmethod
    def update(self, user: User) -> User: ...

    @abstractmethod
    def update_password_hash(self, user_id: int, password_hash: str) -> None: ...

    @abstractmethod
    def soft_delete(self, user_id: int) -> None: ...

    @abstractmethod
    def hard_delete(self, user_id: int) -> None: ...
