from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from ulid import ULID

from finplan.constants import APP_TZ
from finplan.models import CENTS
from finplan.models.bill import Bill
from finplan.models.planning import Planning
from finplan.models.user import User
from finplan.repositories.base import BillRepository, PlanningRepository, UserRepository


def _now() -> datetime:
    return datetime.now(APP_TZ)


def _money(value: Decimal | None) -> str | None:
    # Not every DBAPI driver binds Decimal, so amounts travel as text.
    if value is None:
        return None
    return str(value)


def _decimal(raw: object) -> Decimal | None:
    if raw is None:
        return None
    return Decimal(str(raw)).quantize(CENTS)


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_bill(row: RowMapping) -> Bill:
        return Bill(
            id=row["id"],
            uuid=row["uuid"],
            user_id=row["user_id"],
            name=row["name"],
            value=_decimal(row["value"]),
            description=row["description"],
            installments_number=row["installments_number"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def create(self, bill: Bill) -> Bill:
        bill_uuid = str(ULID())
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO bills (uuid, user_id, name, value, description, installments_number, "
                "created_at, updated_at) "
                "VALUES (:uuid, :user_id, :name, :value, :description, :installments_number, "
                ":created_at, :updated_at)"
            ),
            {
                "uuid": bill_uuid,
                "user_id": bill.user_id,
                "name": bill.name,
                "value": _money(bill.value),
                "description": bill.description,
                "installments_number": bill.installments_number,
                # Back-dated bills carry their own creation date so installment
                # plans already under way are counted correctly.
                "created_at": bill.created_at or now,
                "updated_at": now,
            },
        )
        bill_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(bill_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve bill after create (id={bill_id})")
        return created

    def get_by_id(self, bill_id: int) -> Bill | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE id = :id AND deleted_at IS NULL"),
                {"id": bill_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_bill(row)

    def get_by_uuid(self, uuid: str) -> Bill | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE uuid = :uuid AND deleted_at IS NULL"),
                {"uuid": uuid},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_bill(row)

    def list_by_user(self, user_id: int) -> list[Bill]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE user_id = :user_id AND deleted_at IS NULL ORDER BY id"),
                {"user_id": user_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_bill(row) for row in rows]

    def update(self, bill: Bill) -> Bill:
        if bill.id is None:
            raise ValueError("Cannot update bill without an id")
        self.conn.execute(
            text(
                "UPDATE bills SET name = :name, value = :value, description = :description, "
                "installments_number = :installments_number, updated_at = :updated_at WHERE id = :id"
            ),
            {
                "name": bill.name,
                "value": _money(bill.value),
                "description": bill.description,
                "installments_number": bill.installments_number,
                "updated_at": _now(),
                "id": bill.id,
            },
        )
        self.conn.commit()
        updated = self.get_by_id(bill.id)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve bill after update (id={bill.id})")
        return updated

    def soft_delete(self, bill_id: int) -> None:
        self.conn.execute(
            text("UPDATE bills SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": bill_id},
        )
        self.conn.commit()

    def hard_delete(self, bill_id: int) -> None:
        self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": bill_id})
        self.conn.commit()


class SQLAlchemyPlanningRepository(PlanningRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_planning(row: RowMapping) -> Planning:
        return Planning(
            id=row["id"],
            uuid=row["uuid"],
            user_id=row["user_id"],
            name=row["name"],
            goal=row["goal"],
            goal_value=_decimal(row["goal_value"]),
            plan=row["plan"],
            description=row["description"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def create(self, planning: Planning) -> Planning:
        planning_uuid = str(ULID())
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO plannings (uuid, user_id, name, goal, goal_value, plan, description, "
                "created_at, updated_at) "
                "VALUES (:uuid, :user_id, :name, :goal, :goal_value, :plan, :description, "
                ":created_at, :updated_at)"
            ),
            {
                "uuid": planning_uuid,
                "user_id": planning.user_id,
                "name": planning.name,
                "goal": planning.goal,
                "goal_value": _money(planning.goal_value),
                "plan": planning.plan,
                "description": planning.description,
                "created_at": now,
                "updated_at": now,
            },
        )
        planning_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(planning_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve planning after create (id={planning_id})")
        return created

    def get_by_id(self, planning_id: int) -> Planning | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM plannings WHERE id = :id AND deleted_at IS NULL"),
                {"id": planning_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_planning(row)

    def get_by_uuid(self, uuid: str) -> Planning | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM plannings WHERE uuid = :uuid AND deleted_at IS NULL"),
                {"uuid": uuid},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_planning(row)

    def list_by_user(self, user_id: int) -> list[Planning]:
        rows = (
            self.conn.execute(
                text(
                    "SELECT * FROM plannings WHERE user_id = :user_id AND deleted_at IS NULL "
                    "ORDER BY created_at DESC, id DESC"
                ),
                {"user_id": user_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_planning(row) for row in rows]

    def count_by_user(self, user_id: int) -> int:
        row = self.conn.execute(
            text("SELECT COUNT(*) FROM plannings WHERE user_id = :user_id AND deleted_at IS NULL"),
            {"user_id": user_id},
        ).fetchone()
        return row[0] if row else 0

    def update(self, planning: Planning) -> Planning:
        if planning.id is None:
            raise ValueError("Cannot update planning without an id")
        self.conn.execute(
            text(
                "UPDATE plannings SET name = :name, goal = :goal, goal_value = :goal_value, "
                "plan = :plan, description = :description, updated_at = :updated_at WHERE id = :id"
            ),
            {
                "name": planning.name,
                "goal": planning.goal,
                "goal_value": _money(planning.goal_value),
                "plan": planning.plan,
                "description": planning.description,
                "updated_at": _now(),
                "id": planning.id,
            },
        )
        self.conn.commit()
        updated = self.get_by_id(planning.id)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve planning after update (id={planning.id})")
        return updated

    def soft_delete(self, planning_id: int) -> None:
        self.conn.execute(
            text("UPDATE plannings SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": planning_id},
        )
        self.conn.commit()

    def hard_delete(self, planning_id: int) -> None:
        self.conn.execute(text("DELETE FROM plannings WHERE id = :id"), {"id": planning_id})
        self.conn.commit()


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_user(row: RowMapping) -> User:
        return User(
            id=row["id"],
            uuid=row["uuid"],
            name=row["name"],
            email=row["email"],
            birthdate=row["birthdate"],
            salary=_decimal(row["salary"]),
            password_hash=row["password_hash"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch_one(self, where: str, params: dict) -> User | None:
        row = (
            self.conn.execute(text(f"SELECT * FROM users WHERE {where} AND deleted_at IS NULL"), params)
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_user(row)

    def create(self, user: User) -> User:
        user_uuid = str(ULID())
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO users (uuid, name, email, birthdate, salary, password_hash, created_at, updated_at) "
                "VALUES (:uuid, :name, :email, :birthdate, :salary, :password_hash, :created_at, :updated_at)"
            ),
            {
                "uuid": user_uuid,
                "name": user.name,
                "email": user.email,
                "birthdate": user.birthdate,
                "salary": _money(user.salary),
                "password_hash": user.password_hash,
                "created_at": now,
                "updated_at": now,
            },
        )
        user_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(user_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve user after create (email={user.email})")
        return created

    def get_by_id(self, user_id: int) -> User | None:
        return self._fetch_one("id = :id", {"id": user_id})

    def get_by_uuid(self, uuid: str) -> User | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_by_email(self, email: str) -> User | None:
        return self._fetch_one("email = :email", {"email": email})

    def list_all(self) -> list[User]:
        rows = (
            self.conn.execute(text("SELECT * FROM users WHERE deleted_at IS NULL ORDER BY created_at DESC"))
            .mappings()
            .fetchall()
        )
        return [self._row_to_user(row) for row in rows]

    def update(self, user: User) -> User:
        if user.id is None:
            raise ValueError("Cannot update user without an id")
        self.conn.execute(
            text(
                "UPDATE users SET name = :name, email = :email, birthdate = :birthdate, "
                "salary = :salary, updated_at = :updated_at WHERE id = :id"
            ),
            {
                "name": user.name,
                "email": user.email,
                "birthdate": user.birthdate,
                "salary": _money(user.salary),
                "updated_at": _now(),
                "id": user.id,
            },
        )
        self.conn.commit()
        updated = self.get_by_id(user.id)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve user after update (id={user.id})")
        return updated

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        self.conn.execute(
            text("UPDATE users SET password_hash = :password_hash, updated_at = :updated_at WHERE id = :id"),
            {"password_hash": password_hash, "updated_at": _now(), "id": user_id},
        )
        self.conn.commit()

    def soft_delete(self, user_id: int) -> None:
        self.conn.execute(
            text("UPDATE users SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": user_id},
        )
        self.conn.commit()

    def hard_delete(self, user_id: int) -> None:
        self.conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": user_id})
        self.conn.commit()
