from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from finplan.models.bill import Bill, BillKind
from finplan.models.planning import Planning
from finplan.models.user import User


class RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class SignupPayload(RequestModel):
    name: str = Field(min_length=3, max_length=155)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    birthdate: date | None = None
    salary: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class LoginPayload(RequestModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UpdateUserPayload(RequestModel):
    name: str | None = Field(default=None, min_length=3, max_length=155)
    email: EmailStr | None = None
    birthdate: date | None = None
    salary: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    password: str | None = Field(default=None, min_length=6, max_length=128)


class CreateBillPayload(RequestModel):
    name: str = Field(min_length=3, max_length=155)
    value: Decimal = Field(ge=0, decimal_places=2)
    description: str | None = Field(default=None, max_length=2999)
    installments_number: int | None = Field(default=None, ge=1)
    created_at: datetime | None = None


class UpdateBillPayload(RequestModel):
    name: str | None = Field(default=None, min_length=3, max_length=155)
    value: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    description: str | None = Field(default=None, max_length=2999)
    installments_number: int | None = Field(default=None, ge=1)


class CreatePlanningPayload(RequestModel):
    name: str = Field(min_length=3, max_length=155)
    goal: str = Field(min_length=1, max_length=500)
    goal_value: Decimal = Field(gt=0, decimal_places=2)
    plan: str = Field(min_length=1)
    description: str | None = Field(default=None, max_length=2999)


class GeneratePlanningPayload(RequestModel):
    goal: str = Field(min_length=1, max_length=500)
    goal_value: Decimal = Field(gt=0, decimal_places=2)
    description: str | None = Field(default=None, max_length=2999)


class UpdatePlanningPayload(RequestModel):
    name: str | None = Field(default=None, min_length=3, max_length=155)
    goal: str | None = Field(default=None, min_length=1, max_length=500)
    goal_value: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    plan: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, max_length=2999)


class UserOut(BaseModel):
    uuid: str
    name: str
    email: str
    birthdate: date | None = None
    salary: Decimal | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> UserOut:
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))


class BillOut(BaseModel):
    uuid: str
    name: str
    value: Decimal
    description: str | None = None
    installments_number: int | None = None
    kind: BillKind
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_bill(cls, bill: Bill) -> BillOut:
        return cls.model_validate({**bill.model_dump(), "kind": bill.kind})


class PlanningOut(BaseModel):
    uuid: str
    name: str
    goal: str
    goal_value: Decimal
    plan: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_planning(cls, planning: Planning) -> PlanningOut:
        return cls.model_validate(planning.model_dump())
