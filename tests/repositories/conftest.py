import pytest
from sqlalchemy import Connection

from finplan.models.user import User
from finplan.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyPlanningRepository,
    SQLAlchemyUserRepository,
)


@pytest.fixture()
def user_repo(db_connection: Connection) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db_connection)


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def planning_repo(db_connection: Connection) -> SQLAlchemyPlanningRepository:
    return SQLAlchemyPlanningRepository(db_connection)


@pytest.fixture()
def owner(user_repo: SQLAlchemyUserRepository, sample_user: User) -> User:
    return user_repo.create(sample_user)
