from finplan.repositories.base import BillRepository, PlanningRepository, UserRepository


def get_bill_repository() -> BillRepository:
    from finplan.db import get_connection
    from finplan.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())


def get_planning_repository() -> PlanningRepository:
    from finplan.db import get_connection
    from finplan.repositories.sqlalchemy import SQLAlchemyPlanningRepository

    return SQLAlchemyPlanningRepository(get_connection())


def get_user_repository() -> UserRepository:
    from finplan.db import get_connection
    from finplan.repositories.sqlalchemy import SQLAlchemyUserRepository

    return SQLAlchemyUserRepository(get_connection())
