from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from finplan.ai import AIClient
from finplan.db import get_engine
from finplan.models.user import User
from finplan.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyPlanningRepository,
    SQLAlchemyUserRepository,
)
from finplan.services.bill_service import BillService
from finplan.services.bills_summary import BillsSummaryService
from finplan.services.planning_service import PlanningService
from finplan.services.user_service import UserService

logger = logging.getLogger(__name__)

PUBLIC_PREFIX_PATHS = {"/login", "/signup", "/docs", "/openapi.json"}
PUBLIC_EXACT_PATHS = {"/health"}


class AuthMiddleware:
    """Pure ASGI middleware for authentication checks."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        path = request.url.path
        if path in PUBLIC_EXACT_PATHS or any(path.startswith(p) for p in PUBLIC_PREFIX_PATHS):
            await self.app(scope, receive, send)
            return
        if not request.session.get("user_id"):
            logger.info("Auth rejected: %s %s, no session", request.method, path)
            response = JSONResponse({"detail": "Not authenticated"}, status_code=401)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


class DBConnectionMiddleware:
    """Pure ASGI middleware, creates a single DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection, created on first use and closed by middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_ai_client() -> AIClient:
    return AIClient()


def get_bills_summary_service(request: Request) -> BillsSummaryService:
    return BillsSummaryService(SQLAlchemyBillRepository(_get_conn(request)))


def get_bill_service(request: Request) -> BillService:
    return BillService(SQLAlchemyBillRepository(_get_conn(request)))


def get_planning_service(request: Request) -> PlanningService:
    return PlanningService(SQLAlchemyPlanningRepository(_get_conn(request)))


def get_planning_generator(request: Request) -> PlanningService:
    return PlanningService(
        SQLAlchemyPlanningRepository(_get_conn(request)),
        get_bills_summary_service(request),
        get_ai_client(),
    )


def get_user_service(request: Request) -> UserService:
    conn = _get_conn(request)
    return UserService(
        SQLAlchemyUserRepository(conn),
        SQLAlchemyPlanningRepository(conn),
        get_bills_summary_service(request),
    )


def current_user(request: Request) -> User:
    """Load the session user, or fail with 401 when it no longer exists."""
    user = get_user_service(request).get_by_id(request.session.get("user_id"))
    if user is None:
        logger.warning("Session user %s not found, clearing session", request.session.get("user_id"))
        request.session.clear()
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
