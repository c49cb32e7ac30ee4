from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from finplan.ai import AIServiceError
from finplan.db import initialize_db
from finplan.logging import configure_logging, reconfigure
from finplan.settings import settings
from web.auth import router as auth_router
from web.deps import AuthMiddleware, DBConnectionMiddleware
from web.routes.bill import router as bill_router
from web.routes.planning import router as planning_router
from web.routes.user import router as user_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Re-apply logging config, Alembic's fileConfig may have overridden it
    reconfigure()
    logger.info("Application started")
    yield


app = FastAPI(title="finplan", lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)
app.add_middleware(AuthMiddleware)
app.add_middleware(SessionMiddleware, secret_key=settings.get_secret_key())

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(bill_router)
app.include_router(planning_router)


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    logger.warning("Validation failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        {"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
        status_code=400,
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": str(exc)}, status_code=400)


@app.exception_handler(AIServiceError)
async def ai_service_error_handler(request: Request, exc: AIServiceError):
    logger.error("AI service failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": "AI service unavailable"}, status_code=502)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


@app.get("/health")
async def health():
    return {"status": "ok"}
