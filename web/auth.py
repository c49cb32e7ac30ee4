from __future__ import annotations

import logging
import time

from fastapi import APIRouter, HTTPException, Request

from web.deps import get_user_service
from web.schemas import LoginPayload, SignupPayload, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

# Simple in-memory rate limiter for login attempts
_login_attempts: dict[str, list[float]] = {}
_MAX_ATTEMPTS = 5
_LOCKOUT_SECONDS = 60


def _is_rate_limited(ip: str) -> bool:
    """Check if an IP is rate-limited. Returns True if locked out."""
    now = time.monotonic()
    attempts = _login_attempts.get(ip, [])
    attempts = [t for t in attempts if now - t < _LOCKOUT_SECONDS]
    _login_attempts[ip] = attempts
    return len(attempts) >= _MAX_ATTEMPTS


def _record_failed_attempt(ip: str) -> None:
    now = time.monotonic()
    attempts = _login_attempts.get(ip, [])
    attempts = [t for t in attempts if now - t < _LOCKOUT_SECONDS]
    attempts.append(now)
    _login_attempts[ip] = attempts


def _clear_attempts(ip: str) -> None:
    _login_attempts.pop(ip, None)


@router.post("/signup", status_code=201, response_model=UserOut)
async def signup(request: Request, payload: SignupPayload):
    user_service = get_user_service(request)
    try:
        user = user_service.register_user(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            birthdate=payload.birthdate,
            salary=payload.salary,
        )
    except ValueError:
        logger.warning("Signup rejected: duplicate email=%s", payload.email)
        raise HTTPException(status_code=409, detail="Email already registered")

    request.session.clear()
    request.session["user_id"] = user.id
    logger.info("User %s signed up", user.uuid)
    return UserOut.from_user(user)


@router.post("/login", response_model=UserOut)
async def login(request: Request, payload: LoginPayload):
    ip = request.client.host if request.client else "unknown"
    if _is_rate_limited(ip):
        logger.warning("Login rate-limited for ip=%s", ip)
        raise HTTPException(status_code=429, detail="Too many login attempts, try again later")

    user = get_user_service(request).authenticate(payload.email, payload.password)
    if user is None:
        _record_failed_attempt(ip)
        logger.warning("Failed login for email=%s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    _clear_attempts(ip)
    request.session.clear()
    request.session["user_id"] = user.id
    logger.info("User %s logged in", user.uuid)
    return UserOut.from_user(user)


@router.post("/logout", status_code=204)
async def logout(request: Request):
    request.session.clear()
