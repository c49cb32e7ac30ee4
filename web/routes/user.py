from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from finplan.models.summary import UserSummary
from web.deps import current_user, get_user_service
from web.schemas import UpdateUserPayload, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users")


@router.get("/me", response_model=UserOut)
async def user_detail(request: Request):
    return UserOut.from_user(current_user(request))


@router.patch("/me", response_model=UserOut)
async def user_update(request: Request, payload: UpdateUserPayload):
    user = current_user(request)
    user_service = get_user_service(request)
    changes = payload.model_dump(exclude_unset=True)
    password = changes.pop("password", None)

    if changes:
        try:
            user = user_service.update_user(user, **changes)
        except ValueError as e:
            logger.warning("User update rejected for %s: %s", user.uuid, e)
            raise HTTPException(status_code=409, detail="Email already registered") from e
    if password:
        user_service.change_password(user, password)
    return UserOut.from_user(user)


@router.delete("/me", status_code=204)
async def user_delete(request: Request, permanent: bool = False):
    user = current_user(request)
    get_user_service(request).delete_user(user, permanent=permanent)
    request.session.clear()


@router.get("/me/summary", response_model=UserSummary)
async def user_summary(request: Request):
    user = current_user(request)
    summary = get_user_service(request).get_user_summary(user)
    logger.info("User summary served for %s", user.uuid)
    return summary
