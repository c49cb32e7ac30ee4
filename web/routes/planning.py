from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from finplan.models.planning import Planning
from finplan.models.user import User
from finplan.services.planning_service import MissingSalaryError
from web.deps import current_user, get_planning_generator, get_planning_service
from web.schemas import CreatePlanningPayload, GeneratePlanningPayload, PlanningOut, UpdatePlanningPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plannings")


def _owned_planning(request: Request, user: User, planning_uuid: str) -> Planning:
    planning = get_planning_service(request).get_planning_by_uuid(planning_uuid)
    if planning is None or planning.user_id != user.id:
        logger.warning("Planning not found: uuid=%s user=%s", planning_uuid, user.uuid)
        raise HTTPException(status_code=404, detail="Planning not found")
    return planning


@router.get("/", response_model=list[PlanningOut])
async def planning_list(request: Request):
    user = current_user(request)
    plannings = get_planning_service(request).list_plannings(user.id)
    return [PlanningOut.from_planning(p) for p in plannings]


@router.post("/", status_code=201, response_model=PlanningOut)
async def planning_create(request: Request, payload: CreatePlanningPayload):
    user = current_user(request)
    planning = get_planning_service(request).create_planning(user_id=user.id, **payload.model_dump())
    return PlanningOut.from_planning(planning)


@router.post("/generate", status_code=201, response_model=PlanningOut)
async def planning_generate(request: Request, payload: GeneratePlanningPayload):
    user = current_user(request)
    if not user.salary:
        raise HTTPException(status_code=400, detail="User salary not found")
    logger.info("Generating planning for user=%s goal=%r", user.uuid, payload.goal)
    try:
        planning = get_planning_generator(request).generate_planning(
            user,
            goal=payload.goal,
            goal_value=payload.goal_value,
            description=payload.description,
        )
    except MissingSalaryError as e:
        raise HTTPException(status_code=400, detail="User salary not found") from e
    return PlanningOut.from_planning(planning)


@router.get("/{planning_uuid}", response_model=PlanningOut)
async def planning_detail(request: Request, planning_uuid: str):
    user = current_user(request)
    return PlanningOut.from_planning(_owned_planning(request, user, planning_uuid))


@router.patch("/{planning_uuid}", response_model=PlanningOut)
async def planning_update(request: Request, planning_uuid: str, payload: UpdatePlanningPayload):
    user = current_user(request)
    planning = _owned_planning(request, user, planning_uuid)
    updated = get_planning_service(request).update_planning(planning, **payload.model_dump(exclude_unset=True))
    return PlanningOut.from_planning(updated)


@router.delete("/{planning_uuid}", status_code=204)
async def planning_delete(request: Request, planning_uuid: str, permanent: bool = False):
    user = current_user(request)
    planning = _owned_planning(request, user, planning_uuid)
    get_planning_service(request).delete_planning(planning, permanent=permanent)
