from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from finplan.models.bill import Bill
from finplan.models.summary import BillsSummary
from finplan.models.user import User
from web.deps import current_user, get_bill_service, get_bills_summary_service
from web.schemas import BillOut, CreateBillPayload, UpdateBillPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bills")


def _owned_bill(request: Request, user: User, bill_uuid: str) -> Bill:
    bill = get_bill_service(request).get_bill_by_uuid(bill_uuid)
    if bill is None or bill.user_id != user.id:
        logger.warning("Bill not found: uuid=%s user=%s", bill_uuid, user.uuid)
        raise HTTPException(status_code=404, detail="Bill not found")
    return bill


@router.get("/", response_model=list[BillOut])
async def bill_list(request: Request):
    user = current_user(request)
    bills = get_bill_service(request).list_bills(user.id)
    return [BillOut.from_bill(bill) for bill in bills]


@router.post("/", status_code=201, response_model=BillOut)
async def bill_create(request: Request, payload: CreateBillPayload):
    user = current_user(request)
    bill = get_bill_service(request).create_bill(
        user_id=user.id,
        name=payload.name,
        value=payload.value,
        description=payload.description,
        installments_number=payload.installments_number,
        created_at=payload.created_at,
    )
    return BillOut.from_bill(bill)


@router.get("/summary", response_model=BillsSummary)
async def bill_summary(request: Request):
    user = current_user(request)
    return get_bills_summary_service(request).compute_summary(user.id)


@router.get("/{bill_uuid}", response_model=BillOut)
async def bill_detail(request: Request, bill_uuid: str):
    user = current_user(request)
    return BillOut.from_bill(_owned_bill(request, user, bill_uuid))


@router.patch("/{bill_uuid}", response_model=BillOut)
async def bill_update(request: Request, bill_uuid: str, payload: UpdateBillPayload):
    user = current_user(request)
    bill = _owned_bill(request, user, bill_uuid)
    updated = get_bill_service(request).update_bill(bill, **payload.model_dump(exclude_unset=True))
    return BillOut.from_bill(updated)


@router.delete("/{bill_uuid}", status_code=204)
async def bill_delete(request: Request, bill_uuid: str, permanent: bool = False):
    user = current_user(request)
    bill = _owned_bill(request, user, bill_uuid)
    get_bill_service(request).delete_bill(bill, permanent=permanent)
