from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from finplan.models.bill import Bill
from finplan.repositories.base import BillRepository

logger = logging.getLogger(__name__)


class BillService:
    def __init__(self, bill_repo: BillRepository) -> None:
        self.bill_repo = bill_repo

    def create_bill(
        self,
        user_id: int,
        name: str,
        value: Decimal,
        description: str | None = None,
        installments_number: int | None = None,
        created_at: datetime | None = None,
    ) -> Bill:
        bill = Bill(
            user_id=user_id,
            name=name,
            value=value,
            description=description or None,
            installments_number=installments_number,
            created_at=created_at,
        )
        bill = self.bill_repo.create(bill)
        logger.info(
            "Bill created: uuid=%s, user=%s, kind=%s, value=%s",
            bill.uuid,
            user_id,
            bill.kind.value,
            bill.value,
        )
        return bill

    def update_bill(self, bill: Bill, **changes: Any) -> Bill:
        if "description" in changes:
            changes["description"] = changes["description"] or None
        candidate = Bill.model_validate({**bill.model_dump(), **changes})
        result = self.bill_repo.update(candidate)
        logger.info("Bill updated: uuid=%s, fields=%s", result.uuid, sorted(changes))
        return result

    def get_bill_by_uuid(self, uuid: str) -> Bill | None:
        result = self.bill_repo.get_by_uuid(uuid)
        logger.debug("get_bill_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def list_bills(self, user_id: int) -> list[Bill]:
        result = self.bill_repo.list_by_user(user_id)
        logger.debug("Listed %d bills for user=%s", len(result), user_id)
        return result

    def delete_bill(self, bill: Bill, permanent: bool = False) -> None:
        if bill.id is None:
            raise ValueError("Cannot delete bill without an id")
        if permanent:
            self.bill_repo.hard_delete(bill.id)
            logger.info("Bill %s permanently deleted", bill.uuid)
            return
        self.bill_repo.soft_delete(bill.id)
        logger.info("Bill %s soft-deleted", bill.uuid)
