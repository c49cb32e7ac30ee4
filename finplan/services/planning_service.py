from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from finplan.ai import AIClient, JSONSchema
from finplan.models.planning import Planning
from finplan.models.summary import BillsSummary
from finplan.models.user import User
from finplan.repositories.base import PlanningRepository
from finplan.services.bills_summary import BillsSummaryService

logger = logging.getLogger(__name__)


class MissingSalaryError(ValueError):
    pass


PLANNING_OUTPUT_SCHEMA: JSONSchema = {
    "title": "planning_generation",
    "description": "Planning generation",
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Name of the planning"},
        "plan": {"type": "string", "description": "Plan to achieve the goal"},
        "description": {
            "type": "string",
            "description": "Why the plan was generated and how it helps to achieve the goal",
        },
    },
    "required": ["name", "plan", "description"],
    "additionalProperties": False,
}


def build_planning_prompt(
    summary: BillsSummary,
    goal: str,
    goal_value: Decimal,
    salary: Decimal,
    name: str,
    description: str | None = None,
) -> str:
    lines = [
        "# Financial Planning Agent",
        "## Description",
        "You are a financial expert agent.",
        "Your goal is to analyse the user's situation and generate a plan to achieve their goal.",
        f"You are assisting a user named {name}.",
        "## Rules",
        "- The plan must be concise and to the point.",
        "- The plan must be realistic and achievable.",
        "- The plan must be flexible and adaptable to the user's situation.",
        "- The plan must be easy to understand, follow, measure and adjust.",
        "- You may recommend cancelling bills that are not necessary when it helps to achieve the goal.",
        "- You must never recommend that the user stop paying a bill.",
        "- The plan must be written in the user's language and currency.",
        "- The plan must be based on the user's bills, expenses and salary.",
        "## Inputs",
        "- Goal (string): the goal the user wants to achieve",
        "- Goal value (number): how much money the goal requires",
        "- Description (string): details about the goal",
        "- Salary (number): the user's monthly salary",
        "- Bills summary (object):",
        "  - total_bill_amount: obligations of this month plus the next three months",
        "  - total_value: this month's obligation (fixed + this month's misc + one share of each installment plan)",
        "  - total_installment_value: full value of the installment plans still being paid",
        "  - total_fixed_bills_value: recurring fixed bills",
        "  - total_monthly_misc_bills_value: one-off bills recorded this month",
        "  - partial_value_next_month: amount due next month",
        "  - partial_value_2_months_later: amount due two months from now",
        "  - partial_value_3_months_later: amount due three or more months from now",
        "## Analyse the situation and generate the plan",
        f"- Bills summary: {summary.model_dump_json()}",
        f"- Goal: {goal}",
        f"- Goal value: {goal_value}",
        f"- Salary: {salary}",
    ]
    if description:
        lines.append(f"- Description: {description}")
    return "\n".join(lines)


class PlanningService:
    def __init__(
        self,
        planning_repo: PlanningRepository,
        summary_service: BillsSummaryService | None = None,
        ai_client: AIClient | None = None,
    ) -> None:
        self.planning_repo = planning_repo
        self.summary_service = summary_service
        self.ai_client = ai_client

    def create_planning(
        self,
        user_id: int,
        name: str,
        goal: str,
        goal_value: Decimal,
        plan: str,
        description: str | None = None,
    ) -> Planning:
        planning = Planning(
            user_id=user_id,
            name=name,
            goal=goal,
            goal_value=goal_value,
            plan=plan,
            description=description or None,
        )
        planning = self.planning_repo.create(planning)
        logger.info("Planning created: uuid=%s, user=%s", planning.uuid, user_id)
        return planning

    def generate_planning(
        self,
        user: User,
        goal: str,
        goal_value: Decimal,
        description: str | None = None,
    ) -> Planning:
        """Ask the AI model for a plan based on the user's bills and persist it."""
        if self.summary_service is None or self.ai_client is None:
            raise RuntimeError("Planning generation is not configured")
        if user.id is None:
            raise ValueError("Cannot generate planning for user without an id")
        if not user.salary:
            raise MissingSalaryError("User does not have a salary")

        summary = self.summary_service.compute_summary(user.id)
        prompt = build_planning_prompt(summary, goal, goal_value, user.salary, user.name, description)
        result = self.ai_client.generate_structured(prompt, PLANNING_OUTPUT_SCHEMA)
        logger.info("Planning generated by AI for user=%s goal=%r", user.uuid, goal)

        return self.create_planning(
            user_id=user.id,
            name=str(result["name"]),
            goal=goal,
            goal_value=goal_value,
            plan=str(result["plan"]),
            description=str(result["description"]),
        )

    def get_planning_by_uuid(self, uuid: str) -> Planning | None:
        result = self.planning_repo.get_by_uuid(uuid)
        logger.debug("get_planning_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def list_plannings(self, user_id: int) -> list[Planning]:
        return self.planning_repo.list_by_user(user_id)

    def count_plannings(self, user_id: int) -> int:
        return self.planning_repo.count_by_user(user_id)

    def update_planning(self, planning: Planning, **changes: Any) -> Planning:
        if "description" in changes:
            changes["description"] = changes["description"] or None
        candidate = Planning.model_validate({**planning.model_dump(), **changes})
        result = self.planning_repo.update(candidate)
        logger.info("Planning updated: uuid=%s, fields=%s", result.uuid, sorted(changes))
        return result

    def delete_planning(self, planning: Planning, permanent: bool = False) -> None:
        if planning.id is None:
            raise ValueError("Cannot delete planning without an id")
        if permanent:
            self.planning_repo.hard_delete(planning.id)
            logger.info("Planning %s permanently deleted", planning.uuid)
            return
        self.planning_repo.soft_delete(planning.id)
        logger.info("Planning %s soft-deleted", planning.uuid)
