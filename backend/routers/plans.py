import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from data.plans import PLANS
from database import get_db
from models import User
from schemas.auth import PlanChangeInput, MeResponse
from services.auth import to_user_dto
from services.dependencies import get_current_user
from services.errors import ValidationError
from services.repositories import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["plans"])


@router.get("/plans")
async def list_plans():
    return {
        "plans": [
            {
                "id": plan_id,
                "name": plan["name"],
                "price": plan["price"],
                "period": plan["period"],
                "aiCallsLimit": plan["ai_calls_limit"],
                "description": plan["description"],
            }
            for plan_id, plan in PLANS.items()
        ]
    }


@router.post("/user/plan", response_model=MeResponse)
async def change_plan(input: PlanChangeInput, user: User = Depends(get_current_user),
                      db: Session = Depends(get_db)):
    """Switch the caller's plan and its monthly analysis limit"""
    plan_id = (input.plan or "").upper()
    if plan_id not in PLANS:
        raise ValidationError(f"Unknown plan: {input.plan}")

    users = UserRepository(db)
    user = users.update(user, plan=plan_id, ai_calls_limit=PLANS[plan_id]["ai_calls_limit"])
    logger.info("User %s switched to plan %s", user.id, plan_id)
    return {"user": to_user_dto(user)}
