from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Principal, get_current_user

from .lifecycle import PLAN_DURATIONS
from .schemas import MembershipStatusResponse, PlanResponse
from .service import MembershipService

router = APIRouter(tags=["Membership"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)


@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "membership", "status": "running"}


@router.get("/plans", response_model=list[PlanResponse])
async def list_plans(principal: Principal = Depends(get_current_user)):
    return [
        PlanResponse(name=name, months=duration.years * 12 + duration.months)
        for name, duration in PLAN_DURATIONS.items()
    ]


@router.get("/{member_id}", response_model=MembershipStatusResponse)
async def get_membership_status(
    member_id: str,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipService(db).get_status(member_id, principal)
