from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Principal, get_current_user

from .schemas import SummaryReport
from .service import ReportService

router = APIRouter(tags=["Reports"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)


@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "reports", "status": "running"}


@router.get("/summary", response_model=SummaryReport)
async def summary(
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ReportService(db).summary(principal)
