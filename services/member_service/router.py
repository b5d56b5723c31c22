from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Principal, get_current_user

from .schemas import (
    MemberCreate,
    MemberCreatedResponse,
    MemberResponse,
    MemberUpdate,
    MessageResponse,
)
from .service import MemberDirectoryService

# Every member route needs a verified identity; per-operation rules live in the service
router = APIRouter(tags=["Members"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)


def get_member_service(db: AsyncSession = Depends(get_db)) -> MemberDirectoryService:
    return MemberDirectoryService(db)


@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "members", "status": "running"}


@router.get("/", response_model=list[MemberResponse])
async def list_members(
    principal: Principal = Depends(get_current_user),
    service: MemberDirectoryService = Depends(get_member_service),
):
    return await service.list_members(principal)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: str,
    principal: Principal = Depends(get_current_user),
    service: MemberDirectoryService = Depends(get_member_service),
):
    return await service.get_member(member_id, principal)


@router.post("/", response_model=MemberCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    payload: MemberCreate,
    principal: Principal = Depends(get_current_user),
    service: MemberDirectoryService = Depends(get_member_service),
):
    member, temporary_password = await service.create_member(payload, principal)
    response = MemberResponse.model_validate(member)
    return MemberCreatedResponse(**response.model_dump(), temporary_password=temporary_password)


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: str,
    payload: MemberUpdate,
    principal: Principal = Depends(get_current_user),
    service: MemberDirectoryService = Depends(get_member_service),
):
    return await service.update_member(member_id, payload, principal)


@router.delete("/{member_id}", response_model=MessageResponse)
async def delete_member(
    member_id: str,
    principal: Principal = Depends(get_current_user),
    service: MemberDirectoryService = Depends(get_member_service),
):
    await service.delete_member(member_id, principal)
    return MessageResponse(message="Member deleted")
