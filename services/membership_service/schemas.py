from datetime import date
from typing import Literal, Optional

from shared.schemas import CamelModel

MembershipType = Literal["monthly", "quarterly", "yearly"]


class MembershipStatusResponse(CamelModel):
    member_id: str
    membership_type: Optional[MembershipType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str
    days_remaining: int
    expiring_soon: bool
    expired: bool


class PlanResponse(CamelModel):
    name: MembershipType
    months: int
