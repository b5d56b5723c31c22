from datetime import date, datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field, model_validator

from shared.schemas import CamelModel

MembershipType = Literal["monthly", "quarterly", "yearly"]
AccountStatus = Literal["active", "inactive", "pending"]


class MemberCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=32)
    membership_type: MembershipType
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class MemberUpdate(CamelModel):
    """Partial update: only fields present in the request body are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=1, max_length=32)
    membership_type: Optional[MembershipType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AccountStatus] = None


class MemberResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: Literal["member"] = "member"
    membership_type: Optional[MembershipType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: AccountStatus
    created_at: datetime


class MemberCreatedResponse(MemberResponse):
    message: str = "Member added successfully"
    # Shown once; only the hash is stored
    temporary_password: str


class MessageResponse(CamelModel):
    message: str
