from datetime import date, datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from shared.schemas import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str = Field(min_length=8)


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    must_reset_password: bool = False


class AccountResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: Literal["admin", "member"]
    status: str
    must_reset_password: bool
    membership_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
