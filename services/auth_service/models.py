"""
Account storage.

Admins and members share one ``accounts`` table (single-table inheritance on
``role``). Membership columns only exist on ``Member``, so code that holds an
``Admin`` never sees them. ``version`` makes every UPDATE conditional on the
row version that was read.
"""
from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String
from sqlalchemy.sql import func

from shared.config.database import Base, generate_id

MEMBERSHIP_TYPES = ("monthly", "quarterly", "yearly")
ACCOUNT_STATUSES = ("active", "inactive", "pending")


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    must_reset_password = Column(Boolean, default=False, nullable=False)
    role = Column(String(16), nullable=False)
    status = Column(String(16), default="active", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {
        "polymorphic_on": role,
        "version_id_col": version,
    }


class Admin(Account):
    __mapper_args__ = {"polymorphic_identity": "admin", "polymorphic_load": "inline"}


class Member(Account):
    membership_type = Column(String(16), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "member", "polymorphic_load": "inline"}
