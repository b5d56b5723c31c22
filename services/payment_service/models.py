from sqlalchemy import Column, Date, DateTime, Numeric, String
from sqlalchemy.sql import func

from shared.config.database import Base, generate_id
from shared.errors import InvalidTransitionError

PAYMENT_TYPES = ("membership", "addon", "other")
PAYMENT_METHODS = ("card", "upi", "netbanking", "cash")

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(32), primary_key=True, default=generate_id)
    # No foreign key: payments stay on record after their member is deleted
    user_id = Column(String(32), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_type = Column(String(16), default="membership", nullable=False)
    payment_method = Column(String(16), nullable=False)
    external_payment_ref = Column(String(64), unique=True, nullable=True)
    external_order_ref = Column(String(64), index=True, nullable=True)
    membership = Column(String(16), nullable=True)
    status = Column(String(16), default=STATUS_PENDING, nullable=False) # pending, completed, failed
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def is_settled(self) -> bool:
        return self.status in (STATUS_COMPLETED, STATUS_FAILED)

    def _ensure_pending(self) -> None:
        if self.is_settled:
            raise InvalidTransitionError(f"Payment is already {self.status}")

    def mark_completed(self, window, payment_ref: str, payment_method: str) -> None:
        self._ensure_pending()
        self.status = STATUS_COMPLETED
        self.start_date = window.start_date
        self.end_date = window.end_date
        self.external_payment_ref = payment_ref
        self.payment_method = payment_method

    def mark_failed(self) -> None:
        self._ensure_pending()
        self.status = STATUS_FAILED
