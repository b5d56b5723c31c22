from shared.schemas import CamelModel


class MemberCounts(CamelModel):
    total: int
    active: int
    inactive: int
    pending: int


class SummaryReport(CamelModel):
    members: MemberCounts
    expiring_soon: int
    expiry_warning_days: int
    completed_payments: int
    revenue: float
