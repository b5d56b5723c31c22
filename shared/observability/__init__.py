from .setup import setup_observability, configure_logging
from .metrics import (
    gym_payments_total,
    gym_membership_renewals_total,
    gym_optimistic_retry_total,
    gym_gateway_requests_total,
    gym_gateway_duration_seconds,
)
