from prometheus_client import Counter, Histogram

# Business Metrics
gym_payments_total = Counter(
    "gym_payments_total",
    "Payments that reached a terminal state",
    ["status"] # Labels: 'completed', 'failed'
)

gym_membership_renewals_total = Counter(
    "gym_membership_renewals_total",
    "Memberships activated or renewed by a verified payment",
    ["plan"] # Labels: 'monthly', 'quarterly', 'yearly'
)

gym_optimistic_retry_total = Counter(
    "gym_optimistic_retry_total",
    "Member writes retried after losing an optimistic concurrency race",
    ["operation"]
)

gym_gateway_requests_total = Counter(
    "gym_gateway_requests_total",
    "Calls made to the payment processor",
    ["operation", "outcome"] # outcome: 'ok', 'error', 'rejected'
)

gym_gateway_duration_seconds = Histogram(
    "gym_gateway_duration_seconds",
    "Payment processor call duration in seconds",
    ["operation"]
)
