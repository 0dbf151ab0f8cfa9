from prometheus_client import Counter, Histogram

REMINDERS_SENT = Counter(
    "reminders_sent_total",
    "Reminders accepted by a delivery channel",
    ["category"]
)

REMINDER_FAILURES = Counter(
    "reminder_failures_total",
    "Reminders rejected by a delivery channel",
    ["category"]
)

SWEEP_DURATION = Histogram(
    "sweep_duration_seconds",
    "Duration of one reminder sweep over all users"
)
