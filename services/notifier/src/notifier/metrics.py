"""
Prometheus metrics for the UhaiLink notifier.

Exposed on ``/metrics`` by :func:`notifier.main.create_app`.
"""

from __future__ import annotations

from prometheus_client import Counter

dispatch_requests_total = Counter(
    "notifier_dispatch_requests_total",
    "SOS dispatch requests by HTTP outcome",
    ["status"],
)
gateway_attempts_total = Counter(
    "notifier_gateway_attempts_total",
    "SMS gateway attempts by provider and outcome",
    ["provider", "outcome"],
)
sms_failover_total = Counter(
    "notifier_sms_failover_total",
    "Dispatches that fell back to a secondary gateway",
)
notifications_logged_total = Counter(
    "notifier_notifications_logged_total",
    "Notification audit rows written",
    ["provider", "status"],
)
notification_log_errors_total = Counter(
    "notifier_notification_log_errors_total",
    "Notification audit rows that failed to write",
)
