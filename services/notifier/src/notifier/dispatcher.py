"""
Emergency SOS dispatcher for the UhaiLink notifier.

Receives an SOS trigger, composes the alert text from the user's medical
context, delivers it through the SMS failover chain, and appends one
audit record per recipient.

Flow
----
1. Validate the trigger → reject with :class:`BadRequestError` if the
   user, incident or contacts are missing.
2. Keep contacts with a usable phone number → reject if none remain.
3. Load profile and incident concurrently; failures fall back to
   defaults and never abort the dispatch.
4. Send through the failover chain (primary, then secondary only on
   total failure).
5. Write one ``NotificationRecord`` per recipient, sequentially; a
   failed write is logged and the loop continues.

Nothing is deduplicated: every call texts every contact again and
appends new audit rows.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar
from zoneinfo import ZoneInfo

import structlog
from pydantic import ValidationError

from uhai_common.models import (
    Contact,
    EmergencyTrigger,
    Incident,
    NotificationRecord,
    NotificationStatus,
    Profile,
)

from notifier.errors import BadRequestError
from notifier.failover import FailoverOutcome, SMSFailoverChain
from notifier.message import compose_alert_message
from notifier.metrics import notification_log_errors_total, notifications_logged_total
from notifier.schemas import DeliveryDetails, DispatchResponse

logger = structlog.get_logger(__name__)

_T = TypeVar("_T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EmergencyDispatcher:
    """Orchestrates context lookup, SMS failover delivery, and audit logging.

    Args:
        chain: The :class:`SMSFailoverChain` to deliver through.
        store: Optional object with async ``get_profile(user_id)`` and
               ``get_incident(incident_id)``.  If *None*, the alert is
               built from defaults.
        record_writer: Optional async callable that persists a
                       ``NotificationRecord``.  If *None*, persistence is
                       skipped (useful in tests).
        app_name: Product name shown in the alert text.
        alert_timezone: IANA zone for the alert timestamp.
        per_recipient_audit: Record each recipient's own outcome instead
                             of the aggregate outcome.
        clock: Returns "now"; used when the incident time is unknown.
    """

    def __init__(
        self,
        chain: SMSFailoverChain,
        *,
        store: Any | None = None,
        record_writer: Any | None = None,
        app_name: str = "UhaiLink",
        alert_timezone: str = "UTC",
        per_recipient_audit: bool = False,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.chain = chain
        self._store = store
        self._record_writer = record_writer
        self.app_name = app_name
        self.tz = ZoneInfo(alert_timezone)
        self.per_recipient_audit = per_recipient_audit
        self._clock = clock

    # ── request parsing ──

    @staticmethod
    def parse_request(payload: Any) -> EmergencyTrigger:
        """Validate a decoded JSON body into an :class:`EmergencyTrigger`.

        Raises:
            BadRequestError: If the user id, incident id or contacts are
                missing, empty, or of the wrong shape.
        """
        if not isinstance(payload, Mapping):
            raise BadRequestError("Missing required fields")
        try:
            return EmergencyTrigger.model_validate(payload)
        except ValidationError as exc:
            logger.info("sos_request_invalid", errors=exc.error_count())
            raise BadRequestError("Missing required fields") from exc

    # ── context ──

    @staticmethod
    def _absorb(what: str, outcome: _T | BaseException, log: Any) -> _T | None:
        if isinstance(outcome, Exception):
            log.warning(f"{what}_lookup_failed", error=str(outcome))
            return None
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            log.warning(f"{what}_not_found")
        return outcome

    async def load_context(
        self, user_id: str, incident_id: str,
    ) -> tuple[Profile | None, Incident | None]:
        """Fetch profile and incident concurrently, best-effort.

        Returns ``None`` in place of anything that failed or does not exist.
        """
        if self._store is None:
            return None, None
        log = logger.bind(user_id=user_id, incident_id=incident_id)
        profile, incident = await asyncio.gather(
            self._store.get_profile(user_id),
            self._store.get_incident(incident_id),
            return_exceptions=True,
        )
        return self._absorb("profile", profile, log), self._absorb("incident", incident, log)

    # ── audit ──

    def build_records(
        self,
        trigger: EmergencyTrigger,
        recipients: list[Contact],
        message: str,
        outcome: FailoverOutcome,
    ) -> list[NotificationRecord]:
        """One audit record per recipient, stamped with the final gateway's result.

        Per-recipient lookups use the submitted (trimmed) number, which is
        how gateways key their ``outcomes`` and ``message_ids``.
        """
        result = outcome.result
        error_message = "; ".join(result.errors) if result.errors else None
        overall = NotificationStatus.SENT if result.success > 0 else NotificationStatus.FAILED

        records = []
        for contact in recipients:
            phone = contact.normalized_phone
            status = overall
            if self.per_recipient_audit:
                delivered = result.outcomes.get(phone, False)
                status = NotificationStatus.SENT if delivered else NotificationStatus.FAILED
            records.append(
                NotificationRecord(
                    user_id=trigger.user_id,
                    emergency_incident_id=trigger.incident_id,
                    recipient_name=contact.name,
                    recipient_phone=phone,
                    message_text=message,
                    status=status,
                    provider=outcome.provider,
                    error_message=error_message,
                    external_id=result.message_ids.get(phone),
                ),
            )
        return records

    async def log_notifications(self, records: list[NotificationRecord]) -> int:
        """Persist *records* one by one; return how many were written."""
        if self._record_writer is None:
            return 0
        written = 0
        for record in records:
            try:
                await self._record_writer(record)
            except Exception as exc:  # noqa: BLE001
                notification_log_errors_total.inc()
                logger.error(
                    "notification_record_failed",
                    incident_id=record.emergency_incident_id,
                    error=str(exc),
                )
                continue
            written += 1
            notifications_logged_total.labels(
                provider=record.provider.value, status=record.status.value,
            ).inc()
        return written

    # ── dispatch pipeline ──

    async def dispatch(self, request: EmergencyTrigger | Mapping[str, Any]) -> DispatchResponse:
        """Run the full SOS pipeline for *request*.

        Args:
            request: A validated trigger or the decoded JSON body.

        Returns:
            The response envelope.  All-failed delivery is still a normal
            result; the audit rows carry the failure.

        Raises:
            BadRequestError: Invalid request or no usable phone number.
        """
        trigger = request if isinstance(request, EmergencyTrigger) else self.parse_request(request)
        log = logger.bind(user_id=trigger.user_id, incident_id=trigger.incident_id)

        recipients = trigger.reachable_contacts()
        if not recipients:
            log.info("sos_no_valid_numbers", contacts=len(trigger.contacts))
            raise BadRequestError("No valid phone numbers in contacts")

        profile, incident = await self.load_context(trigger.user_id, trigger.incident_id)
        message = compose_alert_message(
            profile, incident, app_name=self.app_name, tz=self.tz, now=self._clock(),
        )

        numbers = [c.normalized_phone for c in recipients]
        outcome = await self.chain.send(numbers, message)
        result = outcome.result

        records = self.build_records(trigger, recipients, message, outcome)
        written = await self.log_notifications(records)

        log.info(
            "sos_dispatched",
            provider=outcome.provider.value,
            attempted=[p.value for p in outcome.attempted],
            success=result.success,
            failed=result.failed,
            records_written=written,
        )
        return DispatchResponse(
            success=True,
            message=f"Sent {result.success} SMS notifications, {result.failed} failed",
            details=DeliveryDetails(
                success=result.success,
                failed=result.failed,
                errors=list(result.errors),
            ),
        )
