"""
Africa's Talking SMS gateway for the UhaiLink notifier.

Primary gateway.  Africa's Talking accepts a comma-separated recipient
list in a single request and answers with a per-number status array,
so one HTTP call covers the whole contact list.

Response shape (``Accept: application/json``)::

    {"SMSMessageData": {
        "Message": "Sent to 1/1 Total Cost: KES 0.8000",
        "Recipients": [{"number": "+254700111222", "status": "Success",
                        "statusCode": 101, "messageId": "ATXid_..."}]}}

Older accounts report ``Messages`` entries keyed ``To``/``Status``; both
spellings are accepted.  A body that matches neither counts as zero
deliveries.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from uhai_common.logging import mask_phone
from uhai_common.models import SMSProvider

from .base import GatewayResult
from .http_gateway import HTTPGateway

logger = structlog.get_logger(__name__)

_MESSAGING_PATH = "/version1/messaging"
_SUCCESS_STATUS = "success"
_ERROR_BODY_LIMIT = 500
_MATCH_DIGITS = 9


# ── response schema ──


class ATRecipient(BaseModel):
    """Per-number delivery status."""

    model_config = ConfigDict(extra="ignore")

    number: str = Field(validation_alias=AliasChoices("number", "To"))
    status: str = Field(validation_alias=AliasChoices("status", "Status"))
    status_code: int | None = Field(default=None, validation_alias="statusCode")
    message_id: str | None = Field(default=None, validation_alias="messageId")

    @property
    def delivered(self) -> bool:
        return self.status.strip().lower() == _SUCCESS_STATUS


class ATMessageData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str | None = Field(default=None, validation_alias="Message")
    recipients: list[ATRecipient] = Field(
        validation_alias=AliasChoices("Recipients", "Messages"),
    )


class ATSendResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sms_message_data: ATMessageData = Field(validation_alias="SMSMessageData")


# ── matching reports to submitted numbers ──


def _subscriber_digits(number: str) -> str:
    """Trailing subscriber digits, ignoring country code, trunk prefix and punctuation."""
    digits = "".join(ch for ch in number if ch.isdigit())
    return digits[-_MATCH_DIGITS:] if len(digits) >= _MATCH_DIGITS else ""


def match_recipients(
    numbers: list[str], recipients: list[ATRecipient],
) -> tuple[list[tuple[str, ATRecipient]], list[ATRecipient]]:
    """Pair each reported recipient with the number it was submitted as.

    Africa's Talking echoes numbers in international format, so
    ``0700111222`` comes back as ``+254700111222``.  Reports are matched
    exactly first, then on the trailing subscriber digits, and finally
    by position when the unmatched reports and numbers are equal in count.

    Returns:
        ``(matched, stray)``: ``(submitted number, report)`` pairs, and the
        reports that could not be tied to any submitted number.
    """
    pending = list(numbers)
    matched: list[tuple[str, ATRecipient]] = []

    leftover: list[ATRecipient] = []
    for recipient in recipients:
        if recipient.number in pending:
            pending.remove(recipient.number)
            matched.append((recipient.number, recipient))
        else:
            leftover.append(recipient)

    stray: list[ATRecipient] = []
    for recipient in leftover:
        key = _subscriber_digits(recipient.number)
        hit = next((n for n in pending if key and _subscriber_digits(n) == key), None)
        if hit is None:
            stray.append(recipient)
        else:
            pending.remove(hit)
            matched.append((hit, recipient))

    if stray and len(stray) == len(pending):
        matched.extend(zip(pending, stray))
        stray = []

    return matched, stray


# ── gateway ──


class AfricasTalkingGateway(HTTPGateway):
    """Bulk SMS delivery through the Africa's Talking messaging API.

    Args:
        api_key: Africa's Talking API key.
        username: Account username (``"sandbox"`` for the sandbox).
        sender_id: Optional registered sender id sent as ``from``.
        base_url: API base URL (sandbox or live).
        **http_options: Forwarded to :class:`HTTPGateway`.
    """

    provider = SMSProvider.AFRICAS_TALKING

    def __init__(
        self,
        api_key: str,
        username: str,
        *,
        sender_id: str = "",
        base_url: str = "https://api.sandbox.africastalking.com",
        **http_options: Any,
    ) -> None:
        super().__init__(**http_options)
        self.api_key = api_key
        self.username = username
        self.sender_id = sender_id
        self.url = base_url.rstrip("/") + _MESSAGING_PATH

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.username)

    @staticmethod
    def parse_response(response: httpx.Response) -> ATSendResponse | None:
        """Parse a messaging response, or ``None`` if it is not a usable success."""
        if not response.is_success:
            return None
        try:
            return ATSendResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            return None

    async def send(self, numbers: list[str], message: str) -> GatewayResult:
        """Submit all *numbers* in one request and tally per-number statuses."""
        log = logger.bind(gateway=self.name, recipients=len(numbers))
        if not self.is_configured:
            log.warning("sms_gateway_not_configured")
            return GatewayResult.all_failed(numbers, "Africa's Talking not configured")

        form = {
            "username": self.username,
            "to": ",".join(numbers),
            "message": message,
        }
        if self.sender_id:
            form["from"] = self.sender_id

        try:
            response = await self._post_form(self.url, form, headers={"apikey": self.api_key})
        except httpx.HTTPError as exc:
            log.error("sms_gateway_request_failed", error=str(exc))
            return GatewayResult.all_failed(
                numbers, f"Africa's Talking request failed: {exc}",
            )

        parsed = self.parse_response(response)
        if parsed is None:
            log.error("sms_gateway_bad_response", status=response.status_code)
            return GatewayResult.all_failed(
                numbers,
                f"Africa's Talking API error: HTTP {response.status_code} "
                f"{response.text[:_ERROR_BODY_LIMIT]}",
            )

        matched, stray = match_recipients(numbers, parsed.sms_message_data.recipients)
        if stray:
            log.warning("sms_gateway_unmatched_recipients", count=len(stray))

        errors: list[str] = []
        outcomes: dict[str, bool] = {}
        message_ids: dict[str, str] = {}
        success = 0
        for number, recipient in matched:
            log.debug(
                "sms_recipient_status",
                to=mask_phone(number),
                status=recipient.status,
                status_code=recipient.status_code,
                message_id=recipient.message_id,
            )
            outcomes[number] = recipient.delivered
            if recipient.message_id:
                message_ids[number] = recipient.message_id
            if recipient.delivered:
                success += 1
            else:
                errors.append(f"Failed to send to {number}: {recipient.status}")

        unreported = len(numbers) - len(matched)
        if unreported > 0:
            errors.append(f"No delivery status reported for {unreported} number(s)")

        log.info("sms_gateway_batch_complete", success=success, failed=len(numbers) - success)
        return GatewayResult(
            success=success,
            failed=len(numbers) - success,
            errors=errors,
            outcomes=outcomes,
            message_ids=message_ids,
        )
