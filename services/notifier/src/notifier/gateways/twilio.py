"""
Twilio SMS gateway for the UhaiLink notifier.

Secondary gateway.  Twilio's Messages API takes one recipient per
request, so numbers are sent sequentially; a failure on one number does
not stop the rest.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from uhai_common.logging import mask_phone
from uhai_common.models import SMSProvider

from .base import GatewayResult
from .http_gateway import HTTPGateway

logger = structlog.get_logger(__name__)


# ── response schema ──


class TwilioMessage(BaseModel):
    """Accepted message resource (subset)."""

    model_config = ConfigDict(extra="ignore")

    sid: str
    status: str | None = None


class TwilioError(BaseModel):
    """Error body returned on 4xx/5xx."""

    model_config = ConfigDict(extra="ignore")

    code: int | None = None
    message: str | None = None
    status: int | None = None


def _describe_error(response: httpx.Response) -> str:
    try:
        err = TwilioError.model_validate(response.json())
    except (ValueError, ValidationError):
        return f"HTTP {response.status_code}"
    if err.message:
        return f"{err.message} (code {err.code})" if err.code else err.message
    return f"HTTP {response.status_code}"


# ── gateway ──


class TwilioGateway(HTTPGateway):
    """Per-number SMS delivery through the Twilio REST API.

    Args:
        account_sid: Twilio account SID (also the basic-auth username).
        auth_token: Twilio auth token.
        from_number: Sender number in E.164 format.
        base_url: REST API base URL.
        **http_options: Forwarded to :class:`HTTPGateway`.
    """

    provider = SMSProvider.TWILIO

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        *,
        base_url: str = "https://api.twilio.com/2010-04-01",
        **http_options: Any,
    ) -> None:
        super().__init__(**http_options)
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.url = f"{base_url.rstrip('/')}/Accounts/{account_sid}/Messages.json"

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def _send_one(self, number: str, message: str) -> tuple[str | None, str | None]:
        """Send to a single number; return ``(message sid, error)``, one of them ``None``."""
        try:
            response = await self._post_form(
                self.url,
                {"To": number, "From": self.from_number, "Body": message},
                auth=(self.account_sid, self.auth_token),
            )
        except httpx.HTTPError as exc:
            return None, f"Twilio request failed for {number}: {exc}"

        if not response.is_success:
            return None, f"Twilio failed for {number}: {_describe_error(response)}"

        try:
            accepted = TwilioMessage.model_validate(response.json())
        except (ValueError, ValidationError):
            return None, f"Twilio failed for {number}: unreadable response"
        logger.debug(
            "sms_message_accepted",
            gateway=self.name,
            to=mask_phone(number),
            sid=accepted.sid,
        )
        return accepted.sid, None

    async def send(self, numbers: list[str], message: str) -> GatewayResult:
        """Send *message* to each number in turn."""
        log = logger.bind(gateway=self.name, recipients=len(numbers))
        if not self.is_configured:
            log.warning("sms_gateway_not_configured")
            return GatewayResult.all_failed(numbers, "Twilio not configured")

        errors: list[str] = []
        outcomes: dict[str, bool] = {}
        message_ids: dict[str, str] = {}
        success = 0
        for number in numbers:
            sid, error = await self._send_one(number, message)
            outcomes[number] = error is None
            if error is None:
                success += 1
                message_ids[number] = sid
            else:
                log.warning("sms_message_failed", to=mask_phone(number))
                errors.append(error)

        log.info("sms_gateway_batch_complete", success=success, failed=len(numbers) - success)
        return GatewayResult(
            success=success,
            failed=len(numbers) - success,
            errors=errors,
            outcomes=outcomes,
            message_ids=message_ids,
        )
