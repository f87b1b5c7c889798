"""
Gateway failover for the UhaiLink notifier.

Walks an ordered list of SMS gateways.  The first gateway is always
tried; each following gateway is tried only when the previous one
delivered to nobody.  A partial success is final, so no contact is
ever texted by two providers for the same dispatch.

There is no circuit breaker: every dispatch is a fresh, one-shot run.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from uhai_common.models import SMSProvider

from notifier.gateways.base import GatewayResult, SMSGateway
from notifier.metrics import gateway_attempts_total, sms_failover_total

logger = structlog.get_logger(__name__)


def _attempt_outcome(result: GatewayResult) -> str:
    if result.total_failure:
        return "failed"
    return "delivered" if result.failed == 0 else "partial"


class FailoverOutcome(BaseModel):
    """What the chain ended with.

    Attributes:
        result: Result of the last gateway attempted.
        provider: The last gateway attempted.
        attempted: Every gateway attempted, in order.
    """

    model_config = ConfigDict(frozen=True)

    result: GatewayResult
    provider: SMSProvider
    attempted: tuple[SMSProvider, ...]

    @property
    def fell_back(self) -> bool:
        return len(self.attempted) > 1


class SMSFailoverChain:
    """Deliver through the first gateway that reaches anyone.

    Args:
        gateways: Gateways in preference order (primary first).

    Raises:
        ValueError: If *gateways* is empty.
    """

    def __init__(self, gateways: Sequence[SMSGateway]) -> None:
        if not gateways:
            raise ValueError("SMSFailoverChain needs at least one gateway")
        self._gateways = list(gateways)

    @property
    def gateways(self) -> list[SMSGateway]:
        return list(self._gateways)

    async def send(self, numbers: list[str], message: str) -> FailoverOutcome:
        """Send *message* to *numbers*, falling through on total failure."""
        attempted: list[SMSProvider] = []
        result = GatewayResult()
        for index, gateway in enumerate(self._gateways):
            if index > 0:
                logger.warning(
                    "sms_failover_activated",
                    failed_gateway=attempted[-1].value,
                    fallback=gateway.name,
                    errors=len(result.errors),
                )
                sms_failover_total.inc()
            result = await gateway.send(numbers, message)
            attempted.append(gateway.provider)
            gateway_attempts_total.labels(
                provider=gateway.name, outcome=_attempt_outcome(result),
            ).inc()
            if not result.total_failure:
                break

        return FailoverOutcome(
            result=result,
            provider=attempted[-1],
            attempted=tuple(attempted),
        )

    async def close(self) -> None:
        """Close every gateway's resources."""
        for gateway in self._gateways:
            await gateway.close()
