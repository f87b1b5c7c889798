"""
Abstract base class for SMS gateways in the UhaiLink notifier.

Defines the SMSGateway interface every provider adapter implements and
the GatewayResult every adapter returns, so the failover chain can treat
batch and per-number providers alike.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from uhai_common.models import SMSProvider


class GatewayResult(BaseModel):
    """Aggregate outcome of one gateway's attempt at a batch of numbers.

    Attributes:
        success: Numbers the provider accepted.
        failed: Numbers not accepted (always ``len(numbers) - success``).
        errors: Human-readable failure descriptions.
        outcomes: Per-number acceptance, keyed by the submitted number.
                  Numbers the provider did not report are absent.
        message_ids: Provider message id per submitted number, where one
                     was issued.
    """

    success: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)
    outcomes: dict[str, bool] = Field(default_factory=dict)
    message_ids: dict[str, str] = Field(default_factory=dict)

    @property
    def total_failure(self) -> bool:
        """``True`` when nothing was delivered but something was attempted."""
        return self.success == 0 and self.failed > 0

    @classmethod
    def all_failed(cls, numbers: list[str], error: str) -> GatewayResult:
        """Result for a batch that failed as a whole with a single *error*."""
        return cls(
            success=0,
            failed=len(numbers),
            errors=[error],
            outcomes={n: False for n in numbers},
        )


class SMSGateway(ABC):
    """Base class every SMS provider adapter must implement.

    Subclasses override :meth:`send`.  Adapters never raise out of
    :meth:`send`: transport and provider failures are folded into the
    returned :class:`GatewayResult`.

    Attributes:
        provider: Provider identifier recorded on audit rows.
    """

    provider: SMSProvider

    @property
    def name(self) -> str:
        return self.provider.value

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """``True`` when the adapter holds a complete credential set."""
        ...  # pragma: no cover

    @abstractmethod
    async def send(self, numbers: list[str], message: str) -> GatewayResult:
        """Deliver *message* to every number in *numbers*.

        Args:
            numbers: Non-empty list of trimmed phone numbers.
            message: SMS body.

        Returns:
            The aggregate :class:`GatewayResult`.  An unconfigured adapter
            returns an all-failed result without making any request.
        """
        ...  # pragma: no cover

    async def close(self) -> None:
        """Release any resources held by the adapter (override if needed)."""
