"""
SMS gateway implementations package for the UhaiLink notifier.

Contains the abstract SMSGateway base class, the provider adapters, and
the factory that builds the ordered gateway list from settings.
"""

from uhai_common.config import Settings

from .africas_talking import AfricasTalkingGateway
from .base import GatewayResult, SMSGateway
from .twilio import TwilioGateway


def build_gateways(settings: Settings) -> list[SMSGateway]:
    """Return the gateways in fallback order: Africa's Talking, then Twilio.

    Both gateways are always present; missing credentials make a gateway
    report ``is_configured = False`` rather than being left out.
    """
    http_options = {
        "timeout": settings.sms_timeout_s,
        "max_attempts": settings.sms_max_attempts,
    }
    return [
        AfricasTalkingGateway(
            settings.africas_talking_api_key,
            settings.africas_talking_username,
            sender_id=settings.africas_talking_sender_id,
            base_url=settings.africas_talking_base_url,
            **http_options,
        ),
        TwilioGateway(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            settings.twilio_phone_number,
            base_url=settings.twilio_base_url,
            **http_options,
        ),
    ]


__all__ = [
    "AfricasTalkingGateway",
    "GatewayResult",
    "SMSGateway",
    "TwilioGateway",
    "build_gateways",
]
