"""
SOS dispatch API router for the UhaiLink notifier.

``POST /send-emergency-sms`` is the only write endpoint.  Error bodies
use the ``{"error": ...}`` envelope the web client expects rather than
FastAPI's default ``detail``/422 shape, so the body is decoded and
validated by hand.
"""

from __future__ import annotations

import json

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from notifier.dependencies import get_dispatcher
from notifier.dispatcher import EmergencyDispatcher
from notifier.errors import BadRequestError
from notifier.metrics import dispatch_requests_total
from notifier.schemas import DispatchResponse, ErrorResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["sos"])


def _error(status_code: int, message: str) -> JSONResponse:
    dispatch_requests_total.labels(status=str(status_code)).inc()
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/send-emergency-sms",
    response_model=DispatchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def send_emergency_sms(
    request: Request,
    dispatcher: EmergencyDispatcher = Depends(get_dispatcher),
) -> DispatchResponse | JSONResponse:
    try:
        body = json.loads(await request.body())
        response = await dispatcher.dispatch(body)
    except BadRequestError as exc:
        return _error(400, str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("sos_dispatch_error")
        return _error(500, str(exc))

    dispatch_requests_total.labels(status="200").inc()
    return response
