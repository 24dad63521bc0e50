import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gateway.schemas.envelope import ApiError, Envelope

from .custom import GatewayError

logger = logging.getLogger(__name__)


def render_envelope(envelope: Envelope) -> JSONResponse:
    """Envelope JSON with the envelope status as HTTP status (502 when it has none)."""
    status_code = envelope.status if 100 <= envelope.status <= 599 else 502
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json", by_alias=True))


async def gateway_error_handler(_request: Request, exc: GatewayError) -> JSONResponse:
    logger.error("%s error from %s: %s (status=%s)", exc.kind, exc.service, exc.message, exc.status_code)
    return render_envelope(Envelope.fail(exc.to_api_error()))


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    logger.warning("Rejected request: %s", problems)
    return render_envelope(Envelope.fail(ApiError(service="gateway", message=problems, status=422)))
