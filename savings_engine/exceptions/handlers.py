import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import AmadeusError, AmadeusNotConfiguredError, RateLimitError

logger = logging.getLogger(__name__)


async def amadeus_error_handler(_request: Request, exc: AmadeusError) -> JSONResponse:
    logger.error("Amadeus error: %s (status=%s)", exc.message, exc.status_code)
    return JSONResponse(
        status_code=502,
        content={"detail": f"Amadeus error: {exc.message}"},
    )


async def amadeus_not_configured_handler(
    _request: Request, exc: AmadeusNotConfiguredError
) -> JSONResponse:
    logger.warning("Flight search requested without Amadeus credentials")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning("Rate limit hit for %s", exc.service)
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded for {exc.service}"},
    )
