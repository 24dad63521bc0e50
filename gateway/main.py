import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from gateway.config import Settings
from gateway.exceptions.custom import GatewayError
from gateway.exceptions.handlers import gateway_error_handler, validation_error_handler
from gateway.routers.accommodations import router as accommodations_router
from gateway.routers.hotels import router as hotels_router
from gateway.routers.rentals import router as rentals_router
from gateway.routers.restaurants import router as restaurants_router
from gateway.services.gateway import build_gateway
from gateway.services.transport import DEFAULT_TIMEOUT


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        app.state.gateway = build_gateway(settings, client)
        yield


app = FastAPI(title="Travel Inventory Gateway", lifespan=lifespan)

app.add_exception_handler(GatewayError, gateway_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

app.include_router(hotels_router)
app.include_router(rentals_router)
app.include_router(restaurants_router)
app.include_router(accommodations_router)
