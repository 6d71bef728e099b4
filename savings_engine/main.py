import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from savings_engine.config import Settings
from savings_engine.exceptions.custom import (
    AmadeusError,
    AmadeusNotConfiguredError,
    RateLimitError,
)
from savings_engine.exceptions.handlers import (
    amadeus_error_handler,
    amadeus_not_configured_handler,
    rate_limit_error_handler,
)
from savings_engine.mappers.vocabulary import DEFAULT_VOCABULARY, load_vocabulary
from savings_engine.routers.analyzer import router as analyzer_router
from savings_engine.routers.carrental import router as carrental_router
from savings_engine.routers.flights import router as flights_router
from savings_engine.schemas.responses import HealthResponse
from savings_engine.services.amadeus import AmadeusService, AmadeusTokenProvider
from savings_engine.services.car_rental import CarRentalService
from savings_engine.services.hotel_deals import HotelDealAnalyzer
from savings_engine.services.serpapi import SerpApiService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    vocabulary = DEFAULT_VOCABULARY
    if settings.vocabulary_file:
        vocabulary = load_vocabulary(settings.vocabulary_file)
        logger.info("Loaded vocabulary from %s", settings.vocabulary_file)

    async with httpx.AsyncClient(timeout=30.0) as client:
        serpapi = SerpApiService(client, settings.serpapi_api_key, settings.search_location)
        app.state.hotel_deal_analyzer = HotelDealAnalyzer(serpapi, vocabulary)
        app.state.car_rental_service = CarRentalService(serpapi, vocabulary)

        # Amadeus is optional: flights answer 503 without credentials
        if settings.amadeus_configured:
            tokens = AmadeusTokenProvider(
                client,
                settings.amadeus_api_key,
                settings.amadeus_api_secret,
                settings.amadeus_base_url,
            )
            app.state.amadeus_service = AmadeusService(
                client, tokens, settings.amadeus_base_url
            )
        else:
            app.state.amadeus_service = None

        yield


app = FastAPI(title="Savings Engine", lifespan=lifespan)

app.add_exception_handler(AmadeusError, amadeus_error_handler)
app.add_exception_handler(AmadeusNotConfiguredError, amadeus_not_configured_handler)
app.add_exception_handler(RateLimitError, rate_limit_error_handler)

app.include_router(analyzer_router)
app.include_router(carrental_router)
app.include_router(flights_router)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="OK",
        services={
            "serpapi": hasattr(app.state, "hotel_deal_analyzer"),
            "amadeus": getattr(app.state, "amadeus_service", None) is not None,
        },
    )
