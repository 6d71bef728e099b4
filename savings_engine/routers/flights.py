from fastapi import APIRouter

from savings_engine.dependencies import AmadeusDep
from savings_engine.exceptions.custom import AmadeusNotConfiguredError
from savings_engine.schemas.flights import (
    FlightSearchParams,
    FlightSearchResult,
    MultiOriginSearchParams,
    MultiOriginSearchResult,
)

router = APIRouter(prefix="/flights")


@router.post("/search", response_model=FlightSearchResult)
async def search_flights(
    params: FlightSearchParams,
    service: AmadeusDep,
) -> FlightSearchResult:
    if service is None:
        raise AmadeusNotConfiguredError()
    return await service.search_flights(params)


@router.post("/search-multiple", response_model=MultiOriginSearchResult)
async def search_from_origins(
    params: MultiOriginSearchParams,
    service: AmadeusDep,
) -> MultiOriginSearchResult:
    if service is None:
        raise AmadeusNotConfiguredError()
    return await service.search_from_origins(params)
