import logging

from fastapi import APIRouter

from savings_engine.dependencies import HotelDealAnalyzerDep
from savings_engine.schemas.requests import HotelSearchParams
from savings_engine.schemas.responses import HotelDealResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyzer")


@router.post("/find-best-deal", response_model=HotelDealResponse)
async def find_best_deal(
    params: HotelSearchParams,
    analyzer: HotelDealAnalyzerDep,
) -> HotelDealResponse:
    analysis = await analyzer.find_best_deal(params)
    if analysis.query_errors:
        logger.warning(
            "Hotel analysis for %s finished with %d failed queries",
            params.hotel_name, len(analysis.query_errors),
        )
    return HotelDealResponse(search_parameters=params, analysis=analysis)
