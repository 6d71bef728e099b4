import asyncio
import logging

from savings_engine.mappers.classifiers import is_deal_result
from savings_engine.mappers.deal_extraction import extract_hotel_deal
from savings_engine.mappers.deal_merger import combine_deal_sources, deduplicate_deals
from savings_engine.mappers.ranking import analyze_deals
from savings_engine.mappers.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from savings_engine.schemas.deals import AnalysisResult, HotelDeal, QueryError
from savings_engine.schemas.requests import HotelSearchParams
from savings_engine.schemas.search import BasePriceRecord, SearchBatch
from savings_engine.services.serpapi import SerpApiService

logger = logging.getLogger(__name__)


def build_deal_queries(hotel_name: str, check_in_date: str) -> list[str]:
    return [
        f"{hotel_name} promo codes discounts {check_in_date}",
        f"{hotel_name} corporate discount codes",
        f"{hotel_name} employee discount rates",
        f"{hotel_name} special offers deals",
        f"{hotel_name} coupon codes {check_in_date}",
    ]


def extract_hotel_candidates(
    batches: list[SearchBatch],
    hotel_name: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> list[HotelDeal]:
    candidates = []
    for batch in batches:
        for item in batch.items:
            if is_deal_result(item, vocabulary):
                candidates.append(extract_hotel_deal(item, hotel_name, batch.query, vocabulary))
    return candidates


class HotelDealAnalyzer:
    def __init__(
        self,
        serpapi: SerpApiService,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ):
        self._serpapi = serpapi
        self._vocabulary = vocabulary
        self._stop_words = frozenset(vocabulary.name_stop_words)

    async def _base_prices(
        self, params: HotelSearchParams
    ) -> tuple[list[BasePriceRecord], QueryError | None]:
        query = params.hotel_name
        try:
            records = await self._serpapi.search_hotels(
                query,
                params.check_in_date.isoformat(),
                params.check_out_date.isoformat(),
            )
        except Exception as exc:
            logger.exception("Base price lookup failed for %s", query)
            return [], QueryError(query=f"google_hotels: {query}", error=str(exc) or type(exc).__name__)
        return records, None

    async def find_best_deal(self, params: HotelSearchParams) -> AnalysisResult:
        """Look up base prices and deal mentions, then pick the biggest saving."""
        queries = build_deal_queries(params.hotel_name, params.check_in_date.isoformat())

        (records, price_error), batches = await asyncio.gather(
            self._base_prices(params),
            self._serpapi.search_many(queries),
        )

        candidates = deduplicate_deals(
            extract_hotel_candidates(batches, params.hotel_name, self._vocabulary)
        )
        combined = combine_deal_sources(records, candidates, self._stop_words)
        logger.info(
            "Hotel analysis for %s: %d prices, %d candidates, %d combined deals",
            params.hotel_name, len(records), len(candidates), len(combined),
        )

        result = analyze_deals(combined, params.duration or 0)
        errors = [QueryError(query=b.query, error=b.error) for b in batches if b.error]
        if price_error:
            errors.insert(0, price_error)
        result.query_errors = errors
        return result
