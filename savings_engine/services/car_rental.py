import asyncio
import logging
from datetime import date, timedelta

from savings_engine.mappers.classifiers import is_car_rental_result
from savings_engine.mappers.deal_extraction import extract_car_rental_deal
from savings_engine.mappers.deal_merger import deduplicate_deals
from savings_engine.mappers.ranking import analyze_car_rental_deals
from savings_engine.mappers.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from savings_engine.schemas.deals import AnalysisResult, CarRentalDeal, QueryError
from savings_engine.schemas.requests import CarRentalSearchParams
from savings_engine.schemas.search import SearchBatch
from savings_engine.services.serpapi import SerpApiService

logger = logging.getLogger(__name__)

ORLANDO_LOCATIONS = [
    "MCO Airport",
    "Orlando International Airport",
    "Disney World",
    "Universal Studios",
    "International Drive",
    "Kissimmee",
]
VENDOR_QUERY_COUNT = 5


def default_pickup_date(today: date | None = None) -> str:
    return ((today or date.today()) + timedelta(days=1)).isoformat()


def default_return_date(today: date | None = None) -> str:
    return ((today or date.today()) + timedelta(days=8)).isoformat()


def build_search_queries(
    location: str,
    car_type: str,
    pickup_date: str,
    vendors: list[str],
) -> list[str]:
    base = [
        f"Orlando car rental deals {car_type} {pickup_date}",
        "MCO airport car rental discount codes",
        "Orlando car rental promo codes coupons",
        "cheap car rental Orlando Florida",
        f"{location} car rental best rates",
        "Orlando car rental corporate discount codes",
        "Florida car rental AAA discount",
        "Orlando rental car military discount",
        "Costco car rental Orlando deals",
        "Orlando weekly car rental specials",
    ]
    company = [
        f"{vendor} car rental Orlando promo code discount"
        for vendor in vendors[:VENDOR_QUERY_COUNT]
    ]
    # Collapse the double space left by an empty car type
    return [" ".join(q.split()) for q in base + company]


def build_company_queries(company: str, pickup_date: str) -> list[str]:
    return [
        f"{company} Orlando car rental promo code {pickup_date}",
        f"{company} MCO airport discount code",
        f"{company} car rental coupon Florida",
        f"{company} corporate rate Orlando",
    ]


def _query_errors(batches: list[SearchBatch]) -> list[QueryError]:
    return [QueryError(query=b.query, error=b.error) for b in batches if b.error]


class CarRentalService:
    def __init__(
        self,
        serpapi: SerpApiService,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ):
        self._serpapi = serpapi
        self._vocabulary = vocabulary

    @property
    def companies(self) -> list[str]:
        return list(self._vocabulary.vendors)

    def _extract(
        self,
        batches: list[SearchBatch],
        params: CarRentalSearchParams | None = None,
        company: str | None = None,
    ) -> list[CarRentalDeal]:
        deals = []
        for batch in batches:
            for item in batch.items:
                if not is_car_rental_result(item, self._vocabulary):
                    continue
                deals.append(extract_car_rental_deal(
                    item,
                    batch.query,
                    pickup_location=params.pickup_location if params else None,
                    pickup_date=params.pickup_date if params else None,
                    return_date=params.return_date if params else None,
                    company=company,
                    vocabulary=self._vocabulary,
                ))
        return deals

    async def search_car_rentals(self, params: CarRentalSearchParams) -> AnalysisResult:
        queries = build_search_queries(
            params.pickup_location, params.car_type, params.pickup_date,
            self._vocabulary.vendors,
        )
        batches = await self._serpapi.search_many(queries)

        deals = deduplicate_deals(self._extract(batches, params))
        logger.info("Car rental search found %d unique deals", len(deals))

        result = analyze_car_rental_deals(deals)
        result.query_errors = _query_errors(batches)
        return result

    async def search_by_company(
        self,
        company: str,
        pickup_date: str,
        return_date: str,
    ) -> AnalysisResult:
        params = CarRentalSearchParams(pickup_date=pickup_date, return_date=return_date)
        batches = await self._serpapi.search_many(build_company_queries(company, pickup_date))

        deals = self._extract(batches, params, company=company)
        logger.info("Found %d deals for %s", len(deals), company)

        result = analyze_car_rental_deals(deals)
        result.query_errors = _query_errors(batches)
        return result

    async def get_all_company_deals(self, pickup_date: str, return_date: str) -> AnalysisResult:
        """Vendor searches for the whole roster, ranked together."""
        results = await asyncio.gather(*(
            self.search_by_company(company, pickup_date, return_date)
            for company in self._vocabulary.vendors
        ))

        deals = [deal for r in results for deal in r.all_deals]
        combined = analyze_car_rental_deals(deals)
        combined.query_errors = [e for r in results for e in r.query_errors]
        return combined
