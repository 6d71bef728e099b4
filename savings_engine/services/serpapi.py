import asyncio
import logging
import re

import httpx
from pydantic import ValidationError

from savings_engine.exceptions.custom import RateLimitError, SerpApiError
from savings_engine.schemas.search import BasePriceRecord, SearchBatch, SearchResultItem

logger = logging.getLogger(__name__)

SEARCH_URL = "https://serpapi.com/search"
DEFAULT_LOCATION = "Orlando, Florida, United States"
NO_RESULTS_MARKER = "hasn't returned any results"

_PRICE_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)")


def parse_organic_results(raw_results: list) -> list[SearchResultItem]:
    """Validate organic results, skipping entries missing required fields."""
    items: list[SearchResultItem] = []
    for raw in raw_results or []:
        if not isinstance(raw, dict):
            continue
        try:
            items.append(SearchResultItem(**raw))
        except ValidationError:
            logger.debug("Skipping malformed search result: %s", raw.get("title"))
    return items


def _parse_price(rate: dict | None) -> float | None:
    if not isinstance(rate, dict):
        return None
    extracted = rate.get("extracted_lowest")
    if isinstance(extracted, (int, float)):
        return float(extracted)
    lowest = rate.get("lowest")
    if isinstance(lowest, (int, float)):
        return float(lowest)
    if isinstance(lowest, str):
        m = _PRICE_RE.search(lowest)
        if m:
            return float(m.group(1).replace(",", ""))
    return None


def parse_hotel_properties(properties: list) -> list[BasePriceRecord]:
    """Turn google_hotels properties into base price records.

    Properties without a name or a positive nightly rate are skipped.
    """
    records: list[BasePriceRecord] = []
    for prop in properties or []:
        if not isinstance(prop, dict):
            continue
        rate = prop.get("rate_per_night")
        try:
            records.append(BasePriceRecord(
                name=prop.get("name"),
                amount=_parse_price(rate),
                currency=(rate or {}).get("currency") or "USD",
                rating=prop.get("overall_rating"),
                property_token=prop.get("property_token"),
            ))
        except ValidationError:
            logger.debug("Skipping hotel without usable price: %s", prop.get("name"))
    return records


class SerpApiService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        location: str = DEFAULT_LOCATION,
    ):
        self._client = client
        self._api_key = api_key
        self._location = location

    async def _get(self, params: dict) -> dict:
        resp = await self._client.get(
            SEARCH_URL, params={**params, "api_key": self._api_key}
        )

        if resp.status_code == 429:
            raise RateLimitError("SerpApi")
        if resp.status_code >= 400:
            raise SerpApiError(resp.text, status_code=resp.status_code)

        data = resp.json()
        error = data.get("error")
        if error:
            # An empty result page comes back as an "error"
            if NO_RESULTS_MARKER in error:
                logger.info("SerpApi: %s (q=%s)", error, params.get("q"))
                return {}
            raise SerpApiError(error, status_code=resp.status_code)
        return data

    async def search_light(self, query: str, location: str | None = None) -> SearchBatch:
        """Google Light search: organic results for one query."""
        data = await self._get({
            "engine": "google_light",
            "q": query,
            "location": location or self._location,
            "google_domain": "google.com",
            "hl": "en",
            "gl": "us",
        })
        items = parse_organic_results(data.get("organic_results", []))
        if not items:
            logger.info("No organic results for query: %s", query)
        return SearchBatch(query=query, items=items)

    async def search_hotels(
        self,
        query: str,
        check_in_date: str,
        check_out_date: str,
        adults: int = 2,
    ) -> list[BasePriceRecord]:
        """Google Hotels search sorted by lowest price."""
        data = await self._get({
            "engine": "google_hotels",
            "q": query,
            "check_in_date": check_in_date,
            "check_out_date": check_out_date,
            "adults": adults,
            "sort_by": 3,
            "gl": "us",
            "hl": "en",
            "currency": "USD",
        })
        records = parse_hotel_properties(data.get("properties", []))
        logger.info("Google Hotels returned %d priced properties for %s", len(records), query)
        return records

    async def _search_light_safe(self, query: str, location: str | None) -> SearchBatch:
        try:
            return await self.search_light(query, location)
        except Exception as exc:
            logger.exception("Search failed for: %s", query)
            return SearchBatch(query=query, error=str(exc) or type(exc).__name__)

    async def search_many(
        self, queries: list[str], location: str | None = None
    ) -> list[SearchBatch]:
        """Run queries concurrently; a failed query yields an empty batch with
        its error instead of failing the others."""
        return list(await asyncio.gather(
            *(self._search_light_safe(q, location) for q in queries)
        ))
