import asyncio
import logging
import time
from typing import Callable

import httpx
from pydantic import ValidationError

from savings_engine.exceptions.custom import (
    AmadeusError,
    AmadeusNotConfiguredError,
    RateLimitError,
)
from savings_engine.mappers.flight_mapper import score_offers
from savings_engine.schemas.flights import (
    FlightDictionaries,
    FlightOffer,
    FlightSearchParams,
    FlightSearchResult,
    MultiOriginSearchParams,
    MultiOriginSearchResult,
    OriginFlightResult,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://test.api.amadeus.com"
TOKEN_PATH = "/v1/security/oauth2/token"
FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"
TOKEN_EXPIRY_MARGIN = 300  # seconds


def _error_detail(resp: httpx.Response) -> str:
    try:
        errors = resp.json().get("errors") or []
    except ValueError:
        return resp.text
    if errors and isinstance(errors[0], dict):
        return errors[0].get("detail") or errors[0].get("title") or resp.text
    return resp.text


def parse_flight_offers(raw_offers: list) -> list[FlightOffer]:
    """Validate offers one by one, skipping those missing required fields."""
    offers: list[FlightOffer] = []
    for raw in raw_offers or []:
        if not isinstance(raw, dict):
            continue
        try:
            offers.append(FlightOffer(**raw))
        except ValidationError:
            logger.debug("Skipping malformed flight offer: %s", raw.get("id"))
    return offers


def parse_dictionaries(raw: dict | None) -> FlightDictionaries:
    try:
        return FlightDictionaries(**(raw or {}))
    except ValidationError:
        logger.debug("Ignoring malformed flight dictionaries")
        return FlightDictionaries()


class AmadeusTokenProvider:
    """OAuth2 client-credentials token cache for one Amadeus account."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self._api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._clock = clock
        self._token: str | None = None
        self._expires_at = 0.0

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._api_secret)

    def is_expired(self) -> bool:
        return self._token is None or self._clock() >= self._expires_at

    async def get_valid_token(self) -> str:
        if not self.is_expired():
            return self._token
        if not self.configured:
            raise AmadeusNotConfiguredError()

        resp = await self._client.post(
            f"{self._base_url}{TOKEN_PATH}",
            data={
                "grant_type": "client_credentials",
                "client_id": self._api_key,
                "client_secret": self._api_secret,
            },
        )
        if resp.status_code >= 400:
            raise AmadeusError(
                f"authentication failed: {_error_detail(resp)}",
                status_code=resp.status_code,
            )

        payload = resp.json()
        self._token = payload["access_token"]
        expires_in = int(payload.get("expires_in", 0))
        self._expires_at = self._clock() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0)
        logger.info("Obtained Amadeus token valid for %ss", expires_in)
        return self._token


class AmadeusService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        token_provider: AmadeusTokenProvider,
        base_url: str = DEFAULT_BASE_URL,
    ):
        self._client = client
        self._tokens = token_provider
        self._base_url = base_url.rstrip("/")

    async def _get(self, path: str, params: dict) -> dict:
        token = await self._tokens.get_valid_token()
        resp = await self._client.get(
            f"{self._base_url}{path}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )

        if resp.status_code == 429:
            raise RateLimitError("Amadeus")
        if resp.status_code >= 400:
            raise AmadeusError(_error_detail(resp), status_code=resp.status_code)
        return resp.json()

    async def search_flights(self, params: FlightSearchParams) -> FlightSearchResult:
        query = {
            "originLocationCode": params.origin.upper(),
            "destinationLocationCode": params.destination.upper(),
            "departureDate": params.departure_date,
            "adults": params.adults,
            "travelClass": params.travel_class,
            "currencyCode": params.currency_code,
            "max": params.max_results,
        }
        if params.return_date:
            query["returnDate"] = params.return_date
        if params.children > 0:
            query["children"] = params.children
        if params.non_stop:
            query["nonStop"] = "true"
        if params.max_price:
            query["maxPrice"] = params.max_price

        data = await self._get(FLIGHT_OFFERS_PATH, query)
        offers = parse_flight_offers(data.get("data", []))
        dictionaries = parse_dictionaries(data.get("dictionaries"))
        logger.info(
            "Amadeus returned %d offers %s -> %s",
            len(offers), params.origin, params.destination,
        )
        return FlightSearchResult(
            offers=score_offers(
                offers, dictionaries, travelers=params.adults + params.children
            ),
            meta=data.get("meta") or {},
            dictionaries=dictionaries,
        )

    async def _search_origin_safe(
        self, origin: str, params: FlightSearchParams
    ) -> OriginFlightResult:
        try:
            result = await self.search_flights(params.model_copy(update={"origin": origin}))
        except Exception as exc:
            logger.exception("Flight search failed for %s", origin)
            return OriginFlightResult(origin=origin, error=str(exc) or type(exc).__name__)
        return OriginFlightResult(origin=origin, offers=result.offers, meta=result.meta)

    async def search_from_origins(self, params: MultiOriginSearchParams) -> MultiOriginSearchResult:
        """Search each origin concurrently; one failing origin does not fail the rest."""
        base = FlightSearchParams(**params.model_dump(exclude={"origins"}))
        results = list(await asyncio.gather(
            *(self._search_origin_safe(origin, base) for origin in params.origins)
        ))
        return MultiOriginSearchResult(
            results=results,
            total_results=sum(len(r.offers) for r in results),
        )
