import pytest
import respx
from httpx import AsyncClient, Response

from savings_engine.exceptions.custom import (
    AmadeusError,
    AmadeusNotConfiguredError,
    RateLimitError,
)
from savings_engine.schemas.flights import FlightSearchParams, MultiOriginSearchParams
from savings_engine.services.amadeus import (
    FLIGHT_OFFERS_PATH,
    TOKEN_PATH,
    AmadeusService,
    AmadeusTokenProvider,
    parse_flight_offers,
)

BASE_URL = "https://test.api.amadeus.com"
TOKEN_URL = f"{BASE_URL}{TOKEN_PATH}"
OFFERS_URL = f"{BASE_URL}{FLIGHT_OFFERS_PATH}"


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tokens(clock):
    return AmadeusTokenProvider(AsyncClient(), "key", "secret", BASE_URL, clock=clock)


@pytest.fixture
def service(tokens):
    return AmadeusService(AsyncClient(), tokens, BASE_URL)


def _token_response(token="tok-1", expires_in=1799):
    return Response(200, json={"access_token": token, "expires_in": expires_in})


def _segment(origin, dest, carrier="DL"):
    return {
        "departure": {"iataCode": origin, "at": "2025-12-20T08:00:00"},
        "arrival": {"iataCode": dest, "at": "2025-12-20T11:00:00"},
        "carrierCode": carrier,
        "number": "1201",
    }


OFFERS_BODY = {
    "meta": {"count": 2},
    "data": [
        {
            "id": "1",
            "numberOfBookableSeats": 3,
            "itineraries": [{"segments": [_segment("JFK", "ATL"), _segment("ATL", "MCO")]}],
            "price": {"currency": "USD", "total": "158.00"},
        },
        {
            "id": "2",
            "numberOfBookableSeats": 9,
            "itineraries": [{"segments": [_segment("JFK", "MCO", "B6")]}],
            "price": {"currency": "USD", "total": "212.00"},
        },
    ],
    "dictionaries": {"carriers": {"DL": "DELTA AIR LINES", "B6": "JETBLUE AIRWAYS"}},
}


# --- token provider ---


@respx.mock
@pytest.mark.asyncio
async def test_token_is_cached(tokens):
    route = respx.post(TOKEN_URL).mock(return_value=_token_response())

    assert await tokens.get_valid_token() == "tok-1"
    assert await tokens.get_valid_token() == "tok-1"
    assert route.call_count == 1
    body = route.calls.last.request.content.decode()
    assert "grant_type=client_credentials" in body
    assert "client_id=key" in body


@respx.mock
@pytest.mark.asyncio
async def test_token_refreshed_before_expiry(tokens, clock):
    route = respx.post(TOKEN_URL).mock(
        side_effect=[_token_response("tok-1"), _token_response("tok-2")]
    )

    await tokens.get_valid_token()
    # 1799s lifetime minus the 300s margin
    clock.now += 1498
    assert await tokens.get_valid_token() == "tok-1"
    clock.now += 1
    assert await tokens.get_valid_token() == "tok-2"
    assert route.call_count == 2


@pytest.mark.asyncio
async def test_token_without_credentials(clock):
    provider = AmadeusTokenProvider(AsyncClient(), "", "", BASE_URL, clock=clock)
    assert not provider.configured
    with pytest.raises(AmadeusNotConfiguredError):
        await provider.get_valid_token()


@respx.mock
@pytest.mark.asyncio
async def test_token_auth_failure(tokens):
    respx.post(TOKEN_URL).mock(
        return_value=Response(401, json={"errors": [{"title": "Invalid client"}]})
    )
    with pytest.raises(AmadeusError, match="Invalid client") as exc_info:
        await tokens.get_valid_token()
    assert exc_info.value.status_code == 401
    assert tokens.is_expired()


# --- search_flights ---


@respx.mock
@pytest.mark.asyncio
async def test_search_flights_scores_offers(service):
    respx.post(TOKEN_URL).mock(return_value=_token_response())
    route = respx.get(OFFERS_URL).mock(return_value=Response(200, json=OFFERS_BODY))

    result = await service.search_flights(FlightSearchParams(
        origin="jfk", departure_date="2025-12-20", return_date="2025-12-27",
        adults=2, non_stop=True,
    ))

    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer tok-1"
    params = request.url.params
    assert params["originLocationCode"] == "JFK"
    assert params["destinationLocationCode"] == "MCO"
    assert params["returnDate"] == "2025-12-27"
    assert params["nonStop"] == "true"
    assert "children" not in params

    assert [s.offer.id for s in result.offers] == ["1", "2"]
    assert result.offers[1].confidence > result.offers[0].confidence
    assert result.offers[0].price_per_traveler == 79.0
    assert result.offers[1].outbound.segments[0].carrier_name == "JETBLUE AIRWAYS"
    assert result.meta == {"count": 2}


@respx.mock
@pytest.mark.asyncio
async def test_search_flights_empty(service):
    respx.post(TOKEN_URL).mock(return_value=_token_response())
    respx.get(OFFERS_URL).mock(return_value=Response(200, json={"data": []}))

    result = await service.search_flights(
        FlightSearchParams(origin="JFK", departure_date="2025-12-20")
    )
    assert result.offers == []


@respx.mock
@pytest.mark.asyncio
async def test_search_flights_api_error(service):
    respx.post(TOKEN_URL).mock(return_value=_token_response())
    respx.get(OFFERS_URL).mock(return_value=Response(
        400, json={"errors": [{"title": "INVALID FORMAT", "detail": "departureDate is in the past"}]}
    ))

    with pytest.raises(AmadeusError, match="departureDate is in the past"):
        await service.search_flights(FlightSearchParams(origin="JFK", departure_date="2020-01-01"))


@respx.mock
@pytest.mark.asyncio
async def test_search_flights_rate_limit(service):
    respx.post(TOKEN_URL).mock(return_value=_token_response())
    respx.get(OFFERS_URL).mock(return_value=Response(429))

    with pytest.raises(RateLimitError):
        await service.search_flights(FlightSearchParams(origin="JFK", departure_date="2025-12-20"))


def test_parse_flight_offers_skips_malformed():
    offer_without_price = {**OFFERS_BODY["data"][0], "id": "3", "price": {"currency": "USD"}}
    offers = parse_flight_offers([OFFERS_BODY["data"][1], offer_without_price, "junk"])
    assert [o.id for o in offers] == ["2"]


@respx.mock
@pytest.mark.asyncio
async def test_search_flights_skips_malformed_offer(service):
    body = {
        **OFFERS_BODY,
        "data": [OFFERS_BODY["data"][1], {"id": "bad", "itineraries": []}],
    }
    respx.post(TOKEN_URL).mock(return_value=_token_response())
    respx.get(OFFERS_URL).mock(return_value=Response(200, json=body))

    result = await service.search_flights(
        FlightSearchParams(origin="JFK", departure_date="2025-12-20")
    )

    assert [s.offer.id for s in result.offers] == ["2"]


# --- search_from_origins ---


@respx.mock
@pytest.mark.asyncio
async def test_search_from_origins_isolates_failures(service):
    def _respond(request):
        if request.url.params["originLocationCode"] == "BOS":
            return Response(500, json={"errors": [{"title": "SYSTEM ERROR"}]})
        return Response(200, json=OFFERS_BODY)

    respx.post(TOKEN_URL).mock(return_value=_token_response())
    respx.get(OFFERS_URL).mock(side_effect=_respond)

    result = await service.search_from_origins(MultiOriginSearchParams(
        origins=["JFK", "BOS", "ATL"], departure_date="2025-12-20",
    ))

    assert [r.origin for r in result.results] == ["JFK", "BOS", "ATL"]
    assert len(result.results[0].offers) == 2
    assert result.results[1].offers == []
    assert result.results[1].error == "SYSTEM ERROR"
    assert result.results[2].error is None
    assert result.total_results == 4


@respx.mock
@pytest.mark.asyncio
async def test_search_from_origins_uses_each_origin(service):
    respx.post(TOKEN_URL).mock(return_value=_token_response())
    route = respx.get(OFFERS_URL).mock(return_value=Response(200, json={"data": []}))

    await service.search_from_origins(MultiOriginSearchParams(
        origins=["jfk", "ord"], destination="MCO", departure_date="2025-12-20", adults=2,
    ))

    sent = {call.request.url.params["originLocationCode"] for call in route.calls}
    assert sent == {"JFK", "ORD"}
    assert all(call.request.url.params["adults"] == "2" for call in route.calls)
