"""Deterministic confidence heuristics.

Text deals (hotel and car rental snippets) start at ``TEXT_BASE`` and collect
additive bonuses in this order:

  1. search position: 0.25 for rank 1, 0.05 less per rank, nothing past rank 5
  2. link on a recognized vendor domain: +0.15
  3. promo code found in the snippet: +0.10
  4. snippet longer than 100 characters: +0.05

The total is capped at 0.95, so the best case (rank 1, vendor domain, code,
long snippet) lands exactly on the cap.

Flight offers start at ``FLIGHT_BASE``: +0.20 for a direct itinerary
(divided by stops + 1 otherwise), up to +0.15 for bookable seats (saturating at 9), and
-0.10 when instant ticketing is required. Clamped to [0, 1].
"""

from urllib.parse import urlparse

from savings_engine.schemas.flights import FlightOffer
from savings_engine.schemas.search import SearchResultItem

TEXT_BASE = 0.5
TEXT_CAP = 0.95
POSITION_CUTOFF = 5
POSITION_STEP = 0.05
DOMAIN_BONUS = 0.15
PROMO_CODE_BONUS = 0.10
RICH_SNIPPET_BONUS = 0.05
RICH_SNIPPET_LENGTH = 100

FLIGHT_BASE = 0.5
DIRECT_BONUS = 0.20
SEAT_BONUS = 0.15
SEAT_SATURATION = 9
INSTANT_TICKETING_PENALTY = 0.10


def position_bonus(position: int | None) -> float:
    if position is None or position < 1 or position > POSITION_CUTOFF:
        return 0.0
    return POSITION_STEP * (POSITION_CUTOFF + 1 - position)


def is_trusted_domain(link: str | None, domains: list[str]) -> bool:
    if not link:
        return False
    host = (urlparse(link).hostname or "").lower()
    if not host:
        return False
    return any(host == d or host.endswith("." + d) for d in domains)


def confidence_factors(
    item: SearchResultItem,
    promo_code: str | None,
    trusted_domains: list[str],
) -> dict[str, float]:
    """Individual contributions that add up to the text confidence."""
    return {
        "base": TEXT_BASE,
        "position": position_bonus(item.position),
        "domain": DOMAIN_BONUS if is_trusted_domain(item.link, trusted_domains) else 0.0,
        "promo_code": PROMO_CODE_BONUS if promo_code else 0.0,
        "snippet": RICH_SNIPPET_BONUS if len(item.snippet) > RICH_SNIPPET_LENGTH else 0.0,
    }


def calculate_confidence(
    item: SearchResultItem,
    promo_code: str | None,
    trusted_domains: list[str],
) -> float:
    score = sum(confidence_factors(item, promo_code, trusted_domains).values())
    return round(min(max(score, 0.0), TEXT_CAP), 4)


def count_stops(offer: FlightOffer) -> int:
    return sum(max(len(it.segments) - 1, 0) for it in offer.itineraries)


def calculate_flight_confidence(offer: FlightOffer) -> float:
    confidence = FLIGHT_BASE
    confidence += DIRECT_BONUS / (count_stops(offer) + 1)

    seats = min(max(offer.numberOfBookableSeats, 0), SEAT_SATURATION)
    confidence += SEAT_BONUS * seats / SEAT_SATURATION

    if offer.instantTicketingRequired:
        confidence -= INSTANT_TICKETING_PENALTY

    return round(min(max(confidence, 0.0), 1.0), 4)
