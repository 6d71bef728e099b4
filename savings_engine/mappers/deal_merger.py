import logging
from typing import TypeVar

from savings_engine.mappers.price_matcher import DEFAULT_STOP_WORDS, find_matching_record
from savings_engine.schemas.deals import DealCandidate, DealType, HotelDeal
from savings_engine.schemas.search import BasePriceRecord

logger = logging.getLogger(__name__)

BASELINE_CONFIDENCE = 0.95
SUSPICIOUS_DISCOUNT_PERCENT = 70

D = TypeVar("D", bound=DealCandidate)


def apply_discount(
    base_price: float,
    discount_percent: int | None = None,
    savings_absolute: float | None = None,
) -> tuple[float, float]:
    """Return (discounted_price, savings) for a base price.

    A percentage wins over an absolute amount. The discounted price is kept
    within [0, base_price] so savings are never negative.
    """
    if discount_percent is not None:
        discounted = base_price * (1 - discount_percent / 100)
    elif savings_absolute is not None:
        discounted = base_price - savings_absolute
    else:
        discounted = base_price

    discounted = round(min(max(discounted, 0.0), base_price), 2)
    savings = round(max(base_price - discounted, 0.0), 2)
    return discounted, savings


def _baseline(record: BasePriceRecord) -> HotelDeal:
    return HotelDeal(
        identity=record.name,
        deal_type=DealType.standard_rate,
        description="Standard Rate - No promotion applied",
        base_price=record.amount,
        discounted_price=record.amount,
        savings_absolute=0.0,
        currency=record.currency,
        rating=record.rating,
        confidence=BASELINE_CONFIDENCE,
        source="serpapi_google_hotels",
    )


def combine_deal_sources(
    records: list[BasePriceRecord],
    candidates: list[HotelDeal],
    stop_words: frozenset[str] = DEFAULT_STOP_WORDS,
) -> list[HotelDeal]:
    """Merge authoritative base prices with deals extracted from snippets.

    Every price record contributes a Standard Rate entry. Each candidate is
    priced against the first record whose name matches its identity;
    candidates without a matching record are dropped.
    """
    combined = [_baseline(record) for record in records]

    for candidate in candidates:
        record = find_matching_record(candidate.identity, records, stop_words)
        if record is None:
            logger.debug("No base price for '%s', skipping deal", candidate.identity)
            continue

        if (candidate.discount_percent or 0) > SUSPICIOUS_DISCOUNT_PERCENT:
            logger.warning(
                "Very high discount: %s%% for %s - verify authenticity",
                candidate.discount_percent, candidate.identity,
            )

        discounted, savings = apply_discount(
            record.amount,
            candidate.discount_percent,
            candidate.estimated_savings_absolute,
        )
        if discounted == 0:
            logger.warning("Free stay detected for %s - verify deal", candidate.identity)

        combined.append(candidate.model_copy(update={
            "base_price": record.amount,
            "discounted_price": discounted,
            "savings_absolute": savings,
            "currency": record.currency,
            "rating": record.rating,
        }))

    return combined


def dedup_key(deal: DealCandidate) -> tuple[str, str]:
    return deal.identity.strip().lower(), deal.promo_code or str(deal.deal_type)


def deduplicate_deals(deals: list[D]) -> list[D]:
    """Drop deals whose key was already seen; the first occurrence is kept."""
    seen: set[tuple[str, str]] = set()
    unique: list[D] = []
    for deal in deals:
        key = dedup_key(deal)
        if key in seen:
            continue
        seen.add(key)
        unique.append(deal)
    return unique
