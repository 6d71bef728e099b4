from savings_engine.mappers.confidence import calculate_confidence
from savings_engine.mappers.extractors import (
    estimate_savings_absolute,
    extract_deal_type,
    extract_discount_percent,
    extract_hotel_deal_type,
    extract_promo_code,
    identify_company,
)
from savings_engine.mappers.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from savings_engine.schemas.deals import CarRentalDeal, HotelDeal
from savings_engine.schemas.search import SearchResultItem


def extract_car_rental_deal(
    item: SearchResultItem,
    query: str,
    pickup_location: str | None = None,
    pickup_date: str | None = None,
    return_date: str | None = None,
    company: str | None = None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> CarRentalDeal:
    """Build a car rental deal from one search result.

    ``company`` pins the identity for vendor-specific searches; otherwise the
    vendor is inferred from the text.
    """
    promo_code = extract_promo_code(item.text)
    return CarRentalDeal(
        identity=company or identify_company(item.title, item.snippet, vocabulary),
        deal_type=extract_deal_type(item.title, item.snippet, vocabulary),
        promo_code=promo_code,
        discount_percent=extract_discount_percent(item.text),
        estimated_savings_absolute=estimate_savings_absolute(item.text),
        confidence=calculate_confidence(item, promo_code, vocabulary.rental_domains),
        source_link=item.link,
        source_query=query,
        title=item.title,
        description=item.snippet,
        pickup_location=pickup_location,
        pickup_date=pickup_date,
        return_date=return_date,
    )


def extract_hotel_deal(
    item: SearchResultItem,
    hotel_name: str,
    query: str,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> HotelDeal:
    promo_code = extract_promo_code(item.text)
    return HotelDeal(
        identity=hotel_name,
        deal_type=extract_hotel_deal_type(item.title, item.snippet, vocabulary),
        promo_code=promo_code,
        discount_percent=extract_discount_percent(item.text),
        estimated_savings_absolute=estimate_savings_absolute(item.text),
        confidence=calculate_confidence(item, promo_code, vocabulary.hotel_domains),
        source_link=item.link,
        source_query=query,
        title=item.title,
        description=item.snippet,
    )
