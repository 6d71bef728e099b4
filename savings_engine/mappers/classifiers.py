from savings_engine.mappers.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from savings_engine.schemas.search import SearchResultItem


def _contains_any(text: str, keywords: list[str]) -> bool:
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def is_deal_result(
    item: SearchResultItem, vocabulary: Vocabulary = DEFAULT_VOCABULARY
) -> bool:
    """Whether a hotel search result mentions a promotion of any kind."""
    return _contains_any(item.text, vocabulary.deal_keywords)


def is_car_rental_result(
    item: SearchResultItem, vocabulary: Vocabulary = DEFAULT_VOCABULARY
) -> bool:
    """Rental-intent wording or a known rental company in title/snippet."""
    return _contains_any(item.text, vocabulary.rental_keywords) or _contains_any(
        item.text, vocabulary.vendors
    )
