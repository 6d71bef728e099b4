"""Keyword tables used by the classifiers, extractors and scorers.

The tables are plain data so the taxonomy can grow without touching the
matching code. Deployments can replace them with a JSON document through the
``VOCABULARY_FILE`` setting.
"""

from pathlib import Path

from pydantic import BaseModel

from savings_engine.schemas.deals import DealType


class DealTypeRule(BaseModel):
    category: DealType
    keywords: list[str]


class Vocabulary(BaseModel):
    deal_keywords: list[str]
    rental_keywords: list[str]
    vendors: list[str]
    rental_domains: list[str]
    hotel_domains: list[str]
    car_deal_types: list[DealTypeRule]  # evaluated in order, first hit wins
    hotel_deal_types: list[DealTypeRule]
    name_stop_words: list[str]


DEFAULT_VOCABULARY = Vocabulary(
    deal_keywords=[
        "promo", "discount", "coupon", "corporate", "employee",
        "deal", "code", "save", "off", "special", "offer", "%",
    ],
    rental_keywords=[
        "rental", "rent a car", "rent-a-car", "car hire",
        "vehicle rental", "auto rental",
    ],
    vendors=[
        "Enterprise", "Hertz", "Budget", "Avis", "National",
        "Alamo", "Dollar", "Thrifty", "Sixt", "Fox Rent A Car",
    ],
    rental_domains=[
        "enterprise.com", "hertz.com", "budget.com", "avis.com",
        "nationalcar.com", "alamo.com", "dollar.com", "thrifty.com",
        "sixt.com", "foxrentacar.com", "costcotravel.com", "autoslash.com",
    ],
    hotel_domains=[
        "disneyworld.disney.go.com", "disney.go.com", "universalorlando.com",
        "marriott.com", "hilton.com", "hyatt.com", "ihg.com", "wyndhamhotels.com",
        "loewshotels.com", "choicehotels.com", "booking.com", "expedia.com",
        "hotels.com",
    ],
    car_deal_types=[
        DealTypeRule(category=DealType.corporate, keywords=["corporate", "business"]),
        DealTypeRule(category=DealType.aaa, keywords=["aaa", "auto club"]),
        DealTypeRule(category=DealType.military, keywords=["military", "veteran"]),
        DealTypeRule(category=DealType.promo_code, keywords=["promo", "coupon", "code"]),
    ],
    hotel_deal_types=[
        DealTypeRule(category=DealType.corporate, keywords=["corporate", "employee"]),
        DealTypeRule(category=DealType.promo_code, keywords=["promo", "code"]),
        DealTypeRule(category=DealType.coupon, keywords=["coupon"]),
        DealTypeRule(category=DealType.special_offer, keywords=["special"]),
        DealTypeRule(category=DealType.percentage_off, keywords=["save", "off"]),
    ],
    name_stop_words=[
        "hotel", "hotels", "resort", "resorts", "suites", "suite", "inn",
        "lodge", "motel", "the", "and", "at", "of", "by", "orlando",
    ],
)


def load_vocabulary(path: str | Path) -> Vocabulary:
    """Read a vocabulary override from a JSON file."""
    return Vocabulary.model_validate_json(Path(path).read_text(encoding="utf-8"))
