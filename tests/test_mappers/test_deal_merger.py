import logging

import pytest

from savings_engine.mappers.deal_merger import (
    BASELINE_CONFIDENCE,
    apply_discount,
    combine_deal_sources,
    dedup_key,
    deduplicate_deals,
)
from savings_engine.schemas.deals import CarRentalDeal, DealType, HotelDeal
from savings_engine.schemas.search import BasePriceRecord


# --- apply_discount ---


def test_apply_percent_discount():
    assert apply_discount(200.0, 25) == (150.0, 50.0)


def test_apply_absolute_savings():
    assert apply_discount(200.0, savings_absolute=50.0) == (150.0, 50.0)


def test_percent_takes_priority_over_absolute():
    assert apply_discount(200.0, 10, 100.0) == (180.0, 20.0)


def test_no_discount_keeps_base():
    assert apply_discount(120.0) == (120.0, 0.0)


def test_savings_larger_than_base_clamps_to_zero_price():
    assert apply_discount(80.0, savings_absolute=100.0) == (0.0, 80.0)


def test_negative_savings_never_raise_price():
    assert apply_discount(100.0, savings_absolute=-20.0) == (100.0, 0.0)


def test_full_discount():
    assert apply_discount(99.99, 100) == (0.0, 99.99)


# --- combine_deal_sources ---


def _records():
    return [
        BasePriceRecord(name="Disney's All-Star Movies Resort", amount=200.0, rating=4.1),
        BasePriceRecord(name="Disney's Pop Century Resort", amount=180.0, currency="USD"),
    ]


def test_every_record_becomes_standard_rate():
    combined = combine_deal_sources(_records(), [])

    assert len(combined) == 2
    for deal, record in zip(combined, _records()):
        assert deal.deal_type == DealType.standard_rate
        assert deal.identity == record.name
        assert deal.base_price == deal.discounted_price == record.amount
        assert deal.savings_absolute == 0.0
        assert deal.confidence == BASELINE_CONFIDENCE
        assert deal.source == "serpapi_google_hotels"


def test_candidate_priced_against_matching_record():
    candidate = HotelDeal(
        identity="Disney All-Star Movies",
        deal_type=DealType.promo_code,
        promo_code="MAGIC25",
        discount_percent=25,
        confidence=0.8,
    )
    combined = combine_deal_sources(_records(), [candidate])

    priced = combined[-1]
    assert priced.promo_code == "MAGIC25"
    assert priced.base_price == 200.0
    assert priced.discounted_price == 150.0
    assert priced.savings_absolute == 50.0
    assert priced.rating == 4.1
    assert priced.confidence == 0.8
    # input candidate untouched
    assert candidate.base_price is None


def test_candidate_without_record_dropped():
    candidate = HotelDeal(identity="Four Seasons Resort", discount_percent=30)
    combined = combine_deal_sources(_records(), [candidate])
    assert all(d.deal_type == DealType.standard_rate for d in combined)


def test_candidate_with_estimated_savings():
    candidate = HotelDeal(identity="Pop Century", estimated_savings_absolute=30.0)
    priced = combine_deal_sources(_records(), [candidate])[-1]
    assert (priced.discounted_price, priced.savings_absolute) == (150.0, 30.0)


def test_suspicious_discount_kept_with_warning(caplog):
    candidate = HotelDeal(identity="Pop Century", discount_percent=80)
    with caplog.at_level(logging.WARNING):
        combined = combine_deal_sources(_records(), [candidate])

    assert combined[-1].discounted_price == 36.0
    assert "Very high discount" in caplog.text


def test_no_records_no_deals():
    candidate = HotelDeal(identity="Pop Century", discount_percent=10)
    assert combine_deal_sources([], [candidate]) == []


# --- deduplication ---


def _car(identity, promo=None, deal_type=DealType.general, confidence=0.5):
    return CarRentalDeal(
        identity=identity, promo_code=promo, deal_type=deal_type, confidence=confidence
    )


def test_dedup_key_falls_back_to_deal_type():
    assert dedup_key(_car("Hertz", "SAVE10")) == ("hertz", "SAVE10")
    assert dedup_key(_car(" Hertz ", deal_type=DealType.aaa)) == ("hertz", "AAA Member Discount")


def test_dedup_keeps_first_occurrence():
    a = _car("Hertz", "SAVE10", confidence=0.6)
    b = _car("hertz", "SAVE10", confidence=0.9)
    c = _car("Hertz", deal_type=DealType.aaa)
    d = _car("Avis", "SAVE10")

    result = deduplicate_deals([a, b, c, d])

    assert result == [a, c, d]
    assert result[0].confidence == 0.6


def test_dedup_is_idempotent():
    deals = [_car("Hertz", "SAVE10"), _car("HERTZ", "SAVE10"), _car("Budget")]
    once = deduplicate_deals(deals)
    assert deduplicate_deals(once) == once


@pytest.mark.parametrize("deals", [[], [_car("Hertz")]])
def test_dedup_small_inputs(deals):
    assert deduplicate_deals(deals) == deals
