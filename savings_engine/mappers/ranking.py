"""Deal ordering and summary statistics.

Two selection policies coexist and are kept apart on purpose:

- car rentals: best deal is the top of ``rank_deals`` (confidence, then
  discount percent);
- hotels: best deal is the one with the largest absolute savings.
"""

from typing import Sequence, TypeVar

from savings_engine.mappers.extractors import UNKNOWN_COMPANY
from savings_engine.schemas.deals import (
    AnalysisResult,
    AnalysisSummary,
    CarRentalDeal,
    DealCandidate,
    HotelDeal,
)

D = TypeVar("D", bound=DealCandidate)


def rank_deals(deals: Sequence[D]) -> list[D]:
    """Stable sort: confidence desc, then discount percent desc."""
    return sorted(
        deals,
        key=lambda d: (-d.confidence, -(d.discount_percent or 0)),
    )


def summarize_deals(deals: Sequence[DealCandidate]) -> AnalysisSummary:
    if not deals:
        return AnalysisSummary()
    total_discount = sum(d.discount_percent or 0 for d in deals)
    return AnalysisSummary(
        total_deals=len(deals),
        average_discount_percent=round(total_discount / len(deals), 2),
        total_potential_savings=round(sum(d.potential_savings for d in deals), 2),
    )


def analyze_deals(deals: Sequence[HotelDeal], duration: int = 0) -> AnalysisResult:
    """Hotel policy: the deal with the highest absolute savings wins.

    ``all_deals`` is ordered by savings (stable), so ``best_deal`` is also its
    first element. Ties keep the earliest deal.
    """
    ordered = sorted(deals, key=lambda d: -(d.savings_absolute or 0.0))
    result = [
        d.model_copy(update={
            "applicable_days": duration,
            "total_days": duration,
            "is_best_deal": i == 0,
        })
        for i, d in enumerate(ordered)
    ]
    return AnalysisResult(
        best_deal=result[0] if result else None,
        all_deals=result,
        summary=summarize_deals(result),
    )


def analyze_car_rental_deals(deals: Sequence[CarRentalDeal]) -> AnalysisResult:
    ranked = rank_deals(deals)
    return AnalysisResult(
        best_deal=ranked[0] if ranked else None,
        all_deals=ranked,
        summary=summarize_deals(ranked),
    )


def group_by_company(deals: Sequence[D]) -> dict[str, list[D]]:
    grouped: dict[str, list[D]] = {}
    for deal in deals:
        grouped.setdefault(deal.identity or "Other", []).append(deal)
    return grouped


def top_companies(
    deals: Sequence[DealCandidate], limit: int = 5, exclude: str = UNKNOWN_COMPANY
) -> list[str]:
    """Distinct named vendors in deal order."""
    names: list[str] = []
    for deal in deals:
        if deal.identity != exclude and deal.identity not in names:
            names.append(deal.identity)
    return names[:limit]
