from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field


class DealType(StrEnum):
    corporate = "Corporate Discount"
    aaa = "AAA Member Discount"
    military = "Military Discount"
    promo_code = "Promo Code"
    coupon = "Coupon Discount"
    special_offer = "Special Offer"
    percentage_off = "Percentage Off"
    general = "General Discount"
    standard_rate = "Standard Rate"


class DealCandidate(BaseModel):
    identity: str  # vendor, company or hotel name; "Various" when unknown
    deal_type: DealType = DealType.general
    promo_code: str | None = None
    discount_percent: int | None = Field(default=None, ge=0, le=100)
    estimated_savings_absolute: float | None = Field(default=None, ge=0)
    base_price: float | None = None
    discounted_price: float | None = None
    savings_absolute: float | None = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    source_link: str | None = None
    source_query: str | None = None
    title: str = ""
    description: str = ""
    source: str = "serpapi_google_light"

    @property
    def potential_savings(self) -> float:
        if self.savings_absolute is not None:
            return self.savings_absolute
        return self.estimated_savings_absolute or 0.0


class HotelDeal(DealCandidate):
    kind: Literal["hotel"] = "hotel"
    currency: str = "USD"
    rating: float | None = None
    applicable_days: int = 0
    total_days: int = 0
    is_best_deal: bool = False


class CarRentalDeal(DealCandidate):
    kind: Literal["car_rental"] = "car_rental"
    pickup_location: str | None = None
    pickup_date: str | None = None
    return_date: str | None = None


Deal = Annotated[HotelDeal | CarRentalDeal, Field(discriminator="kind")]


class QueryError(BaseModel):
    query: str
    error: str


class AnalysisSummary(BaseModel):
    total_deals: int = 0
    average_discount_percent: float = 0.0
    total_potential_savings: float = 0.0


class AnalysisResult(BaseModel):
    best_deal: Deal | None = None
    all_deals: list[Deal] = []
    summary: AnalysisSummary = Field(default_factory=AnalysisSummary)
    query_errors: list[QueryError] = []
