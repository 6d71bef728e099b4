from pydantic import BaseModel

from savings_engine.schemas.deals import AnalysisResult, CarRentalDeal
from savings_engine.schemas.requests import CarRentalSearchParams, HotelSearchParams


class HotelDealResponse(BaseModel):
    search_parameters: HotelSearchParams
    analysis: AnalysisResult


class CarRentalSearchResponse(BaseModel):
    search_parameters: CarRentalSearchParams
    count: int
    analysis: AnalysisResult


class CompanyDealsResponse(BaseModel):
    company: str
    count: int
    analysis: AnalysisResult


class AllCompanyDealsResponse(BaseModel):
    count: int
    companies: list[str]
    by_company: dict[str, list[CarRentalDeal]]
    analysis: AnalysisResult


class HealthResponse(BaseModel):
    status: str
    services: dict[str, bool]


class OrlandoDealsSummary(BaseModel):
    total_deals: int
    deals_with_promo_codes: int
    average_discount_percent: float
    top_companies: list[str]


class OrlandoDealsResponse(BaseModel):
    search_parameters: CarRentalSearchParams
    summary: OrlandoDealsSummary
    analysis: AnalysisResult
