from fastapi import APIRouter

from savings_engine.dependencies import CarRentalDep
from savings_engine.mappers.ranking import group_by_company, top_companies
from savings_engine.schemas.requests import CarRentalSearchParams
from savings_engine.schemas.responses import (
    AllCompanyDealsResponse,
    CarRentalSearchResponse,
    CompanyDealsResponse,
    OrlandoDealsResponse,
    OrlandoDealsSummary,
)
from savings_engine.services.car_rental import (
    ORLANDO_LOCATIONS,
    default_pickup_date,
    default_return_date,
)

ORLANDO_PICKUP_LOCATION = "Orlando MCO Airport"

router = APIRouter(prefix="/carrental")


@router.get("/search", response_model=CarRentalSearchResponse)
async def search_car_rentals(
    service: CarRentalDep,
    pickup_date: str | None = None,
    return_date: str | None = None,
    pickup_location: str = "MCO Airport",
    car_type: str = "",
) -> CarRentalSearchResponse:
    params = CarRentalSearchParams(
        pickup_date=pickup_date or default_pickup_date(),
        return_date=return_date or default_return_date(),
        pickup_location=pickup_location,
        car_type=car_type,
    )
    analysis = await service.search_car_rentals(params)
    return CarRentalSearchResponse(
        search_parameters=params,
        count=len(analysis.all_deals),
        analysis=analysis,
    )


@router.get("/company/{company}", response_model=CompanyDealsResponse)
async def search_by_company(
    company: str,
    service: CarRentalDep,
    pickup_date: str | None = None,
    return_date: str | None = None,
) -> CompanyDealsResponse:
    analysis = await service.search_by_company(
        company,
        pickup_date or default_pickup_date(),
        return_date or default_return_date(),
    )
    return CompanyDealsResponse(company=company, count=len(analysis.all_deals), analysis=analysis)


@router.get("/all-companies", response_model=AllCompanyDealsResponse)
async def all_company_deals(
    service: CarRentalDep,
    pickup_date: str | None = None,
    return_date: str | None = None,
) -> AllCompanyDealsResponse:
    analysis = await service.get_all_company_deals(
        pickup_date or default_pickup_date(),
        return_date or default_return_date(),
    )
    grouped = group_by_company(analysis.all_deals)
    return AllCompanyDealsResponse(
        count=len(analysis.all_deals),
        companies=list(grouped),
        by_company=grouped,
        analysis=analysis,
    )


@router.get("/orlando-deals", response_model=OrlandoDealsResponse)
async def orlando_deals(
    service: CarRentalDep,
    pickup_date: str | None = None,
    return_date: str | None = None,
    car_type: str = "",
) -> OrlandoDealsResponse:
    params = CarRentalSearchParams(
        pickup_date=pickup_date or default_pickup_date(),
        return_date=return_date or default_return_date(),
        pickup_location=ORLANDO_PICKUP_LOCATION,
        car_type=car_type,
    )
    analysis = await service.search_car_rentals(params)
    deals = analysis.all_deals
    return OrlandoDealsResponse(
        search_parameters=params,
        summary=OrlandoDealsSummary(
            total_deals=len(deals),
            deals_with_promo_codes=sum(1 for d in deals if d.promo_code),
            average_discount_percent=analysis.summary.average_discount_percent,
            top_companies=top_companies(deals),
        ),
        analysis=analysis,
    )


@router.get("/companies")
async def list_companies(service: CarRentalDep) -> dict:
    return {"companies": service.companies}


@router.get("/locations")
async def list_locations() -> dict:
    return {"locations": ORLANDO_LOCATIONS}
