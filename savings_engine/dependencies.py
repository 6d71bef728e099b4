from typing import Annotated

from fastapi import Depends, Request

from savings_engine.services.amadeus import AmadeusService
from savings_engine.services.car_rental import CarRentalService
from savings_engine.services.hotel_deals import HotelDealAnalyzer


def get_hotel_deal_analyzer(request: Request) -> HotelDealAnalyzer:
    return request.app.state.hotel_deal_analyzer


def get_car_rental_service(request: Request) -> CarRentalService:
    return request.app.state.car_rental_service


def get_amadeus_service(request: Request) -> AmadeusService | None:
    return getattr(request.app.state, "amadeus_service", None)


HotelDealAnalyzerDep = Annotated[HotelDealAnalyzer, Depends(get_hotel_deal_analyzer)]
CarRentalDep = Annotated[CarRentalService, Depends(get_car_rental_service)]
AmadeusDep = Annotated[AmadeusService | None, Depends(get_amadeus_service)]
