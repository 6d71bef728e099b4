from datetime import date

from pydantic import BaseModel, model_validator


class HotelSearchParams(BaseModel):
    hotel_name: str
    check_in_date: date
    check_out_date: date
    duration: int | None = None  # nights; defaults to the date span

    @model_validator(mode="after")
    def _check_dates(self) -> "HotelSearchParams":
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be after check_in_date")
        if self.duration is None:
            self.duration = (self.check_out_date - self.check_in_date).days
        return self


class CarRentalSearchParams(BaseModel):
    pickup_date: str
    return_date: str
    pickup_location: str = "MCO Airport"
    car_type: str = ""
