from pydantic import BaseModel, Field


class FlightEndpoint(BaseModel):
    iataCode: str
    terminal: str | None = None
    at: str | None = None


class Aircraft(BaseModel):
    code: str | None = None


class OperatingCarrier(BaseModel):
    carrierCode: str | None = None


class Segment(BaseModel):
    departure: FlightEndpoint
    arrival: FlightEndpoint
    carrierCode: str
    number: str = ""
    aircraft: Aircraft | None = None
    operating: OperatingCarrier | None = None
    duration: str | None = None
    numberOfStops: int = 0


class Itinerary(BaseModel):
    duration: str | None = None
    segments: list[Segment] = []


class Fee(BaseModel):
    amount: str | None = None
    type: str | None = None


class OfferPrice(BaseModel):
    currency: str = "USD"
    total: float
    base: float | None = None
    grandTotal: float | None = None
    fees: list[Fee] = []


class FlightOffer(BaseModel):
    id: str
    source: str | None = None
    instantTicketingRequired: bool = False
    nonHomogeneous: bool = False
    lastTicketingDate: str | None = None
    numberOfBookableSeats: int = 0
    itineraries: list[Itinerary] = []
    price: OfferPrice
    validatingAirlineCodes: list[str] = []
    travelerPricings: list[dict] = []


class FlightDictionaries(BaseModel):
    carriers: dict[str, str] = {}
    aircraft: dict[str, str] = {}


class SegmentSummary(BaseModel):
    departure_airport: str
    arrival_airport: str
    departure_at: str | None = None
    arrival_at: str | None = None
    carrier_code: str
    carrier_name: str
    flight_number: str
    aircraft_code: str | None = None
    aircraft_name: str | None = None
    operating_carrier_name: str | None = None
    duration: str | None = None


class ItinerarySummary(BaseModel):
    duration: str | None = None
    number_of_stops: int
    departure_time: str | None = None
    arrival_time: str | None = None
    origin_airport: str
    destination_airport: str
    segments: list[SegmentSummary]


class ScoredOffer(BaseModel):
    offer: FlightOffer
    confidence: float
    price_per_traveler: float
    outbound: ItinerarySummary | None = None
    inbound: ItinerarySummary | None = None


class FlightSearchParams(BaseModel):
    origin: str
    destination: str = "MCO"
    departure_date: str
    return_date: str | None = None
    adults: int = 1
    children: int = 0
    travel_class: str = "ECONOMY"
    non_stop: bool = False
    currency_code: str = "USD"
    max_price: int | None = None
    max_results: int = 50


class FlightSearchResult(BaseModel):
    offers: list[ScoredOffer] = []
    meta: dict = {}
    dictionaries: FlightDictionaries = FlightDictionaries()


class MultiOriginSearchParams(FlightSearchParams):
    origin: str = ""
    origins: list[str] = Field(min_length=1)


class OriginFlightResult(BaseModel):
    origin: str
    offers: list[ScoredOffer] = []
    meta: dict = {}
    error: str | None = None  # set when the search for this origin failed


class MultiOriginSearchResult(BaseModel):
    results: list[OriginFlightResult] = []
    total_results: int = 0
