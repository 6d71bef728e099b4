import logging

from savings_engine.mappers.confidence import calculate_flight_confidence
from savings_engine.schemas.flights import (
    FlightDictionaries,
    FlightOffer,
    Itinerary,
    ItinerarySummary,
    ScoredOffer,
    SegmentSummary,
)

logger = logging.getLogger(__name__)


def summarize_itinerary(
    itinerary: Itinerary, dictionaries: FlightDictionaries
) -> ItinerarySummary | None:
    """Display view of an itinerary with carrier/aircraft codes resolved."""
    if not itinerary.segments:
        return None

    segments = []
    for seg in itinerary.segments:
        aircraft_code = seg.aircraft.code if seg.aircraft else None
        operating_code = seg.operating.carrierCode if seg.operating else None
        segments.append(SegmentSummary(
            departure_airport=seg.departure.iataCode,
            arrival_airport=seg.arrival.iataCode,
            departure_at=seg.departure.at,
            arrival_at=seg.arrival.at,
            carrier_code=seg.carrierCode,
            carrier_name=dictionaries.carriers.get(seg.carrierCode, seg.carrierCode),
            flight_number=f"{seg.carrierCode}{seg.number}",
            aircraft_code=aircraft_code,
            aircraft_name=dictionaries.aircraft.get(aircraft_code, aircraft_code)
            if aircraft_code else None,
            operating_carrier_name=dictionaries.carriers.get(operating_code, operating_code)
            if operating_code else None,
            duration=seg.duration,
        ))

    return ItinerarySummary(
        duration=itinerary.duration,
        number_of_stops=len(segments) - 1,
        departure_time=segments[0].departure_at,
        arrival_time=segments[-1].arrival_at,
        origin_airport=segments[0].departure_airport,
        destination_airport=segments[-1].arrival_airport,
        segments=segments,
    )


def _price_per_traveler(offer: FlightOffer, travelers: int) -> float:
    if offer.travelerPricings:
        total = (offer.travelerPricings[0].get("price") or {}).get("total")
        try:
            return float(total)
        except (TypeError, ValueError):
            logger.debug("Unusable traveler price %r on offer %s, splitting total", total, offer.id)
    return round(offer.price.total / max(travelers, 1), 2)


def score_offers(
    offers: list[FlightOffer],
    dictionaries: FlightDictionaries | None = None,
    travelers: int = 1,
) -> list[ScoredOffer]:
    """Attach a confidence score to each offer, keeping input order.

    The offers themselves are not modified.
    """
    dictionaries = dictionaries or FlightDictionaries()
    scored = []
    for offer in offers:
        outbound = summarize_itinerary(offer.itineraries[0], dictionaries) if offer.itineraries else None
        inbound = (
            summarize_itinerary(offer.itineraries[1], dictionaries)
            if len(offer.itineraries) > 1 else None
        )
        scored.append(ScoredOffer(
            offer=offer,
            confidence=calculate_flight_confidence(offer),
            price_per_traveler=_price_per_traveler(offer, travelers),
            outbound=outbound,
            inbound=inbound,
        ))
    return scored
