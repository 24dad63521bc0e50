"""Query-string form of search and availability criteria.

Shared by the HTTP routers (parsing) and the backend proxy (building calls),
so both ends of the proxy agree on parameter names.
"""

from collections.abc import Mapping

from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria

DEFAULT_RESERVATION_TIME = "19:00"


def _date_params(date_range: DateRange | None, slot: ReservationSlot | None) -> dict[str, str]:
    params: dict[str, str] = {}
    if date_range is not None:
        params["checkIn"] = date_range.check_in.isoformat()
        params["checkOut"] = date_range.check_out.isoformat()
    if slot is not None:
        params["date"] = slot.date.isoformat()
        params["time"] = slot.time
    return params


def _dates_from(params: Mapping[str, str]) -> dict:
    values: dict = {}
    if params.get("checkIn") and params.get("checkOut"):
        values["date_range"] = {"check_in": params["checkIn"], "check_out": params["checkOut"]}
    if params.get("date"):
        values["slot"] = {"date": params["date"], "time": params.get("time") or DEFAULT_RESERVATION_TIME}
    return values


def criteria_to_query(criteria: SearchCriteria) -> dict[str, str]:
    params = {"guests": str(criteria.guests), "limit": str(criteria.limit)}
    location = criteria.location
    if location.city:
        params["city"] = location.city
    if location.coordinates is not None:
        params["lat"] = str(location.coordinates.latitude)
        params["lng"] = str(location.coordinates.longitude)
    params.update(_date_params(criteria.date_range, criteria.slot))

    filters = criteria.filters
    if filters.price_range is not None:
        if filters.price_range.min is not None:
            params["minPrice"] = str(filters.price_range.min)
        if filters.price_range.max is not None:
            params["maxPrice"] = str(filters.price_range.max)
    if filters.min_rating is not None:
        params["rating"] = str(filters.min_rating)
    if filters.amenities:
        params["amenities"] = ",".join(filters.amenities)
    if filters.property_type:
        params["propertyType"] = filters.property_type
    if filters.cuisine:
        params["cuisine"] = filters.cuisine
    return params


def criteria_from_query(params: Mapping[str, str]) -> SearchCriteria:
    """Build SearchCriteria from query parameters.

    Raises pydantic.ValidationError when a value is out of range.
    """
    location: dict = {"city": params.get("city") or None}
    if params.get("lat") and params.get("lng"):
        location["coordinates"] = {"latitude": params["lat"], "longitude": params["lng"]}

    filters: dict = {
        "min_rating": params.get("rating") or None,
        "amenities": tuple(a.strip() for a in params.get("amenities", "").split(",") if a.strip()),
        "property_type": params.get("propertyType") or None,
        "cuisine": params.get("cuisine") or None,
    }
    if params.get("minPrice") or params.get("maxPrice"):
        filters["price_range"] = {
            "min": params.get("minPrice") or None,
            "max": params.get("maxPrice") or None,
        }

    values: dict = {"location": location, "filters": filters, **_dates_from(params)}
    if params.get("guests"):
        values["guests"] = params["guests"]
    if params.get("limit"):
        values["limit"] = params["limit"]
    return SearchCriteria.model_validate(values)


def availability_to_query(
    date_range: DateRange | None, slot: ReservationSlot | None, guests: int
) -> dict[str, str]:
    return {"guests": str(guests), **_date_params(date_range, slot)}


def availability_from_query(
    params: Mapping[str, str],
) -> tuple[DateRange | None, ReservationSlot | None, int]:
    """Raises pydantic.ValidationError on malformed dates or times."""
    values = _dates_from(params)
    date_range = DateRange.model_validate(values["date_range"]) if "date_range" in values else None
    slot = ReservationSlot.model_validate(values["slot"]) if "slot" in values else None
    guests = int(params.get("guests") or 2)
    return date_range, slot, max(guests, 1)
