from gateway.mappers.normalize import (
    DEFAULT_COUNTRY,
    DEFAULT_CURRENCY,
    cap_features,
    coerce_float,
    coerce_int,
    coordinates,
    display_city,
    ensure_images,
    pick_price,
    scale_rating,
    text_or,
)
from gateway.schemas.airbnb import AirbnbAvailability, AirbnbListing
from gateway.schemas.criteria import DateRange
from gateway.schemas.inventory import AvailabilityInfo, Capacity, Host, Money, Rental

DEFAULT_HOST_NAME = "Local host"


def _rating(raw: AirbnbListing) -> float:
    if coerce_float(raw.rating) is not None:
        return scale_rating(raw.rating, scale=5)
    return scale_rating(raw.guestSatisfactionOverall, scale=100)


def _nightly_price(raw: AirbnbListing, nights: int | None) -> float:
    if raw.price is None:
        return pick_price(None)
    total = coerce_float(raw.price.total)
    per_night_from_total = total / nights if total and nights else None
    return pick_price(raw.price.rate, per_night_from_total)


def _response_rate(value) -> int | None:
    rate = coerce_float(value)
    if rate is None:
        return None
    if rate <= 1:
        rate *= 100
    return int(min(max(rate, 0), 100))


def map_airbnb_listing(
    raw: AirbnbListing,
    city: str | None = None,
    nights: int | None = None,
    index: int = 0,
) -> Rental:
    resolved_city = display_city(raw.city or city)
    guests = coerce_int(raw.persons, default=2) or 2

    return Rental(
        id=text_or(raw.id, f"abnb-{index + 1}"),
        name=text_or(raw.name, f"Rental {index + 1}"),
        description=raw.description or f"Rental in {resolved_city}",
        property_type=text_or(raw.type, "Apartment"),
        address=text_or(raw.address, f"{resolved_city}, {DEFAULT_COUNTRY}"),
        city=resolved_city,
        country=DEFAULT_COUNTRY,
        coordinates=coordinates(raw.lat, raw.lng, resolved_city),
        rating=_rating(raw),
        review_count=coerce_int(raw.reviewsCount),
        price=Money(
            amount=_nightly_price(raw, nights),
            currency=(raw.price.currency if raw.price else None) or DEFAULT_CURRENCY,
        ),
        images=ensure_images(raw.images),
        amenities=cap_features(raw.previewAmenities or raw.amenityNames),
        host=Host(
            name=text_or(raw.hostName, DEFAULT_HOST_NAME),
            is_superhost=bool(raw.isSuperhost),
            response_rate=_response_rate(raw.hostResponseRate),
            avatar=raw.hostThumbnail,
        ),
        capacity=Capacity(
            guests=guests,
            bedrooms=coerce_int(raw.bedrooms, default=1),
            bathrooms=coerce_int(raw.bathrooms, default=1),
            beds=coerce_int(raw.beds, default=1),
        ),
        instant_book=bool(raw.instantBook),
        source="airbnb",
    )


def map_airbnb_availability(
    rental_id: str, raw: AirbnbAvailability, date_range: DateRange | None
) -> AvailabilityInfo:
    quote = None
    if raw.price is not None:
        amount = pick_price(raw.price.total, raw.price.rate)
        quote = Money(amount=amount, currency=raw.price.currency or DEFAULT_CURRENCY)
    return AvailabilityInfo(
        item_id=rental_id,
        available=raw.available,
        date_range=date_range,
        quote=quote,
    )
