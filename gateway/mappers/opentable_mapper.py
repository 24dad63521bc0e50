from gateway.mappers.normalize import (
    DEFAULT_COUNTRY,
    cap_features,
    coerce_float,
    coordinates,
    display_city,
    ensure_images,
    scale_rating,
    text_or,
)
from gateway.schemas.inventory import Money, Restaurant
from gateway.schemas.opentable import OpenTableRestaurant

# OpenTable does not publish ratings.
DEFAULT_RESTAURANT_RATING = 4.5
PLACEHOLDER_PRICE_LEVEL = 2
# Average spend per person, USD.
PRICE_LEVEL_AVERAGES = {1: 15.0, 2: 30.0, 3: 50.0, 4: 80.0}


def _level(value) -> int | None:
    if isinstance(value, str) and value.strip() and set(value.strip()) == {"$"}:
        return min(len(value.strip()), 4)
    number = coerce_float(value)
    if number is None or not 1 <= number <= 4:
        return None
    return int(number)


def price_level(raw: OpenTableRestaurant) -> int:
    return _level(raw.price) or _level(raw.price_range) or PLACEHOLDER_PRICE_LEVEL


def _cuisines(raw: OpenTableRestaurant) -> list[str]:
    if isinstance(raw.cuisine, str):
        values = raw.cuisine.split(",")
    else:
        values = raw.cuisine or []
    return cap_features(values, limit=4) or ["International"]


def _address(raw: OpenTableRestaurant, city: str) -> str:
    parts = [p for p in (raw.address, raw.area, raw.postal_code) if p]
    return ", ".join(parts) if parts else f"{city}, {DEFAULT_COUNTRY}"


def map_opentable_restaurant(
    raw: OpenTableRestaurant, city: str | None = None, index: int = 0
) -> Restaurant:
    resolved_city = display_city(raw.city or city)
    level = price_level(raw)
    name = text_or(raw.name, f"Restaurant {index + 1}")

    return Restaurant(
        id=text_or(raw.id, f"otb-{index + 1}"),
        name=name,
        description=f"{name} in {raw.area + ', ' if raw.area else ''}{resolved_city}",
        address=_address(raw, resolved_city),
        city=resolved_city,
        country=DEFAULT_COUNTRY,
        coordinates=coordinates(raw.lat, raw.lng, resolved_city),
        rating=scale_rating(raw.rating, scale=5, default=DEFAULT_RESTAURANT_RATING),
        review_count=0,
        price=Money(amount=PRICE_LEVEL_AVERAGES[level]),
        price_level=level,
        images=ensure_images([raw.image_url]),
        cuisine=_cuisines(raw),
        phone=raw.phone,
        accepts_reservations=bool(raw.reserve_url or raw.mobile_reserve_url),
        reservation_url=raw.mobile_reserve_url or raw.reserve_url,
        source="opentable",
    )
