"""Total helpers shared by the provider mappers.

Nothing in here raises: unparsable or missing values resolve to the
documented defaults below.
"""

import math
from collections.abc import Iterable

from gateway.schemas.criteria import GeoPoint, Location, SearchCriteria
from gateway.schemas.inventory import Hotel, Rental, Restaurant

PLACEHOLDER_PRICE = 100.0
DEFAULT_CURRENCY = "USD"
DEFAULT_RATING = 4.0
DEFAULT_CITY = "Casablanca"
DEFAULT_COUNTRY = "Morocco"
MAX_FEATURES = 8
MAX_FEATURE_LENGTH = 40

PLACEHOLDER_IMAGES = (
    "https://images.unsplash.com/photo-1566073771259-6a8506099945?w=800",
    "https://images.unsplash.com/photo-1582719478250-c89cae4dc85b?w=800",
    "https://images.unsplash.com/photo-1571003123894-1f0594d2b5d9?w=800",
)

HOST_CITIES: dict[str, GeoPoint] = {
    "casablanca": GeoPoint(latitude=33.5731, longitude=-7.5898),
    "rabat": GeoPoint(latitude=34.0209, longitude=-6.8416),
    "marrakech": GeoPoint(latitude=31.6295, longitude=-7.9811),
    "tangier": GeoPoint(latitude=35.7595, longitude=-5.8340),
    "agadir": GeoPoint(latitude=30.4278, longitude=-9.5981),
    "fez": GeoPoint(latitude=34.0181, longitude=-5.0078),
}


def coerce_float(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = value.strip().replace(",", ".")
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def coerce_int(value, default: int = 0) -> int:
    number = coerce_float(value)
    if number is None or number < 0:
        return default
    return int(number)


def scale_rating(value, scale: float = 5.0, default: float = DEFAULT_RATING) -> float:
    """Convert a provider rating on a 0-`scale` range to the 0-5 range.

    0-10 scores are halved, 0-100 scores are divided by 20.
    """
    number = coerce_float(value)
    if number is None or scale <= 0:
        return default
    rating = number * 5.0 / scale
    return round(min(max(rating, 0.0), 5.0), 1)


def pick_price(*candidates, default: float = PLACEHOLDER_PRICE) -> float:
    """First positive number among the candidates, else the placeholder price."""
    for candidate in candidates:
        number = coerce_float(candidate)
        if number is not None and number > 0:
            return round(number, 2)
    return default


def ensure_images(urls: Iterable[str | None] | None) -> list[str]:
    seen: list[str] = []
    for url in urls or ():
        if isinstance(url, str) and url.strip() and url.strip() not in seen:
            seen.append(url.strip())
    return seen or list(PLACEHOLDER_IMAGES)


def cap_features(values: Iterable[str | None] | None, limit: int = MAX_FEATURES) -> list[str]:
    """Deduplicate free-text features case-insensitively and cap the display set."""
    result: list[str] = []
    seen: set[str] = set()
    for value in values or ():
        if not isinstance(value, str):
            continue
        text = " ".join(value.split())[:MAX_FEATURE_LENGTH].strip()
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        result.append(text)
        if len(result) >= limit:
            break
    return result


def city_key(city: str | None) -> str:
    return (city or "").strip().lower()


def display_city(city: str | None) -> str:
    return city.strip().title() if city and city.strip() else DEFAULT_CITY


def city_center(city: str | None) -> GeoPoint:
    return HOST_CITIES.get(city_key(city), HOST_CITIES[city_key(DEFAULT_CITY)])


def nearest_city(point: GeoPoint) -> str:
    """Host city closest to a point, by great-circle distance."""

    def distance(center: GeoPoint) -> float:
        lat1, lat2 = math.radians(point.latitude), math.radians(center.latitude)
        dlat = lat2 - lat1
        dlng = math.radians(center.longitude - point.longitude)
        h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
        return math.asin(min(1.0, math.sqrt(h)))

    key = min(HOST_CITIES, key=lambda name: distance(HOST_CITIES[name]))
    return display_city(key)


def search_city(location: Location) -> str:
    """City to search in: the named city, else the host city nearest the coordinates."""
    if location.city and location.city.strip():
        return display_city(location.city)
    if location.coordinates is not None:
        return nearest_city(location.coordinates)
    return DEFAULT_CITY


def coordinates(lat, lng, city: str | None) -> GeoPoint:
    latitude = coerce_float(lat)
    longitude = coerce_float(lng)
    if (
        latitude is None
        or longitude is None
        or not -90 <= latitude <= 90
        or not -180 <= longitude <= 180
    ):
        return city_center(city)
    return GeoPoint(latitude=latitude, longitude=longitude)


def text_or(value, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def matches_criteria(item: Hotel | Rental | Restaurant, criteria: SearchCriteria) -> bool:
    """Whether a canonical item passes the search filters and party size."""
    filters = criteria.filters
    if filters.price_range is not None and not filters.price_range.contains(item.price.amount):
        return False
    if filters.min_rating is not None and item.rating < filters.min_rating:
        return False
    wanted = {a.lower() for a in filters.amenities}
    if not wanted <= {a.lower() for a in item.amenities}:
        return False
    if isinstance(item, Rental):
        if filters.property_type and item.property_type.lower() != filters.property_type.lower():
            return False
        return item.capacity.guests >= criteria.guests
    if isinstance(item, Restaurant):
        return not filters.cuisine or filters.cuisine.lower() in {c.lower() for c in item.cuisine}
    return True


def filter_items(items: Iterable, criteria: SearchCriteria) -> list:
    return [item for item in items if matches_criteria(item, criteria)][: criteria.limit]
