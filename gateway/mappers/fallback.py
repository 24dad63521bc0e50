"""Deterministic synthetic inventory used when no provider can answer.

Every function here is a pure function of its arguments and a seed: the same
criteria and seed always produce the same items, and a fallback search result
can be looked up again by id through the matching ``generate_*`` function.
"""

import logging
import random
from collections.abc import Callable, Sequence

from gateway.mappers.normalize import (
    DEFAULT_COUNTRY,
    PLACEHOLDER_IMAGES,
    city_center,
    city_key,
    display_city,
    matches_criteria,
    search_city,
)
from gateway.mappers.opentable_mapper import PRICE_LEVEL_AVERAGES
from gateway.mappers.pricing import quote_rental_stay
from gateway.schemas.criteria import DateRange, GeoPoint, ReservationSlot, SearchCriteria
from gateway.schemas.inventory import (
    AvailabilityInfo,
    AvailabilityOption,
    Capacity,
    Host,
    Hotel,
    Money,
    ReferenceEntry,
    Rental,
    Restaurant,
    RoomType,
)

logger = logging.getLogger(__name__)

DEFAULT_SEED = 2030
POOL_SIZE = 12

HOTEL_AMENITIES = [
    "WiFi", "Pool", "Spa", "Gym", "Restaurant", "Bar", "Parking", "Air Conditioning",
    "Room Service", "Concierge", "Business Center", "Pet Friendly",
    "Wheelchair Accessible", "Airport Shuttle",
]
RENTAL_AMENITIES = [
    "WiFi", "Kitchen", "Air Conditioning", "Washer", "Free Parking", "Terrace",
    "Pool", "Workspace", "TV", "Rooftop", "Heating", "Self Check-in",
]
RESTAURANT_FEATURES = [
    "Outdoor Seating", "WiFi", "Parking", "Live Music", "Bar", "Match Screens",
    "Group Bookings", "Terrace", "Valet Parking", "Family Friendly",
]
PROPERTY_TYPES = ["Apartment", "House", "Villa", "Studio", "Riad", "Penthouse"]
HOST_NAMES = ["Ahmed", "Fatima", "Youssef", "Aicha", "Omar", "Khadija", "Hassan", "Laila"]
CUISINES = [
    "Moroccan", "Mediterranean", "French", "Italian", "Seafood",
    "Middle Eastern", "International", "Vegetarian",
]
TIME_SLOTS = ["18:00", "18:30", "19:00", "19:30", "20:00", "20:30", "21:00", "21:30", "22:00", "22:30"]
WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_HOTEL_NAMES = [
    "Riad {adjective}", "Hotel {adjective} {city}", "{city} {noun} Suites",
    "Palais {adjective}", "Kasbah {noun}", "{adjective} Atlas Hotel",
]
_RENTAL_NAMES = [
    "{type} near the Medina", "Sunny {type} in {city}", "{adjective} {type} with Terrace",
    "Family {type} close to the Stadium", "{adjective} {type} by the Sea",
]
_RESTAURANT_NAMES = [
    "La Sqala", "Dar {adjective}", "Atlas Traditional Kitchen", "Le {adjective} Bistro",
    "{city} Fish Market", "Café {noun}", "Rick's Café", "Terrasse {noun}",
]
_ADJECTIVES = ["Royal", "Golden", "Blue", "Andalus", "Saffron", "Cedar", "Oasis", "Majestic"]
_NOUNS = ["Jardin", "Medina", "Marina", "Corniche", "Atlas", "Palmeraie", "Stadium", "Kasbah"]

REFERENCE_LISTS: dict[tuple[str, str], list[ReferenceEntry]] = {
    ("hotels", "amenities"): [ReferenceEntry(id=a.lower().replace(" ", "_"), name=a) for a in HOTEL_AMENITIES],
    ("rentals", "amenities"): [ReferenceEntry(id=a.lower().replace(" ", "_"), name=a) for a in RENTAL_AMENITIES],
    ("rentals", "categories"): [
        ReferenceEntry(id="apartment", name="Apartment", description="Self-contained flat in the city"),
        ReferenceEntry(id="house", name="House", description="Entire house for families and groups"),
        ReferenceEntry(id="villa", name="Villa", description="Private villa, often with a pool"),
        ReferenceEntry(id="studio", name="Studio", description="Compact space for one or two guests"),
        ReferenceEntry(id="riad", name="Riad", description="Traditional house around a courtyard"),
        ReferenceEntry(id="penthouse", name="Penthouse", description="Top-floor apartment with a view"),
    ],
    ("rentals", "fuel-types"): [
        ReferenceEntry(id="petrol", name="Petrol"),
        ReferenceEntry(id="diesel", name="Diesel"),
        ReferenceEntry(id="hybrid", name="Hybrid"),
        ReferenceEntry(id="electric", name="Electric"),
    ],
    ("restaurants", "cuisines"): [ReferenceEntry(id=c.lower().replace(" ", "_"), name=c) for c in CUISINES],
    ("restaurants", "categories"): [
        ReferenceEntry(id="moroccan", name="Moroccan", description="Traditional Moroccan cuisine"),
        ReferenceEntry(id="fine_dining", name="Fine Dining", description="Upscale dining experience"),
        ReferenceEntry(id="casual", name="Casual Dining", description="Relaxed atmosphere"),
        ReferenceEntry(id="street_food", name="Street Food", description="Local street food vendors"),
        ReferenceEntry(id="international", name="International", description="Global cuisines"),
        ReferenceEntry(id="halal", name="Halal", description="Halal certified restaurants"),
        ReferenceEntry(id="vegetarian", name="Vegetarian", description="Vegetarian-friendly options"),
        ReferenceEntry(id="seafood", name="Seafood", description="Fresh seafood specialties"),
    ],
}


def _rng(seed: int, *parts) -> random.Random:
    return random.Random(":".join(str(p) for p in (seed, *parts)))


def _slug(city: str) -> str:
    return "-".join(city_key(city).split()) or "casablanca"


def _item_id(prefix: str, city: str, number: int) -> str:
    return f"fb-{prefix}-{_slug(city)}-{number:02d}"


def _city_from_id(item_id: str, prefix: str, city: str | None) -> str:
    """Recover the city a fallback id was minted for."""
    head = f"fb-{prefix}-"
    if city is None and item_id.startswith(head):
        slug = item_id[len(head):].rsplit("-", 1)[0]
        if slug:
            return display_city(slug.replace("-", " "))
    return display_city(city)


def _near(rng: random.Random, center: GeoPoint) -> GeoPoint:
    return GeoPoint(
        latitude=round(center.latitude + rng.uniform(-0.02, 0.02), 6),
        longitude=round(center.longitude + rng.uniform(-0.02, 0.02), 6),
    )


def _images(rng: random.Random) -> list[str]:
    start = rng.randrange(len(PLACEHOLDER_IMAGES))
    rotated = PLACEHOLDER_IMAGES[start:] + PLACEHOLDER_IMAGES[:start]
    return list(rotated[: rng.randint(2, len(PLACEHOLDER_IMAGES))])


def _pick_features(rng: random.Random, pool: Sequence[str], low: int, high: int) -> list[str]:
    chosen = set(rng.sample(list(pool), rng.randint(low, high)))
    return [f for f in pool if f in chosen]


def _name(rng: random.Random, templates: Sequence[str], city: str, **extra) -> str:
    return rng.choice(templates).format(
        adjective=rng.choice(_ADJECTIVES), noun=rng.choice(_NOUNS), city=city, **extra
    )


def generate_hotel(item_id: str, seed: int = DEFAULT_SEED, city: str | None = None) -> Hotel:
    resolved_city = _city_from_id(item_id, "hotel", city)
    rng = _rng(seed, "hotels", item_id)
    nightly = float(rng.randrange(60, 320, 5))
    stars = rng.randint(3, 5)
    room_types = [
        RoomType(id="std", name="Standard Room", max_occupancy=2, price_per_night=Money(amount=nightly)),
        RoomType(id="dlx", name="Deluxe Room", max_occupancy=3, price_per_night=Money(amount=nightly + 40)),
        RoomType(id="fam", name="Family Suite", max_occupancy=5, price_per_night=Money(amount=nightly + 90)),
    ]
    return Hotel(
        id=item_id,
        name=_name(rng, _HOTEL_NAMES, resolved_city),
        description=f"{stars}-star hotel in {resolved_city}",
        address=f"{rng.randint(1, 250)} Boulevard {rng.choice(_NOUNS)}, {resolved_city}",
        city=resolved_city,
        country=DEFAULT_COUNTRY,
        coordinates=_near(rng, city_center(resolved_city)),
        rating=round(rng.uniform(3.6, 4.9), 1),
        review_count=rng.randint(80, 1500),
        price=Money(amount=nightly),
        images=_images(rng),
        amenities=_pick_features(rng, HOTEL_AMENITIES, 4, 8),
        star_rating=stars,
        room_types=room_types,
        source="fallback",
    )


def generate_rental(item_id: str, seed: int = DEFAULT_SEED, city: str | None = None) -> Rental:
    resolved_city = _city_from_id(item_id, "rental", city)
    rng = _rng(seed, "rentals", item_id)
    property_type = rng.choice(PROPERTY_TYPES)
    guests = rng.randint(2, 8)
    bedrooms = max(1, guests // 2)
    return Rental(
        id=item_id,
        name=_name(rng, _RENTAL_NAMES, resolved_city, type=property_type),
        description=f"{property_type} for up to {guests} guests in {resolved_city}",
        property_type=property_type,
        address=f"{rng.randint(1, 120)} Rue {rng.choice(_NOUNS)}, {resolved_city}",
        city=resolved_city,
        country=DEFAULT_COUNTRY,
        coordinates=_near(rng, city_center(resolved_city)),
        rating=round(rng.uniform(3.8, 5.0), 1),
        review_count=rng.randint(10, 400),
        price=Money(amount=float(rng.randrange(45, 260, 5))),
        images=_images(rng),
        amenities=_pick_features(rng, RENTAL_AMENITIES, 3, 8),
        host=Host(
            name=rng.choice(HOST_NAMES),
            is_superhost=rng.random() > 0.7,
            response_rate=rng.randint(80, 100),
        ),
        capacity=Capacity(guests=guests, bedrooms=bedrooms, bathrooms=max(1, bedrooms - 1), beds=bedrooms + 1),
        instant_book=rng.random() > 0.5,
        source="fallback",
    )


def generate_restaurant(item_id: str, seed: int = DEFAULT_SEED, city: str | None = None) -> Restaurant:
    resolved_city = _city_from_id(item_id, "restaurant", city)
    rng = _rng(seed, "restaurants", item_id)
    level = rng.randint(1, 4)
    picked = set(rng.sample(CUISINES, rng.randint(1, 3)))
    cuisine = [c for c in CUISINES if c in picked]
    closing = rng.choice(["22:30", "23:00", "23:30"])
    return Restaurant(
        id=item_id,
        name=_name(rng, _RESTAURANT_NAMES, resolved_city),
        description=f"{' & '.join(cuisine)} cuisine in {resolved_city}",
        address=f"{rng.randint(1, 300)} Avenue {rng.choice(_NOUNS)}, {resolved_city}",
        city=resolved_city,
        country=DEFAULT_COUNTRY,
        coordinates=_near(rng, city_center(resolved_city)),
        rating=round(rng.uniform(3.7, 4.9), 1),
        review_count=rng.randint(40, 900),
        price=Money(amount=PRICE_LEVEL_AVERAGES[level]),
        price_level=level,
        images=_images(rng),
        amenities=_pick_features(rng, RESTAURANT_FEATURES, 2, 5),
        cuisine=cuisine,
        opening_hours={day: f"12:00 - {closing}" for day in WEEKDAYS},
        accepts_reservations=True,
        source="fallback",
    )


def _search(
    prefix: str,
    criteria: SearchCriteria,
    seed: int,
    build: Callable[[str, int, str], object],
) -> list:
    try:
        city = search_city(criteria.location)
        results = []
        for number in range(1, POOL_SIZE + 1):
            item = build(_item_id(prefix, city, number), seed, city)
            if not matches_criteria(item, criteria):
                continue
            results.append(item)
            if len(results) >= criteria.limit:
                break
        return results
    except Exception:
        logger.exception("Fallback generation failed for %s", prefix)
        return []


def generate_hotels(criteria: SearchCriteria, seed: int = DEFAULT_SEED) -> list[Hotel]:
    return _search("hotel", criteria, seed, generate_hotel)


def generate_rentals(criteria: SearchCriteria, seed: int = DEFAULT_SEED) -> list[Rental]:
    return _search("rental", criteria, seed, generate_rental)


def generate_restaurants(criteria: SearchCriteria, seed: int = DEFAULT_SEED) -> list[Restaurant]:
    return _search("restaurant", criteria, seed, generate_restaurant)


def _hotel_availability(
    item_id: str, date_range: DateRange | None, guests: int, seed: int
) -> AvailabilityInfo:
    hotel = generate_hotel(item_id, seed)
    rng = _rng(seed, "hotels", item_id, "availability", date_range.model_dump_json() if date_range else "")
    options = [
        AvailabilityOption(
            id=room.id,
            label=room.name,
            available=room.max_occupancy >= guests and rng.random() < 0.85,
            price=room.price_per_night,
            capacity=room.max_occupancy,
        )
        for room in hotel.room_types
    ]
    bookable = [o for o in options if o.available]
    return AvailabilityInfo(
        item_id=item_id,
        available=bool(bookable),
        date_range=date_range,
        options=options,
        quote=min((o.price for o in bookable), key=lambda m: m.amount, default=None),
    )


def _rental_availability(
    item_id: str, date_range: DateRange | None, guests: int, seed: int
) -> AvailabilityInfo:
    rental = generate_rental(item_id, seed)
    rng = _rng(seed, "rentals", item_id, "availability", date_range.model_dump_json() if date_range else "")
    available = rental.capacity.guests >= guests and rng.random() < 0.8
    nights = date_range.nights if date_range else 1
    breakdown = quote_rental_stay(rental.price, nights)
    return AvailabilityInfo(
        item_id=item_id,
        available=available,
        date_range=date_range,
        quote=Money(amount=breakdown.total, currency=breakdown.currency),
    )


def _restaurant_availability(
    item_id: str, slot: ReservationSlot | None, guests: int, seed: int
) -> AvailabilityInfo:
    day = slot.date.isoformat() if slot else ""
    rng = _rng(seed, "restaurants", item_id, "availability", day, guests)
    options = [
        AvailabilityOption(id=time, label=time, available=rng.random() < 0.7, capacity=guests)
        for time in TIME_SLOTS
    ]
    if slot is not None:
        available = any(o.id == slot.time and o.available for o in options)
    else:
        available = any(o.available for o in options)
    return AvailabilityInfo(item_id=item_id, available=available, slot=slot, options=options)


def generate_availability(
    domain: str,
    item_id: str,
    date_range: DateRange | None = None,
    slot: ReservationSlot | None = None,
    guests: int = 2,
    seed: int = DEFAULT_SEED,
) -> AvailabilityInfo:
    if domain == "hotels":
        return _hotel_availability(item_id, date_range, guests, seed)
    if domain == "rentals":
        return _rental_availability(item_id, date_range, guests, seed)
    return _restaurant_availability(item_id, slot, guests, seed)


def reference_list(domain: str, kind: str) -> list[ReferenceEntry] | None:
    return REFERENCE_LISTS.get((domain, kind))
