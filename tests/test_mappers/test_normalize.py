from gateway.mappers.normalize import (
    HOST_CITIES,
    PLACEHOLDER_IMAGES,
    PLACEHOLDER_PRICE,
    cap_features,
    coordinates,
    display_city,
    filter_items,
    matches_criteria,
    nearest_city,
    pick_price,
    scale_rating,
    search_city,
)
from gateway.schemas.criteria import GeoPoint, Location, PriceRange, SearchCriteria, SearchFilters
from gateway.schemas.inventory import Capacity, Host, Money, Rental


def _rental(price=80.0, rating=4.5, guests=4, property_type="Apartment", amenities=("WiFi", "Kitchen")):
    return Rental(
        id="r-1",
        name="Flat",
        address="Rue 1",
        city="Rabat",
        coordinates=HOST_CITIES["rabat"],
        rating=rating,
        price=Money(amount=price),
        images=["https://img/1.jpg"],
        amenities=list(amenities),
        property_type=property_type,
        host=Host(name="Omar"),
        capacity=Capacity(guests=guests),
    )


def test_scale_rating_ten_point_scale():
    assert scale_rating(8.6, scale=10) == 4.3


def test_scale_rating_percentage_scale():
    assert scale_rating(92, scale=100) == 4.6


def test_scale_rating_five_point_scale_unchanged():
    assert scale_rating("4.7") == 4.7


def test_scale_rating_clamps_and_defaults():
    assert scale_rating(12, scale=10) == 5.0
    assert scale_rating(-3) == 0.0
    assert scale_rating(None) == 4.0
    assert scale_rating("n/a") == 4.0


def test_pick_price_first_positive_candidate():
    assert pick_price(None, "0", "120.5", 90) == 120.5


def test_pick_price_placeholder():
    assert pick_price(None, None) == PLACEHOLDER_PRICE
    assert pick_price("-5", "free") == PLACEHOLDER_PRICE


def test_cap_features_dedupes_and_truncates():
    values = ["WiFi", "wifi", "  Pool  ", "x" * 60, None, ""] + [f"Feature {i}" for i in range(10)]

    result = cap_features(values)

    assert result[:2] == ["WiFi", "Pool"]
    assert len(result) == 8
    assert all(len(v) <= 40 for v in result)


def test_coordinates_fall_back_to_city_center():
    assert coordinates("abc", None, "Rabat") == HOST_CITIES["rabat"]
    assert coordinates(91, 0, None) == HOST_CITIES["casablanca"]
    assert coordinates("33.6", "-7.6", "Rabat").latitude == 33.6


def test_display_city():
    assert display_city("  marrakech ") == "Marrakech"
    assert display_city(None) == "Casablanca"
    assert display_city("   ") == "Casablanca"


def test_nearest_city():
    assert nearest_city(GeoPoint(latitude=31.63, longitude=-7.98)) == "Marrakech"
    assert nearest_city(GeoPoint(latitude=35.7, longitude=-5.9)) == "Tangier"
    assert nearest_city(GeoPoint(latitude=33.9, longitude=-6.9)) == "Rabat"


def test_search_city_prefers_name_then_coordinates():
    marrakech = GeoPoint(latitude=31.63, longitude=-7.98)

    assert search_city(Location(city="fez", coordinates=marrakech)) == "Fez"
    assert search_city(Location(coordinates=marrakech)) == "Marrakech"
    assert search_city(Location(city="  ", coordinates=marrakech)) == "Marrakech"
    assert search_city(Location()) == "Casablanca"


def test_placeholder_images_are_three_urls():
    assert len(PLACEHOLDER_IMAGES) == 3


def test_matches_criteria_price_rating_and_amenities():
    criteria = SearchCriteria(
        filters=SearchFilters(
            price_range=PriceRange(min=50, max=100),
            min_rating=4.0,
            amenities=("wifi",),
        )
    )

    assert matches_criteria(_rental(), criteria)
    assert not matches_criteria(_rental(price=150), criteria)
    assert not matches_criteria(_rental(rating=3.5), criteria)
    assert not matches_criteria(_rental(amenities=("Kitchen",)), criteria)


def test_matches_criteria_rental_capacity_and_type():
    criteria = SearchCriteria(guests=6, filters=SearchFilters(property_type="villa"))

    assert not matches_criteria(_rental(guests=4, property_type="Villa"), criteria)
    assert not matches_criteria(_rental(guests=8, property_type="Studio"), criteria)
    assert matches_criteria(_rental(guests=8, property_type="Villa"), criteria)


def test_filter_items_applies_limit():
    items = [_rental() for _ in range(5)]

    assert len(filter_items(items, SearchCriteria(limit=3))) == 3
