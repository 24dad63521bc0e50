from gateway.mappers.opentable_mapper import map_opentable_restaurant, price_level
from gateway.schemas.opentable import OpenTableRestaurant


def test_full_mapping():
    raw = OpenTableRestaurant(
        id=42,
        name="La Sqala",
        address="Boulevard des Almohades",
        area="Medina",
        city="Casablanca",
        phone="+212 522 260 960",
        price_range="$$$",
        cuisine="Moroccan, Mediterranean",
        reserve_url="https://ot/42",
        image_url="https://img/42.jpg",
    )

    restaurant = map_opentable_restaurant(raw)

    assert restaurant.id == "42"
    assert restaurant.address == "Boulevard des Almohades, Medina"
    assert restaurant.price_level == 3
    assert restaurant.price.amount == 50.0
    assert restaurant.rating == 4.5
    assert restaurant.cuisine == ["Moroccan", "Mediterranean"]
    assert restaurant.accepts_reservations is True
    assert restaurant.reservation_url == "https://ot/42"
    assert restaurant.images == ["https://img/42.jpg"]
    assert restaurant.source == "opentable"


def test_price_level_precedence():
    assert price_level(OpenTableRestaurant(price=4, price_range="$")) == 4
    assert price_level(OpenTableRestaurant(price_range=1)) == 1
    assert price_level(OpenTableRestaurant(price_range="$$$$$")) == 4
    assert price_level(OpenTableRestaurant(price=9)) == 2
    assert price_level(OpenTableRestaurant()) == 2


def test_minimal_mapping_uses_defaults():
    restaurant = map_opentable_restaurant(OpenTableRestaurant(), city="Fez")

    assert restaurant.id == "otb-1"
    assert restaurant.city == "Fez"
    assert restaurant.address == "Fez, Morocco"
    assert restaurant.price.amount == 30.0
    assert restaurant.cuisine == ["International"]
    assert restaurant.accepts_reservations is False


def test_cuisine_list_is_capped():
    raw = OpenTableRestaurant(id=1, cuisine=["A", "B", "C", "D", "E"])

    assert map_opentable_restaurant(raw).cuisine == ["A", "B", "C", "D"]
