from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from gateway.schemas.criteria import VALUE_OBJECT, DateRange, GeoPoint, ReservationSlot


class Money(BaseModel):
    model_config = VALUE_OBJECT

    amount: float = Field(gt=0)
    currency: str = "USD"


class RoomType(BaseModel):
    model_config = VALUE_OBJECT

    id: str
    name: str
    max_occupancy: int = Field(default=2, ge=1)
    price_per_night: Money
    amenities: list[str] = []


class Host(BaseModel):
    model_config = VALUE_OBJECT

    name: str
    is_superhost: bool = False
    response_rate: int | None = Field(default=None, ge=0, le=100)
    avatar: str | None = None


class Capacity(BaseModel):
    model_config = VALUE_OBJECT

    guests: int = Field(ge=1)
    bedrooms: int = Field(default=1, ge=0)
    bathrooms: int = Field(default=1, ge=0)
    beds: int = Field(default=1, ge=0)


class _InventoryBase(BaseModel):
    model_config = VALUE_OBJECT

    id: str
    name: str
    address: str
    city: str
    country: str = "Morocco"
    coordinates: GeoPoint
    rating: float = Field(ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    price: Money
    images: list[str] = Field(min_length=1)
    amenities: list[str] = []
    description: str | None = None
    source: str = "provider"


class Hotel(_InventoryBase):
    kind: Literal["hotel"] = "hotel"
    star_rating: int | None = Field(default=None, ge=1, le=5)
    room_types: list[RoomType] = []
    check_in_time: str = "15:00"
    check_out_time: str = "11:00"


class Rental(_InventoryBase):
    kind: Literal["rental"] = "rental"
    property_type: str = "Apartment"
    host: Host
    capacity: Capacity
    instant_book: bool = False


class Restaurant(_InventoryBase):
    kind: Literal["restaurant"] = "restaurant"
    cuisine: list[str] = []
    price_level: int = Field(default=2, ge=1, le=4)
    opening_hours: dict[str, str] = {}
    phone: str | None = None
    accepts_reservations: bool = True
    reservation_url: str | None = None


InventoryItem = Annotated[Union[Hotel, Rental, Restaurant], Field(discriminator="kind")]


class AvailabilityOption(BaseModel):
    model_config = VALUE_OBJECT

    id: str
    label: str
    available: bool = True
    price: Money | None = None
    capacity: int | None = None


class AvailabilityInfo(BaseModel):
    model_config = VALUE_OBJECT

    item_id: str
    available: bool
    date_range: DateRange | None = None
    slot: ReservationSlot | None = None
    options: list[AvailabilityOption] = []
    quote: Money | None = None


class ReferenceEntry(BaseModel):
    model_config = VALUE_OBJECT

    id: str
    name: str
    description: str = ""


class AccommodationResults(BaseModel):
    model_config = VALUE_OBJECT

    hotels: list[Hotel] = []
    rentals: list[Rental] = []
