from pydantic import BaseModel, ConfigDict, Field


class BookingComPrice(BaseModel):
    value: float | str | None = None
    currency: str | None = None


class BookingComPriceBreakdown(BaseModel):
    gross_price: BookingComPrice | float | str | None = None
    all_inclusive_price: float | str | None = None


class BookingComHotel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hotel_id: int | str | None = None
    hotel_name: str | None = None
    hotel_name_trans: str | None = None
    hotel_description: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    latitude: float | str | None = None
    longitude: float | str | None = None
    review_score: float | str | None = None  # 0-10 scale
    review_nr: int | str | None = None
    min_total_price: float | str | None = None
    price_breakdown: BookingComPriceBreakdown | None = None
    currency_code: str | None = None
    main_photo_url: str | None = None
    photos: list[dict] = []
    facilities: list[dict] = []
    hotel_facilities: str | None = None  # comma separated ids or names
    class_: float | int | str | None = Field(default=None, alias="class")  # star class
    checkin: dict | None = None
    checkout: dict | None = None


class BookingComSearchResponse(BaseModel):
    result: list[BookingComHotel] = []


class BookingComDestination(BaseModel):
    dest_id: str | int | None = None
    search_type: str | None = None
    city_name: str | None = None


class BookingComDestinationResponse(BaseModel):
    data: list[BookingComDestination] = []


class BookingComRoomPrice(BaseModel):
    price: float | str | None = None
    currency: str | None = None


class BookingComRoomBlock(BaseModel):
    model_config = ConfigDict(extra="ignore")

    room_id: int | str | None = None
    block_id: str | None = None
    name_without_policy: str | None = None
    room_name: str | None = None
    max_occupancy: int | str | None = None
    min_price: BookingComRoomPrice | None = None
    product_price_breakdown: dict | None = None


class BookingComRoomListResponse(BaseModel):
    block: list[BookingComRoomBlock] = []
