from pydantic import BaseModel, ConfigDict


class OpenTableRestaurant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    area: str | None = None
    postal_code: str | None = None
    country: str | None = None
    phone: str | None = None
    lat: float | str | None = None
    lng: float | str | None = None
    price: int | str | None = None  # price level 1-4
    price_range: int | str | None = None  # "$$" or level
    rating: float | str | None = None
    cuisine: str | list[str] | None = None
    reserve_url: str | None = None
    mobile_reserve_url: str | None = None
    image_url: str | None = None


class OpenTableSearchResponse(BaseModel):
    total_entries: int = 0
    per_page: int = 0
    current_page: int = 1
    restaurants: list[OpenTableRestaurant] = []
