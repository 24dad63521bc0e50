from pydantic import BaseModel, ConfigDict


class AirbnbPrice(BaseModel):
    rate: float | str | None = None  # nightly
    total: float | str | None = None
    currency: str | None = None


class AirbnbListing(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    name: str | None = None
    description: str | None = None
    type: str | None = None
    address: str | None = None
    city: str | None = None
    lat: float | str | None = None
    lng: float | str | None = None
    persons: int | str | None = None
    bedrooms: int | str | None = None
    bathrooms: float | int | str | None = None
    beds: int | str | None = None
    rating: float | str | None = None  # 0-5 scale
    guestSatisfactionOverall: float | str | None = None  # 0-100 scale
    reviewsCount: int | str | None = None
    hostName: str | None = None
    hostThumbnail: str | None = None
    isSuperhost: bool | None = None
    hostResponseRate: float | int | str | None = None  # 0-1 or 0-100
    instantBook: bool | None = None
    images: list[str] = []
    previewAmenities: list[str] = []
    amenityNames: list[str] = []
    price: AirbnbPrice | None = None


class AirbnbSearchResponse(BaseModel):
    error: bool = False
    results: list[AirbnbListing] = []


class AirbnbDetailsResponse(BaseModel):
    error: bool = False
    results: AirbnbListing


class AirbnbAvailability(BaseModel):
    available: bool = False
    price: AirbnbPrice | None = None


class AirbnbAvailabilityResponse(BaseModel):
    error: bool = False
    results: AirbnbAvailability
