import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

VALUE_OBJECT = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class GeoPoint(BaseModel):
    model_config = VALUE_OBJECT

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Location(BaseModel):
    model_config = VALUE_OBJECT

    city: str | None = None
    country: str = "Morocco"
    coordinates: GeoPoint | None = None


class DateRange(BaseModel):
    model_config = VALUE_OBJECT

    check_in: dt.date
    check_out: dt.date

    @model_validator(mode="after")
    def _check_order(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


class ReservationSlot(BaseModel):
    model_config = VALUE_OBJECT

    date: dt.date
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class PriceRange(BaseModel):
    model_config = VALUE_OBJECT

    min: float | None = Field(default=None, ge=0)
    max: float | None = Field(default=None, gt=0)

    def contains(self, amount: float) -> bool:
        if self.min is not None and amount < self.min:
            return False
        if self.max is not None and amount > self.max:
            return False
        return True


class SearchFilters(BaseModel):
    model_config = VALUE_OBJECT

    price_range: PriceRange | None = None
    min_rating: float | None = Field(default=None, ge=0, le=5)
    amenities: tuple[str, ...] = ()
    property_type: str | None = None
    cuisine: str | None = None


class SearchCriteria(BaseModel):
    model_config = VALUE_OBJECT

    location: Location = Location()
    date_range: DateRange | None = None
    slot: ReservationSlot | None = None
    guests: int = Field(default=2, ge=1, le=30)
    filters: SearchFilters = SearchFilters()
    limit: int = Field(default=20, ge=1, le=100)
