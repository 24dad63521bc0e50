from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from gateway.schemas.criteria import VALUE_OBJECT, DateRange, ReservationSlot

BookingStatus = Literal["confirmed", "pending", "cancelled"]


class ContactInfo(BaseModel):
    model_config = VALUE_OBJECT

    # Left optional so the booking pipeline can reject incomplete contacts
    # itself instead of failing at construction time.
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    country: str | None = None


class PartyComposition(BaseModel):
    model_config = VALUE_OBJECT

    adults: int = Field(default=1, ge=0)
    children: int = Field(default=0, ge=0)
    infants: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants


class BookingRequest(BaseModel):
    model_config = VALUE_OBJECT

    item_id: str
    date_range: DateRange | None = None
    slot: ReservationSlot | None = None
    party: PartyComposition = PartyComposition(adults=2)
    contact: ContactInfo = ContactInfo()
    option_id: str | None = None
    rooms: int = Field(default=1, ge=1)
    special_requests: str | None = None


class PriceBreakdown(BaseModel):
    model_config = VALUE_OBJECT

    unit_price: float = Field(ge=0)
    units: int = Field(ge=1)
    subtotal: float = Field(ge=0)
    cleaning_fee: float = 0.0
    service_fee: float = 0.0
    taxes: float = 0.0
    total: float = Field(ge=0)
    currency: str = "USD"


class BookingConfirmation(BaseModel):
    model_config = VALUE_OBJECT

    booking_id: str
    confirmation_number: str | None = None
    domain: str
    item_id: str
    status: BookingStatus = "confirmed"
    price: PriceBreakdown
    guest: ContactInfo
    party: PartyComposition
    date_range: DateRange | None = None
    slot: ReservationSlot | None = None
    special_requests: str | None = None
    created_at: datetime
