import uuid
from datetime import datetime, timezone

from gateway.schemas.booking import BookingConfirmation, BookingRequest, PriceBreakdown
from gateway.schemas.inventory import Hotel, Money, Rental, Restaurant

HOTEL_TAX_RATE = 0.10
RENTAL_CLEANING_FEE = 25.0
RENTAL_SERVICE_RATE = 0.12
RENTAL_TAX_RATE = 0.08

BOOKING_ID_PREFIXES = {"hotels": "HTL", "rentals": "RNT", "restaurants": "RST"}


def _money(value: float) -> float:
    return round(value, 2)


def quote_hotel_stay(nightly: Money, nights: int, rooms: int = 1) -> PriceBreakdown:
    units = max(nights, 1) * max(rooms, 1)
    subtotal = nightly.amount * units
    taxes = subtotal * HOTEL_TAX_RATE
    return PriceBreakdown(
        unit_price=_money(nightly.amount),
        units=units,
        subtotal=_money(subtotal),
        taxes=_money(taxes),
        total=_money(subtotal + taxes),
        currency=nightly.currency,
    )


def quote_rental_stay(nightly: Money, nights: int) -> PriceBreakdown:
    units = max(nights, 1)
    subtotal = nightly.amount * units
    service_fee = subtotal * RENTAL_SERVICE_RATE
    taxes = (subtotal + RENTAL_CLEANING_FEE) * RENTAL_TAX_RATE
    return PriceBreakdown(
        unit_price=_money(nightly.amount),
        units=units,
        subtotal=_money(subtotal),
        cleaning_fee=RENTAL_CLEANING_FEE,
        service_fee=_money(service_fee),
        taxes=_money(taxes),
        total=_money(subtotal + RENTAL_CLEANING_FEE + service_fee + taxes),
        currency=nightly.currency,
    )


def quote_reservation(per_person: Money, party_size: int) -> PriceBreakdown:
    """Estimated spend; restaurants settle the bill at the venue."""
    units = max(party_size, 1)
    subtotal = per_person.amount * units
    return PriceBreakdown(
        unit_price=_money(per_person.amount),
        units=units,
        subtotal=_money(subtotal),
        total=_money(subtotal),
        currency=per_person.currency,
    )


def quote_booking(item: Hotel | Rental | Restaurant, request: BookingRequest) -> PriceBreakdown:
    nights = request.date_range.nights if request.date_range else 1
    if isinstance(item, Hotel):
        nightly = item.price
        for room in item.room_types:
            if room.id == request.option_id:
                nightly = room.price_per_night
        return quote_hotel_stay(nightly, nights, request.rooms)
    if isinstance(item, Rental):
        return quote_rental_stay(item.price, nights)
    return quote_reservation(item.price, request.party.total)


def local_confirmation(
    domain: str,
    request: BookingRequest,
    item: Hotel | Rental | Restaurant,
    now: datetime | None = None,
) -> BookingConfirmation:
    """Confirm a booking without a remote booking channel."""
    prefix = BOOKING_ID_PREFIXES.get(domain, "BKG")
    return BookingConfirmation(
        booking_id=f"{prefix}-{uuid.uuid4().hex[:12]}",
        domain=domain,
        item_id=request.item_id,
        status="confirmed",
        price=quote_booking(item, request),
        guest=request.contact,
        party=request.party,
        date_range=request.date_range,
        slot=request.slot,
        special_requests=request.special_requests,
        created_at=now or datetime.now(timezone.utc),
    )
