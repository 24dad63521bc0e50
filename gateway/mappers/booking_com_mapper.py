from gateway.mappers.normalize import (
    DEFAULT_COUNTRY,
    DEFAULT_CURRENCY,
    cap_features,
    coerce_float,
    coerce_int,
    coordinates,
    display_city,
    ensure_images,
    pick_price,
    scale_rating,
    text_or,
)
from gateway.schemas.booking_com import BookingComHotel, BookingComPrice, BookingComRoomBlock
from gateway.schemas.criteria import DateRange
from gateway.schemas.inventory import AvailabilityInfo, AvailabilityOption, Hotel, Money


def _gross_price(raw: BookingComHotel):
    if raw.price_breakdown is None:
        return None
    gross = raw.price_breakdown.gross_price
    if isinstance(gross, BookingComPrice):
        return gross.value
    return gross or raw.price_breakdown.all_inclusive_price


def _photo_urls(raw: BookingComHotel) -> list[str | None]:
    urls: list[str | None] = [raw.main_photo_url]
    for photo in raw.photos:
        if isinstance(photo, dict):
            urls.append(photo.get("url_original") or photo.get("url_max"))
    return urls


def _facility_names(raw: BookingComHotel) -> list[str]:
    names = [f.get("name") for f in raw.facilities if isinstance(f, dict)]
    if not names and raw.hotel_facilities:
        # Search results carry facility ids; only keep textual entries.
        names = [p for p in raw.hotel_facilities.split(",") if not p.strip().isdigit()]
    return names


def _star_rating(raw: BookingComHotel) -> int | None:
    stars = coerce_float(raw.class_)
    if stars is None or stars < 1:
        return None
    return min(int(round(stars)), 5)


def map_booking_com_hotel(
    raw: BookingComHotel, city: str | None = None, index: int = 0
) -> Hotel:
    """Map a Booking.com hotel (search result or details) to a canonical Hotel."""
    resolved_city = display_city(raw.city or city)
    currency = raw.currency_code or DEFAULT_CURRENCY
    if raw.price_breakdown and isinstance(raw.price_breakdown.gross_price, BookingComPrice):
        currency = raw.currency_code or raw.price_breakdown.gross_price.currency or DEFAULT_CURRENCY

    checkin = raw.checkin or {}
    checkout = raw.checkout or {}

    return Hotel(
        id=text_or(raw.hotel_id, f"bkg-{index + 1}"),
        name=text_or(raw.hotel_name, f"Hotel {index + 1}"),
        description=raw.hotel_description or raw.hotel_name_trans or raw.hotel_name,
        address=text_or(raw.address, f"{resolved_city}, {DEFAULT_COUNTRY}"),
        city=resolved_city,
        country=text_or(raw.country, DEFAULT_COUNTRY),
        coordinates=coordinates(raw.latitude, raw.longitude, resolved_city),
        rating=scale_rating(raw.review_score, scale=10),
        review_count=coerce_int(raw.review_nr),
        price=Money(amount=pick_price(raw.min_total_price, _gross_price(raw)), currency=currency),
        images=ensure_images(_photo_urls(raw)),
        amenities=cap_features(_facility_names(raw)),
        star_rating=_star_rating(raw),
        check_in_time=text_or(checkin.get("from"), "15:00"),
        check_out_time=text_or(checkout.get("until"), "11:00"),
        source="booking.com",
    )


def _block_price(block: BookingComRoomBlock):
    if block.min_price is not None and coerce_float(block.min_price.price):
        return block.min_price.price
    breakdown = block.product_price_breakdown or {}
    gross = breakdown.get("gross_amount") or {}
    return gross.get("value") if isinstance(gross, dict) else None


def map_booking_com_rooms(
    hotel_id: str,
    blocks: list[BookingComRoomBlock],
    date_range: DateRange | None,
    guests: int,
) -> AvailabilityInfo:
    options: list[AvailabilityOption] = []
    for index, block in enumerate(blocks):
        occupancy = coerce_int(block.max_occupancy, default=2) or 2
        currency = (block.min_price.currency if block.min_price else None) or DEFAULT_CURRENCY
        options.append(
            AvailabilityOption(
                id=text_or(block.block_id or block.room_id, f"room-{index + 1}"),
                label=text_or(block.name_without_policy or block.room_name, f"Room {index + 1}"),
                available=occupancy >= guests,
                price=Money(amount=pick_price(_block_price(block)), currency=currency),
                capacity=occupancy,
            )
        )

    bookable = [o for o in options if o.available]
    return AvailabilityInfo(
        item_id=hotel_id,
        available=bool(bookable),
        date_range=date_range,
        options=options,
        quote=min((o.price for o in bookable), key=lambda m: m.amount, default=None),
    )

