import logging
import secrets
import string
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from gateway.exceptions.custom import BookingFailure
from gateway.schemas.booking import BookingConfirmation, BookingRequest
from gateway.schemas.envelope import Envelope
from gateway.services.cache import CacheOrchestrator

if TYPE_CHECKING:
    from gateway.services.adapter import DomainAdapter

logger = logging.getLogger(__name__)

CONFIRMATION_PREFIX = "WC2030-"
_ALPHABET = string.digits + string.ascii_uppercase


def _base36(value: int, width: int) -> str:
    """Lowest `width` base-36 digits of value, zero padded."""
    digits = []
    for _ in range(width):
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def booking_problem(request: BookingRequest, requires_slot: bool) -> str | None:
    """First reason the request cannot be submitted, or None."""
    if not request.item_id.strip():
        return "Missing item id"
    contact = request.contact
    for field, label in (
        ("first_name", "first name"),
        ("last_name", "last name"),
        ("email", "email"),
        ("phone", "phone"),
    ):
        if not getattr(contact, field).strip():
            return f"Missing contact {label}"
    if "@" not in contact.email:
        return "Invalid contact email"
    if request.party.total < 1:
        return "Party must include at least one guest"
    if requires_slot and request.slot is None:
        return "Reservation date and time are required"
    if not requires_slot and request.date_range is None:
        return "Check-in and check-out dates are required"
    return None


class BookingPipeline:
    """Validates, submits and confirms bookings for every domain.

    Each confirmed booking gets a portal confirmation number and clears the
    domain's cached reads. Requests are not deduplicated: submitting the same
    request twice books twice.
    """

    def __init__(self, cache: CacheOrchestrator, clock: Callable[[], float] = time.time):
        self._cache = cache
        self._clock = clock
        # Numbers minted in the current millisecond; earlier ones differ in the clock digits.
        self._issued_at: int | None = None
        self._issued: set[str] = set()

    def confirmation_number(self) -> str:
        while True:
            millis = int(self._clock() * 1000)
            if millis != self._issued_at:
                self._issued_at = millis
                self._issued.clear()
            suffix = "".join(secrets.choice(_ALPHABET) for _ in range(4))
            candidate = f"{CONFIRMATION_PREFIX}{_base36(millis, 6)}{suffix}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate

    async def run(self, adapter: "DomainAdapter", request: BookingRequest) -> Envelope[BookingConfirmation]:
        problem = booking_problem(request, adapter.requires_slot)
        if problem is not None:
            logger.warning("Rejected %s booking for %r: %s", adapter.domain, request.item_id, problem)
            return Envelope.fail(BookingFailure(problem, service=adapter.domain).to_api_error())

        envelope = await adapter.submit_booking(request)
        if not envelope.success:
            return envelope

        confirmation = envelope.data.model_copy(update={"confirmation_number": self.confirmation_number()})
        self._cache.invalidate(adapter.domain)
        logger.info(
            "Confirmed %s booking %s (%s)",
            adapter.domain,
            confirmation.booking_id,
            confirmation.confirmation_number,
        )
        return Envelope.ok(confirmation, status=envelope.status, message="Booking confirmed")
