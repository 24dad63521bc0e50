from gateway.mappers.pricing import quote_rental_stay
from gateway.schemas.booking import PriceBreakdown
from gateway.schemas.criteria import DateRange
from gateway.schemas.envelope import Envelope
from gateway.services.adapter import DomainAdapter


class RentalAdapter(DomainAdapter):
    domain = "rentals"
    reference_kinds = ("categories", "amenities", "fuel-types")

    async def quote_stay(self, rental_id: str, date_range: DateRange) -> Envelope[PriceBreakdown]:
        """Price a stay from the listing's nightly rate, fees and taxes included."""
        details = await self.get_details(rental_id)
        if not details.success:
            return details
        return Envelope.ok(quote_rental_stay(details.data.price, date_range.nights), message=details.message)
