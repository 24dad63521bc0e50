from gateway.services.adapter import DomainAdapter


class RestaurantAdapter(DomainAdapter):
    """Restaurants are booked by reservation slot instead of a date range."""

    domain = "restaurants"
    reference_kinds = ("cuisines", "categories")
    requires_slot = True
