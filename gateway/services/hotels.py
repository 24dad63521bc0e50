from gateway.services.adapter import DomainAdapter


class HotelAdapter(DomainAdapter):
    domain = "hotels"
    reference_kinds = ("amenities",)
