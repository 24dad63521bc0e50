from fastapi import APIRouter
from fastapi.responses import JSONResponse

from gateway.dependencies import AvailabilityQueryDep, CriteriaDep, GatewayDep
from gateway.exceptions.handlers import render_envelope
from gateway.schemas.booking import BookingRequest

router = APIRouter(prefix="/hotels", tags=["hotels"])


@router.get("/search")
async def search_hotels(gateway: GatewayDep, criteria: CriteriaDep) -> JSONResponse:
    return render_envelope(await gateway.hotels.search(criteria))


@router.get("/amenities")
async def list_hotel_amenities(gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.hotels.list_reference("amenities"))


@router.post("/bookings")
async def book_hotel(gateway: GatewayDep, request: BookingRequest) -> JSONResponse:
    return render_envelope(await gateway.hotels.create_booking(request))


@router.get("/{hotel_id}")
async def get_hotel(hotel_id: str, gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.hotels.get_details(hotel_id))


@router.get("/{hotel_id}/availability")
async def hotel_availability(hotel_id: str, gateway: GatewayDep, query: AvailabilityQueryDep) -> JSONResponse:
    date_range, slot, guests = query
    return render_envelope(await gateway.hotels.check_availability(hotel_id, date_range, slot, guests))
