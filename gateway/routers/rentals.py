from fastapi import APIRouter
from fastapi.responses import JSONResponse

from gateway.dependencies import AvailabilityQueryDep, CriteriaDep, GatewayDep
from gateway.exceptions.handlers import render_envelope
from gateway.schemas.booking import BookingRequest

# Short-term rentals, served under the portal's historical car-rentals path.
router = APIRouter(prefix="/car-rentals", tags=["rentals"])


@router.get("/search")
async def search_rentals(gateway: GatewayDep, criteria: CriteriaDep) -> JSONResponse:
    return render_envelope(await gateway.rentals.search(criteria))


@router.get("/categories")
async def list_rental_categories(gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.rentals.list_reference("categories"))


@router.get("/amenities")
async def list_rental_amenities(gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.rentals.list_reference("amenities"))


@router.get("/fuel-types")
async def list_rental_fuel_types(gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.rentals.list_reference("fuel-types"))


@router.post("/bookings")
async def book_rental(gateway: GatewayDep, request: BookingRequest) -> JSONResponse:
    return render_envelope(await gateway.rentals.create_booking(request))


@router.get("/{rental_id}")
async def get_rental(rental_id: str, gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.rentals.get_details(rental_id))


@router.get("/{rental_id}/availability")
async def rental_availability(rental_id: str, gateway: GatewayDep, query: AvailabilityQueryDep) -> JSONResponse:
    date_range, slot, guests = query
    return render_envelope(await gateway.rentals.check_availability(rental_id, date_range, slot, guests))
