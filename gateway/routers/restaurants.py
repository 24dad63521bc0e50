from fastapi import APIRouter
from fastapi.responses import JSONResponse

from gateway.dependencies import AvailabilityQueryDep, CriteriaDep, GatewayDep
from gateway.exceptions.handlers import render_envelope
from gateway.schemas.booking import BookingRequest

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("/search")
async def search_restaurants(gateway: GatewayDep, criteria: CriteriaDep) -> JSONResponse:
    return render_envelope(await gateway.restaurants.search(criteria))


@router.get("/cuisines")
async def list_cuisines(gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.restaurants.list_reference("cuisines"))


@router.get("/categories")
async def list_restaurant_categories(gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.restaurants.list_reference("categories"))


@router.post("/reservations")
async def reserve_table(gateway: GatewayDep, request: BookingRequest) -> JSONResponse:
    return render_envelope(await gateway.restaurants.create_booking(request))


@router.get("/{restaurant_id}")
async def get_restaurant(restaurant_id: str, gateway: GatewayDep) -> JSONResponse:
    return render_envelope(await gateway.restaurants.get_details(restaurant_id))


@router.get("/{restaurant_id}/availability")
async def restaurant_availability(
    restaurant_id: str, gateway: GatewayDep, query: AvailabilityQueryDep
) -> JSONResponse:
    date_range, slot, guests = query
    return render_envelope(await gateway.restaurants.check_availability(restaurant_id, date_range, slot, guests))
