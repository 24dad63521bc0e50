from typing import Annotated

from fastapi import Depends, Request

from gateway.exceptions.custom import HttpError
from gateway.mappers.query import availability_from_query, criteria_from_query
from gateway.schemas.criteria import DateRange, ReservationSlot, SearchCriteria
from gateway.services.gateway import TravelGateway


def get_gateway(request: Request) -> TravelGateway:
    return request.app.state.gateway


def get_search_criteria(request: Request) -> SearchCriteria:
    try:
        return criteria_from_query(request.query_params)
    except ValueError as exc:
        raise HttpError(f"Invalid search parameters: {exc}", status_code=422) from exc


def get_availability_query(request: Request) -> tuple[DateRange | None, ReservationSlot | None, int]:
    try:
        return availability_from_query(request.query_params)
    except ValueError as exc:
        raise HttpError(f"Invalid availability parameters: {exc}", status_code=422) from exc


GatewayDep = Annotated[TravelGateway, Depends(get_gateway)]
CriteriaDep = Annotated[SearchCriteria, Depends(get_search_criteria)]
AvailabilityQueryDep = Annotated[
    tuple[DateRange | None, ReservationSlot | None, int], Depends(get_availability_query)
]
