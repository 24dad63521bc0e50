from fastapi import APIRouter
from fastapi.responses import JSONResponse

from gateway.dependencies import CriteriaDep, GatewayDep
from gateway.exceptions.handlers import render_envelope

router = APIRouter(prefix="/accommodations", tags=["accommodations"])


@router.get("/search")
async def search_accommodations(gateway: GatewayDep, criteria: CriteriaDep) -> JSONResponse:
    """Hotels and short-term rentals matching the same criteria."""
    return render_envelope(await gateway.search_accommodations(criteria))
