"""Health check route."""

import time

from fastapi import APIRouter, Request

from ucsindex import __version__
from ucsindex.core.exceptions import QuoteStoreError
from ucsindex.web.models import APIResponse, HealthStatus
from ucsindex.web.utils import get_engine, get_request_id, run_blocking

router = APIRouter()


@router.get("/health", response_model=APIResponse)
async def health_check(request: Request) -> APIResponse:
    """Report graph and store status."""
    engine = get_engine(request)
    components = {"graph": "healthy" if len(engine.graph) else "unhealthy"}
    try:
        await run_blocking(request, engine.store.get_quote, "ucs_ase", engine.calculation.clock())
        components["store"] = "healthy"
    except QuoteStoreError:
        components["store"] = "unhealthy"

    status = HealthStatus(
        status="healthy" if all(value == "healthy" for value in components.values()) else "unhealthy",
        version=__version__,
        uptime=time.time() - getattr(request.app.state, "start_time", time.time()),
        components=components,
    )
    return APIResponse(success=status.status == "healthy", data=status.model_dump(), request_id=get_request_id(request))
