"""Asset calculation and simulation routes."""

from dataclasses import asdict

from fastapi import APIRouter, Query, Request

from ucsindex.core.services.calculation import parse_date, parse_target_date
from ucsindex.web.models import APIResponse, ImpactRequest, RecalculationRequest, ScenarioRequest
from ucsindex.web.utils import get_engine, get_request_id, run_blocking

router = APIRouter()


@router.get("/calculate/{asset_id}", response_model=APIResponse)
async def calculate_asset(
    request: Request,
    asset_id: str,
    date: str | None = Query(None, description="Target date; today when absent or invalid"),
) -> APIResponse:
    """Resolve ``asset_id`` for a date, computing and persisting it when missing."""
    engine = get_engine(request)
    target_date = parse_target_date(date, engine.calculation.clock)
    result = await run_blocking(request, engine.calculation.compute, asset_id, target_date)
    payload = result.to_payload()
    payload.update({"cached": result.cached, "persisted": result.persisted})
    return APIResponse(success=True, data=payload, request_id=get_request_id(request))


@router.post("/impact", response_model=APIResponse)
async def preview_impact(body: ImpactRequest, request: Request) -> APIResponse:
    """Simulate an edit and list affected assets. Nothing is written."""
    engine = get_engine(request)
    target_date = parse_target_date(body.date, engine.calculation.clock)
    impacted = await run_blocking(
        request, engine.simulation.preview_impact, body.asset_id, body.new_value, target_date
    )
    return APIResponse(
        success=True,
        data=[asdict(item) for item in impacted],
        message=f"{len(impacted)} assets impacted",
        request_id=get_request_id(request),
    )


@router.post("/scenario", response_model=APIResponse)
async def preview_scenario(body: ScenarioRequest, request: Request) -> APIResponse:
    engine = get_engine(request)
    target_date = parse_target_date(body.date, engine.calculation.clock)
    result = await run_blocking(
        request,
        engine.simulation.preview_scenario,
        body.asset_id,
        body.change_type,
        body.value,
        target_date,
        target=body.target,
    )
    return APIResponse(success=True, data=asdict(result), request_id=get_request_id(request))


@router.post("/recalculate", response_model=APIResponse)
async def recalculate(body: RecalculationRequest, request: Request) -> APIResponse:
    """Authoritative recalculation; writes quotes and audit entries."""
    engine = get_engine(request)
    result = await run_blocking(
        request, engine.recalculation.recalculate, parse_date(body.date), body.edits, user=body.user
    )
    data = {
        "date": result.target_date.isoformat(),
        "edited": [asdict(item) for item in result.edited],
        "affected": list(result.affected),
        "written": result.written,
        "skipped": list(result.skipped),
        "steps": [
            {"id": step.id, "name": step.name, "type": step.type, "status": step.status.value, "order": step.order}
            for step in result.steps
        ],
    }
    return APIResponse(
        success=True,
        data=data,
        message=f"{len(result.written)} quotes written",
        request_id=get_request_id(request),
    )
