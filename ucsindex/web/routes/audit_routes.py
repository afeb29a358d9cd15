"""Audit trail route."""

from fastapi import APIRouter, Query, Request

from ucsindex.core.data.repositories import query_entries
from ucsindex.core.services.calculation import parse_date
from ucsindex.web.models import APIResponse
from ucsindex.web.utils import get_engine, get_request_id, run_blocking

router = APIRouter()


@router.get("/audit", response_model=APIResponse)
async def list_audit_entries(
    request: Request,
    date: str | None = Query(None, description="Edits recorded for this target date"),
    start: str | None = Query(None, description="First target date of a period"),
    end: str | None = Query(None, description="Last target date of a period"),
    asset_id: str | None = Query(None, description="Only edits of this asset"),
    limit: int | None = Query(None, ge=1, le=1000),
) -> APIResponse:
    """Manual edits recorded by recalculations, newest first. Invalid dates are rejected."""
    entries = await run_blocking(
        request,
        query_entries,
        get_engine(request).audit_log,
        target_date=parse_date(date) if date else None,
        start=parse_date(start) if start else None,
        end=parse_date(end) if end else None,
        asset_id=asset_id,
        limit=limit,
    )
    return APIResponse(
        success=True,
        data=[entry.to_payload() for entry in entries],
        message=f"{len(entries)} audit entries",
        request_id=get_request_id(request),
    )
