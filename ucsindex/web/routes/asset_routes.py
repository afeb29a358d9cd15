"""Asset configuration and business-day routes."""

from fastapi import APIRouter, Query, Request

from ucsindex.core.exceptions import ConfigurationMissingError
from ucsindex.core.services.calculation import parse_target_date
from ucsindex.web.models import APIResponse
from ucsindex.web.utils import get_engine, get_request_id

router = APIRouter()


@router.get("/assets", response_model=APIResponse)
async def list_assets(request: Request) -> APIResponse:
    configs = get_engine(request).assets.list_asset_configs()
    return APIResponse(
        success=True,
        data=[config.to_payload() for config in configs],
        request_id=get_request_id(request),
    )


@router.get("/assets/{asset_id}", response_model=APIResponse)
async def get_asset(request: Request, asset_id: str) -> APIResponse:
    config = get_engine(request).assets.get_asset_config(asset_id)
    if config is None:
        raise ConfigurationMissingError(asset_id)
    return APIResponse(success=True, data=config.to_payload(), request_id=get_request_id(request))


@router.get("/business-day", response_model=APIResponse)
async def business_day_status(request: Request, date: str | None = Query(None)) -> APIResponse:
    engine = get_engine(request)
    day = parse_target_date(date, engine.calculation.clock)
    status = engine.calendar.check(day)
    return APIResponse(success=True, data=status.to_payload(), request_id=get_request_id(request))


@router.get("/business-day/previous", response_model=APIResponse)
async def previous_business_day(request: Request, date: str | None = Query(None)) -> APIResponse:
    engine = get_engine(request)
    day = parse_target_date(date, engine.calculation.clock)
    previous = engine.calendar.previous_business_day(day, engine.config.calculation.max_lookback_days)
    return APIResponse(
        success=True,
        data={"date": day.isoformat(), "previousBusinessDay": previous.isoformat() if previous else None},
        request_id=get_request_id(request),
    )
