from __future__ import annotations

from datetime import date as Date

import typer

from ucsindex.core.config import ConfigManager
from ucsindex.core.services.calculation import parse_date
from ucsindex.core.services.calendars import BusinessDayCalendar

from .utils import fail, render

calendar_app = typer.Typer(help="Business-day calendar.")


def register(app: typer.Typer) -> None:
    app.add_typer(calendar_app, name="calendar", help="Business-day checks and holidays")


def get_calendar() -> BusinessDayCalendar:
    """Factory hook returning the calendar with configured extra holidays."""

    config = ConfigManager().get_config()
    return BusinessDayCalendar.from_iso_dates(config.calculation.extra_holidays)


@calendar_app.command("check")
def check_command(
    ctx: typer.Context,
    date: str = typer.Argument(..., help="Date to check."),
) -> None:
    """Report whether DATE is a business day."""

    try:
        day = parse_date(date)
    except Exception as error:
        fail(error)
    calendar = get_calendar()
    status = calendar.check(day)
    render(
        ctx,
        [
            {
                "date": day.isoformat(),
                "business_day": status.is_business_day,
                "reason": status.reason,
                "holiday": status.holiday_name,
                "previous_business_day": _iso(calendar.previous_business_day(day)),
                "next_business_day": _iso(calendar.next_business_day(day)),
            }
        ],
        ["date", "business_day", "reason", "holiday", "previous_business_day", "next_business_day"],
    )


@calendar_app.command("holidays")
def holidays_command(
    ctx: typer.Context,
    year: int = typer.Argument(..., help="Year to list."),
) -> None:
    """List the national and configured holidays of YEAR."""

    holidays = get_calendar().holidays(year)
    render(
        ctx,
        [{"date": day.isoformat(), "name": name} for day, name in holidays.items()],
        ["date", "name"],
    )


def _iso(value: Date | None) -> str | None:
    return value.isoformat() if value is not None else None


__all__ = ["calendar_app", "check_command", "get_calendar", "holidays_command", "register"]
