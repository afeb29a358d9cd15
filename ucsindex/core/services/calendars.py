"""Brazilian business-day calendar."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from functools import lru_cache

DEFAULT_WEEKEND = frozenset({5, 6})
DEFAULT_MAX_LOOKBACK = 14

_WEEKDAY_NAMES = {5: "sábado", 6: "domingo"}

FIXED_HOLIDAYS: Mapping[tuple[int, int], str] = {
    (1, 1): "Confraternização Universal",
    (4, 21): "Tiradentes",
    (5, 1): "Dia do Trabalho",
    (9, 7): "Independência do Brasil",
    (10, 12): "Nossa Senhora Aparecida",
    (11, 2): "Finados",
    (11, 15): "Proclamação da República",
    (11, 20): "Dia Nacional de Zumbi e da Consciência Negra",
    (12, 25): "Natal",
}

# offsets in days relative to Easter Sunday
EASTER_HOLIDAYS: Mapping[int, str] = {
    -48: "Carnaval (segunda-feira)",
    -47: "Carnaval (terça-feira)",
    -2: "Sexta-feira Santa",
    60: "Corpus Christi",
}


def easter_sunday(year: int) -> date:
    """Gregorian Easter (Meeus/Jones/Butcher)."""

    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


@lru_cache(maxsize=64)
def national_holidays(year: int) -> dict[date, str]:
    """National holidays of ``year`` keyed by date."""

    holidays = {date(year, month, day): name for (month, day), name in FIXED_HOLIDAYS.items()}
    easter = easter_sunday(year)
    for offset, name in EASTER_HOLIDAYS.items():
        holidays[easter + timedelta(days=offset)] = name
    return holidays


@dataclass(frozen=True)
class BusinessDayStatus:
    """Outcome of a business-day check."""

    date: date
    is_business_day: bool
    reason: str | None = None
    holiday_name: str | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"date": self.date.isoformat(), "isBusinessDay": self.is_business_day}
        if self.reason:
            payload["reason"] = self.reason
        if self.holiday_name:
            payload["holidayName"] = self.holiday_name
        return payload


@dataclass(frozen=True)
class BusinessDayCalendar:
    """Weekends plus the national holiday table and optional extra holidays."""

    weekend_days: frozenset[int] = DEFAULT_WEEKEND
    extra_holidays: Mapping[date, str] = field(default_factory=dict)

    @classmethod
    def from_iso_dates(cls, values: Iterable[str]) -> "BusinessDayCalendar":
        """Build a calendar whose extra holidays come from ISO date strings."""

        return cls(extra_holidays={date.fromisoformat(value): "Feriado configurado" for value in values})

    def holidays(self, year: int) -> dict[date, str]:
        merged = dict(national_holidays(year))
        merged.update({day: name for day, name in self.extra_holidays.items() if day.year == year})
        return dict(sorted(merged.items()))

    def holiday_name(self, day: date) -> str | None:
        if day in self.extra_holidays:
            return self.extra_holidays[day]
        return national_holidays(day.year).get(day)

    def check(self, day: date) -> BusinessDayStatus:
        weekday = day.weekday()
        if weekday in self.weekend_days:
            name = _WEEKDAY_NAMES.get(weekday, "fim de semana")
            return BusinessDayStatus(day, False, "weekend", f"Fim de semana ({name})")
        holiday = self.holiday_name(day)
        if holiday:
            return BusinessDayStatus(day, False, "holiday", holiday)
        return BusinessDayStatus(day, True)

    def is_business_day(self, day: date) -> bool:
        return self.check(day).is_business_day

    def previous_business_day(self, day: date, max_lookback: int = DEFAULT_MAX_LOOKBACK) -> date | None:
        """Closest business day strictly before ``day``, or ``None`` beyond ``max_lookback`` days."""

        for offset in range(1, max_lookback + 1):
            candidate = day - timedelta(days=offset)
            if self.is_business_day(candidate):
                return candidate
        return None

    def next_business_day(self, day: date, max_lookahead: int = DEFAULT_MAX_LOOKBACK) -> date | None:
        for offset in range(1, max_lookahead + 1):
            candidate = day + timedelta(days=offset)
            if self.is_business_day(candidate):
                return candidate
        return None

    def business_days(self, start: date, end: date) -> list[date]:
        """Return business days between the provided bounds inclusive."""

        if end < start:
            raise ValueError("end must be on or after start")

        current = start
        days: list[date] = []
        while current <= end:
            if self.is_business_day(current):
                days.append(current)
            current += timedelta(days=1)
        return days


__all__ = [
    "BusinessDayCalendar",
    "BusinessDayStatus",
    "DEFAULT_MAX_LOOKBACK",
    "EASTER_HOLIDAYS",
    "FIXED_HOLIDAYS",
    "easter_sunday",
    "national_holidays",
]
