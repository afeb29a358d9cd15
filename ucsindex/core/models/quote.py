"""Quote record model."""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

DISPLAY_DATE_FORMAT = "%d/%m/%Y"


class QuoteSource(str, Enum):
    """Origin of a persisted quote."""

    QUOTE = "quote"
    CALCULATED = "calculated"
    MANUAL_EDIT = "manual_edit"
    RECALCULATED = "recalculated"


def date_to_timestamp(value: dt.date) -> int:
    """Milliseconds of UTC midnight for ``value``."""
    return int(dt.datetime(value.year, value.month, value.day, tzinfo=dt.UTC).timestamp() * 1000)


class Quote(BaseModel):
    """One record per (asset_id, date)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    asset_id: str
    date: dt.date
    close: float = Field(alias="ultimo")
    change_pct: float = 0.0
    components: dict[str, float] = Field(default_factory=dict)
    timestamp: int = 0
    source: QuoteSource = QuoteSource.QUOTE

    @model_validator(mode="before")
    @classmethod
    def _fill_timestamp(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("timestamp") and data.get("date") is not None:
            day = data["date"]
            if isinstance(day, str):
                day = dt.date.fromisoformat(day)
            data = {**data, "timestamp": date_to_timestamp(day)}
        return data

    @property
    def display_date(self) -> str:
        return self.date.strftime(DISPLAY_DATE_FORMAT)

    @property
    def is_usable(self) -> bool:
        """A stored close that can be served without recomputation."""
        return self.close > 0

    @field_serializer("date", when_used="json")
    def serialize_date(self, value: dt.date) -> str:
        return value.isoformat()


__all__ = ["DISPLAY_DATE_FORMAT", "Quote", "QuoteSource", "date_to_timestamp"]
