"""Domain-level error hierarchy definitions."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from ucsindex.core.exceptions.base import UCSIndexError
from ucsindex.core.exceptions.codes import ErrorCode


class DomainError(UCSIndexError):
    """Base class for domain errors carrying a standardised context."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        layer: str,
        retryable: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        payload = dict(context or {})
        details = {**payload, "layer": layer, "retryable": retryable}
        super().__init__(message, code.value, details)
        self.code = code
        self.layer = layer
        self.retryable = retryable
        self.context = payload

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {
            "code": self.code.value,
            "message": self.message,
            "layer": self.layer,
            "retryable": self.retryable,
            "context": dict(self.context),
        }


def _date_context(target_date: date | None) -> dict[str, Any]:
    return {"date": target_date.isoformat()} if target_date is not None else {}


class NotComputableError(DomainError):
    """A value resolved to zero because upstream data is unavailable for the date."""

    def __init__(
        self,
        asset_id: str,
        target_date: date | None = None,
        *,
        missing: list[str] | None = None,
        message: str | None = None,
    ) -> None:
        context: dict[str, Any] = {"asset_id": asset_id, **_date_context(target_date)}
        if missing:
            context["missing"] = list(missing)
        super().__init__(
            message or f"No data available to compute '{asset_id}' for the requested date.",
            ErrorCode.NOT_COMPUTABLE,
            layer="calculation",
            context=context,
        )
        self.asset_id = asset_id
        self.target_date = target_date
        self.missing = list(missing or [])


class ConfigurationMissingError(DomainError):
    """An asset id has no entry in the dependency graph."""

    def __init__(self, asset_id: str) -> None:
        super().__init__(
            f"Asset '{asset_id}' is not configured.",
            ErrorCode.CONFIGURATION_MISSING,
            layer="graph",
            context={"asset_id": asset_id},
        )
        self.asset_id = asset_id


class GraphConfigurationError(DomainError):
    """The dependency table is inconsistent (unknown dependency, duplicate id or cycle)."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, ErrorCode.GRAPH_CONFIGURATION, layer="graph", context=context)


class InvalidDateError(DomainError):
    """A date parameter could not be parsed."""

    def __init__(self, raw_value: str) -> None:
        super().__init__(
            f"Invalid date '{raw_value}'.",
            ErrorCode.INVALID_DATE,
            layer="input",
            context={"raw_value": raw_value},
        )
        self.raw_value = raw_value


class NonBusinessDayError(DomainError):
    """An authoritative write was requested for a date that is not eligible."""

    def __init__(self, target_date: date, reason: str, holiday_name: str | None = None) -> None:
        context: dict[str, Any] = {**_date_context(target_date), "reason": reason}
        if holiday_name:
            context["holiday_name"] = holiday_name
        super().__init__(
            f"{target_date.isoformat()} is not eligible for authoritative writes ({reason}).",
            ErrorCode.NON_BUSINESS_DAY,
            layer="calendar",
            context=context,
        )
        self.target_date = target_date
        self.reason = reason


class AssetNotEditableError(DomainError):
    """Only quoted assets may be edited manually."""

    def __init__(self, asset_id: str, category: str) -> None:
        super().__init__(
            f"Asset '{asset_id}' ({category}) cannot be edited manually.",
            ErrorCode.ASSET_NOT_EDITABLE,
            layer="recalculation",
            context={"asset_id": asset_id, "category": category},
        )
        self.asset_id = asset_id


class QuoteStoreError(DomainError):
    """The quote store backend failed; surfaced to the caller without retries."""

    def __init__(self, message: str, *, operation: str, **context: Any) -> None:
        super().__init__(
            message,
            ErrorCode.STORAGE,
            layer="storage",
            retryable=True,
            context={"operation": operation, **context},
        )
        self.operation = operation


__all__ = [
    "AssetNotEditableError",
    "ConfigurationMissingError",
    "DomainError",
    "GraphConfigurationError",
    "InvalidDateError",
    "NonBusinessDayError",
    "NotComputableError",
    "QuoteStoreError",
]
