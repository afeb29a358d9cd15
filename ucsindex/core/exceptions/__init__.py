"""Exception handling module."""

from ucsindex.core.exceptions.base import UCSIndexError
from ucsindex.core.exceptions.codes import ErrorCode
from ucsindex.core.exceptions.domain import (
    AssetNotEditableError,
    ConfigurationMissingError,
    DomainError,
    GraphConfigurationError,
    InvalidDateError,
    NonBusinessDayError,
    NotComputableError,
    QuoteStoreError,
)

__all__ = [
    "UCSIndexError",
    "DomainError",
    "ErrorCode",
    "AssetNotEditableError",
    "ConfigurationMissingError",
    "GraphConfigurationError",
    "InvalidDateError",
    "NonBusinessDayError",
    "NotComputableError",
    "QuoteStoreError",
]
