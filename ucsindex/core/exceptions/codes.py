"""Standardised error codes shared by the engine, CLI and HTTP layers."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Machine readable error identifiers."""

    GENERAL_ERROR = "GENERAL_ERROR"
    VALIDATION = "VALIDATION_ERROR"
    NOT_COMPUTABLE = "NOT_COMPUTABLE"
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"
    GRAPH_CONFIGURATION = "GRAPH_CONFIGURATION_ERROR"
    INVALID_DATE = "INVALID_DATE"
    NON_BUSINESS_DAY = "NON_BUSINESS_DAY"
    ASSET_NOT_EDITABLE = "ASSET_NOT_EDITABLE"
    STORAGE = "STORAGE_ERROR"
    SYSTEM = "SYSTEM_ERROR"


__all__ = ["ErrorCode"]
