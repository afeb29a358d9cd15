"""Engine shared by the CLI commands; the package-level instance of the process."""

from __future__ import annotations

from ucsindex import get_engine

__all__ = ["get_engine"]
