"""HTTP API for the UCS index engine."""

from ucsindex.web.app import create_app

__all__ = ["create_app"]
