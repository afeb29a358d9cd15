"""Helpers shared by the HTTP routes."""

import asyncio
from typing import Callable, TypeVar

from fastapi import Request

from ucsindex.core.engine import UCSIndexEngine

T = TypeVar("T")


def get_request_id(request: Request) -> str | None:
    """Return the ``X-Request-ID`` header, if any."""
    return request.headers.get("X-Request-ID")


def get_engine(request: Request) -> UCSIndexEngine:
    return request.app.state.engine


async def run_blocking(request: Request, func: Callable[..., T], *args: object, **kwargs: object) -> T:
    """Run an engine call in a worker thread while holding the engine lock.

    Store reads and writes block on DuckDB, so handlers never call the services
    on the event loop directly.
    """
    engine = get_engine(request)

    def call() -> T:
        with engine.lock:
            return func(*args, **kwargs)

    return await asyncio.to_thread(call)
