"""
DevMind Backend — FastAPI Dependencies
========================================

What:  Hands the process-wide ProviderRegistry and AssistanceService to routes.
Why:   Both are created once by the application factory / lifespan and stored
       on app.state. Routes receive them through Depends(), which keeps them
       swappable in tests (create_app(registry=...)) without module globals.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from fastapi import Request

from devmind.config import Settings
from devmind.exceptions import AssistanceTimeoutError
from devmind.providers.registry import ProviderRegistry
from devmind.services.assistance import AssistanceService

T = TypeVar("T")


def get_registry(request: Request) -> ProviderRegistry:
    return request.app.state.registry


def get_assistance_service(request: Request) -> AssistanceService:
    return request.app.state.assistance


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def bounded(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """
    Await a facade call, optionally under the configured boundary timeout.

    The provider layer has no timeout of its own; AI_REQUEST_TIMEOUT is the
    only place one is applied. When it elapses the pending vendor call is
    cancelled and AssistanceTimeoutError (504) is raised.
    """
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError:
        raise AssistanceTimeoutError(timeout) from None
