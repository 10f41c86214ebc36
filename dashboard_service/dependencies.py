# Dashboard Service - Request dependencies
"""
FastAPI dependencies shared by the routers: the record store, the
authorization check and the error boundary around handler calls.
"""

import logging
from typing import Awaitable, Optional, TypeVar

from fastapi import Header, Request

from dashboard_service.config import Settings
from dashboard_service.errors import APIError, InternalServerError, UnauthorizedError
from dashboard_service.store.base import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    """Record store attached to the app, created on first use."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        from dashboard_service.store.dynamodb import DynamoDBStore

        store = DynamoDBStore(request.app.state.settings)
        request.app.state.store = store
    return store


async def authorize(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> None:
    """
    Require a ``Bearer`` authorization header unless auth is bypassed.

    The token itself is not verified.
    """
    if get_settings_from_app(request).bypass_auth:
        return
    if not authorization:
        raise UnauthorizedError("Authorization header is required")
    if not authorization.startswith("Bearer "):
        raise UnauthorizedError("Invalid authorization format")


async def guarded(call: Awaitable[T], failure_message: str) -> T:
    """
    Await a handler call, turning unexpected failures into a 500 APIError.

    APIErrors raised by the handler pass through unchanged.
    """
    try:
        return await call
    except APIError:
        raise
    except Exception as e:
        logger.error(f"{failure_message}: {e}", exc_info=True)
        raise InternalServerError(failure_message) from e
