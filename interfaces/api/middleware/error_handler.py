"""Error handling middleware and decorators for API routes."""

import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import structlog
from fastapi import HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from returns.result import Failure, Success
from starlette.exceptions import HTTPException as StarletteHTTPException

from interfaces.api.routes.helpers import _map_app_error_to_http_exception

if TYPE_CHECKING:
    from typing import Any

logger = structlog.get_logger()

T_co = TypeVar("T_co")


def _raise_mapped_http_error(failure: object) -> None:
    error = _map_app_error_to_http_exception(failure)
    raise error from None


def _raise_unexpected_result_type() -> None:
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    ) from None


def handle_use_case_errors(
    func: Callable[..., Awaitable[T_co]],
) -> Callable[..., Awaitable[T_co]]:
    """Handle common use case error patterns.

    This decorator centralizes error handling for use case execution:
    - Unwraps Success results
    - Maps Failure results to HTTP exceptions
    - Catches and logs unexpected errors

    Args:
        func: An async endpoint function that executes a use case

    Returns:
        Wrapped function with centralized error handling

    """

    @functools.wraps(func)
    async def wrapper(*args: "Any", **kwargs: "Any") -> T_co:  # noqa: ANN401
        try:
            result = await func(*args, **kwargs)

            if isinstance(result, Success):
                return result.unwrap()

            if isinstance(result, Failure):
                _raise_mapped_http_error(result.failure())

            _raise_unexpected_result_type()

        except HTTPException:
            raise
        except Exception as exc:
            logger.exception(
                "unexpected_error",
                error=str(exc),
                error_type=type(exc).__name__,
                function=func.__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal Server Error",
            ) from exc

    return wrapper


async def plain_text_http_exception_handler(
    request: Request,  # noqa: ARG001
    exc: StarletteHTTPException,
) -> PlainTextResponse:
    """Render HTTP errors as short plain-text bodies instead of JSON."""
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )
