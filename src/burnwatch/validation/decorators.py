"""
Burnwatch - Validation Decorators

Applies Pydantic validation to MCP tool inputs.
Invalid input never reaches the tool body; the caller receives a
structured INVALID_INPUT response instead.
"""

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from ..errors import ErrorCode, make_error_response
from ..observability import get_observability

logger = logging.getLogger(__name__)


def _invalid_input_response(func_name: str, error: ValidationError, kwargs: dict[str, Any]) -> dict[str, Any]:
    validation_errors = [
        {
            "field": " -> ".join(str(loc) for loc in item["loc"]),
            "message": item["msg"],
            "type": item["type"],
        }
        for item in error.errors()
    ]

    logger.warning(
        f"Input validation failed for {func_name}",
        extra={
            "tool": func_name,
            "validation_errors": validation_errors,
            "input_kwargs": kwargs,
        },
    )
    get_observability().increment("validation.failed", tags={"tool": func_name})

    return make_error_response(
        error_code=ErrorCode.INVALID_INPUT,
        message="Input validation failed",
        context={"validation_errors": validation_errors, "function": func_name},
    )


def validate_input(schema: type[BaseModel]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to validate tool inputs using Pydantic schema.

    Args:
        schema: Pydantic model class for input validation

    Returns:
        Decorated function with automatic validation

    Example:
        >>> @validate_input(GetUsageHistoryInput)
        ... async def get_usage_history(period: str = "daily", days: int | None = None):
        ...     # Function receives validated inputs
        ...     pass

    Error Response:
        {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Input validation failed",
            "details": {
                "validation_errors": [
                    {
                        "field": "days",
                        "message": "Input should be less than or equal to 30",
                        "type": "less_than_equal"
                    }
                ],
                "function": "get_usage_history"
            }
        }
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    validated = schema(**kwargs)
                except ValidationError as e:
                    return _invalid_input_response(func.__name__, e, kwargs)
                return await func(*args, **validated.model_dump())

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                validated = schema(**kwargs)
            except ValidationError as e:
                return _invalid_input_response(func.__name__, e, kwargs)
            return func(*args, **validated.model_dump())

        return sync_wrapper

    return decorator
