"""
Read-path error mapping.

NotFound becomes a 404 echoing the requested id, runtime failures a 500
carrying the upstream text. Lifecycle refusals never get here: they are
returned as ActionResult envelopes with success=False.
"""
import logging
from functools import wraps
from typing import Callable

from fastapi import HTTPException

from flowscope.domain.errors import ContainerNotFound, FlowchartNotFound, UpstreamUnavailable

logger = logging.getLogger(__name__)


def not_found(exc: ContainerNotFound | FlowchartNotFound) -> HTTPException:
    return HTTPException(status_code=404, detail={"error": exc.message, "id": exc.id})


def upstream_failure(operation: str, exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={"error": f"Failed to {operation}", "details": str(exc)},
    )


def api_errors(operation: str):
    """
    Decorator translating domain errors raised by a route into HTTPExceptions.

    Example:
        @router.get("/topology")
        @api_errors("get system topology")
        async def get_topology(...): ...
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except (ContainerNotFound, FlowchartNotFound) as e:
                logger.debug(f"{operation} - not found: {e.id}")
                raise not_found(e)
            except UpstreamUnavailable as e:
                logger.error(f"{operation} - upstream failure: {e}")
                raise upstream_failure(operation, e)

        return wrapper

    return decorator
