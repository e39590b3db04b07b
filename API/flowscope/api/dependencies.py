"""FastAPI dependencies giving routes access to the services built at startup."""
from fastapi import Request

from flowscope.services.container_service import ContainerService


def get_container_service(request: Request) -> ContainerService:
    if not hasattr(request.app.state, "container_service"):
        raise RuntimeError("Container service not initialized")
    return request.app.state.container_service
