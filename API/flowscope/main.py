import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowscope.api import containers
from flowscope.api import topology
from flowscope.api import ws
from flowscope.core.config import Settings
from flowscope.domain.ports import ContainerRuntime
from flowscope.services.broadcaster import LiveUpdateBroadcaster
from flowscope.services.container_service import ContainerService
from flowscope.services.docker_runtime import DockerSDKRuntime

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(runtime: ContainerRuntime | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the application around one runtime handle.

    The handle is shared read-only by every request and websocket; pass a
    fake one in tests.
    """
    settings = settings or Settings()
    if runtime is None:
        runtime = DockerSDKRuntime(settings)
    container_service = ContainerService(runtime, settings)

    app = FastAPI(title="FlowScope – Container Topology", version=settings.APP_VERSION)
    app.state.settings = settings
    app.state.container_service = container_service
    app.state.broadcaster = LiveUpdateBroadcaster(
        container_service, interval=settings.BROADCAST_INTERVAL_SECONDS
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(topology.router)
    app.include_router(containers.router)
    app.include_router(ws.router)

    @app.get("/health", tags=["health"])
    async def health_check():
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    # ---------- Startup / Shutdown ----------

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            f"[STARTUP] {settings.APP_NAME} {settings.APP_VERSION} ready, "
            f"pushing topology every {settings.BROADCAST_INTERVAL_SECONDS}s on /ws"
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("[SHUTDOWN] Stopped serving topology")

    return app


app = create_app()


def run() -> None:
    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "flowscope.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
