from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    APP_NAME: str = "flowscope"
    APP_VERSION: str = "0.1.0"

    HOST: str = "0.0.0.0"
    PORT: int = 8850

    CORS_ORIGINS: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser"
    )

    LOG_LEVEL: str = "INFO"

    BROADCAST_INTERVAL_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between two topology pushes on /ws"
    )

    ACTION_GRACE_PERIOD_SECONDS: int = Field(
        default=10,
        ge=0,
        description="Grace period handed to the daemon on stop/restart"
    )

    DEFAULT_LOG_TAIL: int = 100
    MAX_LOG_TAIL: int = 5000

    DOCKER_BASE_URL: str | None = Field(
        default=None,
        description="Daemon socket/URL; the environment (DOCKER_HOST) is used when unset"
    )
    DOCKER_TIMEOUT_SECONDS: int = 30

    model_config = SettingsConfigDict(
        env_prefix="FLOWSCOPE_",
        env_file=".env",
        extra="ignore",
    )
