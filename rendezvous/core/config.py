from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    REDIS_URL: str = "redis://localhost:6379/0"
    # Maximum number of connections the Redis client will open per process
    REDIS_MAX_CONNECTIONS: int = 20
    # Prepended to every collection name, e.g. "rendezvous:" -> "rendezvous:user"
    REDIS_KEY_PREFIX: str = ""
    USER_COLLECTION: str = "user"
    SOCKET_NAMESPACE: str = "/"


settings = Settings()
