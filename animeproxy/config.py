from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration settings for animeproxy."""

    # Upstream catalog
    upstream_base_url: str = Field(
        default="https://satoru-flame.vercel.app",
        description="Origin of the upstream anime catalog API",
    )
    upstream_timeout_seconds: float = Field(
        default=30.0, description="Timeout for a single upstream call in seconds"
    )
    user_agent: str = Field(
        default="animeproxy/1.0", description="User-Agent sent to the upstream API"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Address to bind the server to")
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("animeproxy_port", "port"),
        description="Port to bind the server to (PORT is honoured as well)",
    )
    cors_allow_origins: list[str] = Field(
        default=["*"], description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    class Config:
        env_prefix = "ANIMEPROXY_"
        case_sensitive = False


settings = Settings()
