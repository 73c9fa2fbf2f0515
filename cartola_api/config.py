"""Configuration for the Cartola market proxy."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Cartola FC public API base URL
CARTOLA_API_BASE = "https://api.cartolafc.globo.com"

# Upstream request timeout in seconds
REQUEST_TIMEOUT = 15.0

# Max age advertised in Cache-Control for successful responses
CACHE_MAX_AGE = 30

# Athlete listing pagination
DEFAULT_LIMIT = 100
MIN_LIMIT = 1
MAX_LIMIT = 200
DEFAULT_OFFSET = 0

# Cartola status id for "provável" (expected to play)
PROBABLE_STATUS_ID = 7

# Cartola position ids
POSITIONS = {
    1: "GOL",
    2: "LAT",
    3: "ZAG",
    4: "MEI",
    5: "ATA",
}

# 4-4-2: (response key, position id, slots), in response order
FORMATION_NAME = "4-4-2"
FORMATION = [
    ("goleiro", 1, 1),
    ("laterais", 2, 2),
    ("zagueiros", 3, 2),
    ("meias", 4, 4),
    ("atacantes", 5, 2),
]

# Fallback text when a club or venue cannot be resolved
UNAVAILABLE = "indisponível"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    cartola_api_base: str = Field(default=CARTOLA_API_BASE, description="Upstream API base URL")
    request_timeout: float = Field(default=REQUEST_TIMEOUT, description="Upstream timeout in seconds")
    cache_max_age: int = Field(default=CACHE_MAX_AGE, description="Cache-Control max-age in seconds")
    upstream_cache_ttl: int = Field(
        default=CACHE_MAX_AGE,
        description="Seconds to reuse an upstream payload in-process (0 disables)",
    )
    user_agent: str = Field(default="cartola-api/1.0", description="User agent for the upstream API")

    # Server
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
