"""Service configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain import SurfLevel
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the surf rating service."""
    model_config = SettingsConfigDict(env_prefix="SURF_", extra="ignore")

    log_level: str = "INFO"
    job_name: str = "surf-wave-insights"
    host: str = "0.0.0.0"
    port: int = 8000
    default_surf_level: SurfLevel = SurfLevel.INTERMEDIATE
    max_batch_spots: int = 200

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return str(v).upper()


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
