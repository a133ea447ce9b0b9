"""Configuration management with pydantic-settings and validation."""

from pydantic_settings import BaseSettings
from pydantic import field_validator


# Fields that are optional (engine works without them)
OPTIONAL_FIELDS = {
    "anthropic_api_key",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str

    # Identity provider token verification
    jwt_secret: str
    jwt_algorithm: str = "HS256"

    # Anthropic Configuration (optional, ranking degrades without it)
    anthropic_api_key: str = ""
    preference_model: str = "claude-sonnet-4-5-20250929"
    inference_timeout_seconds: float = 20.0
    preference_cache_ttl_seconds: int = 24 * 60 * 60

    # Recommendation Settings
    recommendation_page_size: int = 10
    next_batch_size: int = 5
    recent_meal_window: int = 5
    score_tie_band: int = 1
    empty_filter_fallback: bool = True
    similar_recipe_limit: int = 3

    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_url(cls, v):
        """Heroku-style hosts use postgres:// but SQLAlchemy requires postgresql://."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("database_url", "jwt_secret", "anthropic_api_key", mode="before")
    @classmethod
    def check_not_empty(cls, v, info):
        """Validate that required environment variables are not empty."""
        if info.field_name in OPTIONAL_FIELDS:
            return v if v is not None else ""
        if v is None:
            raise ValueError("Required environment variable is not set")
        if isinstance(v, str) and v.strip() == "":
            raise ValueError("Required environment variable is empty")
        return v

    @property
    def inference_enabled(self) -> bool:
        """Whether preference extraction can call the language model."""
        return bool(self.anthropic_api_key.strip())


def get_settings() -> Settings:
    """Load and validate settings from environment.

    Raises:
        ValidationError: If required environment variables are missing or invalid.
    """
    return Settings()
