from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    # Template application
    template_apply_workers: int = Field(default=4, ge=1, alias="TEMPLATE_APPLY_WORKERS")

    # Search paging
    search_default_limit: int = Field(default=25, ge=1, alias="SEARCH_DEFAULT_LIMIT")
    search_max_limit: int = Field(default=100, ge=1, alias="SEARCH_MAX_LIMIT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Frontend URL for CORS
    frontend_url: str | None = Field(default=None, alias="FRONTEND_URL")

    @field_validator("frontend_url", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
