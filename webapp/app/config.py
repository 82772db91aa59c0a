from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки операторского UI: куда ходить за данными парка."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # base_url backend'а парка (без /api/v1)
    BACKEND_API_URL: AnyHttpUrl | str = Field(
        default="http://127.0.0.1:8000",
        alias="backend_url",
    )
    BACKEND_TIMEOUT: float = Field(default=10.0, alias="backend_timeout")

    DEBUG: bool = False


settings = Settings()
