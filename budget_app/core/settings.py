from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, case_sensitive=False)

    # App
    app_name: str = "Budget App API"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./budget.db"

    # Security
    access_token_secret: str = "dev-access-secret-change-me"
    refresh_token_secret: str = "dev-refresh-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expires_minutes: int = 24 * 60
    refresh_token_expires_days: int = 7
    password_hash_rounds: int = 29000

    # Requests
    request_timeout_seconds: float = 100.0
    default_page_size: int = 10

    # Frontend
    cors_origins: List[str] = ["http://localhost:3000"]
    api_base_url: str = "http://localhost:8080"


settings = Settings()
