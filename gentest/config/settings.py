from pydantic import model_validator
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # API Configuration
    debug: bool = False
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"

    # Gemini Configuration (secret comes from environment as GEMINI_API_KEY)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-pro"

    # Generation functions endpoint used by the application services.
    # Defaults to this same process (api_host/api_port); set it for a separate deployment.
    functions_base_url: Optional[str] = None
    functions_timeout_seconds: float = 120.0

    # Database Configuration
    database_url: str = "sqlite:///./data/gentest.db"

    # Security
    secret_key: Optional[str] = None
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Logging
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _default_functions_base_url(self) -> "Settings":
        if not self.functions_base_url:
            host = "127.0.0.1" if self.api_host in ("0.0.0.0", "::", "") else self.api_host
            self.functions_base_url = f"http://{host}:{self.api_port}/functions/v1"
        return self

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
