from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    REDIS_URL: str = "redis://localhost:6379/0"

    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_PASSWORD_HASH: Optional[str] = None
    LOGIN_FAILURE_DELAY: float = 1.0

    SESSION_COOKIE_NAME: str = "admin_session"
    SESSION_MAX_AGE: int = 7 * 24 * 60 * 60  # 7 days
    SESSION_REFRESH_INTERVAL: int = 6 * 60 * 60  # 6 hours
    SESSION_REFRESH_TIMEOUT: int = 10

    ENVIRONMENT: str = "development"

    API_TITLE: str = "Detailing Admin Service"
    API_DESCRIPTION: str = "Booking revenue and admin session service for the detailing dashboard"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cookie_secure(self) -> bool:
        return self.ENVIRONMENT == "production"

settings = Settings()
