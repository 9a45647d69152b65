from dataclasses import dataclass
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_FILE = BASE_DIR / ".env"


@dataclass(frozen=True)
class JwtSettings:
    """Signing parameters handed to the token manager."""

    secret: str
    refresh_secret: str
    algorithm: str
    issuer: str
    audience: str
    access_token_expire_minutes: int
    refresh_token_expire_days: int


class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Hearth"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str = ""
    REFRESH_SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "hearth"
    JWT_AUDIENCE: str = "hearth-clients"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # Database
    # Default to a local sqlite file for development; override via .env in production.
    DATABASE_URL: str = "sqlite:///./hearth.db"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), case_sensitive=True, extra="ignore"
    )

    def jwt_settings(self) -> JwtSettings:
        # Refresh tokens fall back to the access secret when no dedicated one is set
        return JwtSettings(
            secret=self.SECRET_KEY,
            refresh_secret=self.REFRESH_SECRET_KEY or self.SECRET_KEY,
            algorithm=self.ALGORITHM,
            issuer=self.JWT_ISSUER,
            audience=self.JWT_AUDIENCE,
            access_token_expire_minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES,
            refresh_token_expire_days=self.REFRESH_TOKEN_EXPIRE_DAYS,
        )


settings = Settings()
