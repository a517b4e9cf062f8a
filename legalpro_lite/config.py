"""
Configuration for LegalPro Lite
===============================

Environment variables:
- ENVIRONMENT: development|production (default: development)
- DATABASE_URL: SQLAlchemy URL (default: sqlite:///./legalpro.db)
- JWT_SECRET_KEY: Session signing secret
- SMTP_HOST / SMTP_PORT / SMTP_USER / SMTP_PASSWORD / SMTP_FROM: Outgoing mail
- FRONTEND_URL / APP_URL: Base URL used in password reset links
- UPLOAD_DIR: Directory for uploaded documents (default: ./uploads)
- EXPOSE_RESET_TOKEN: Return reset tokens in API responses (never in production)
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from functools import lru_cache

DEFAULT_JWT_SECRET = "dev-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings from environment variables"""

    environment: str = "development"

    # Database
    database_url: str = "sqlite:///./legalpro.db"
    sql_echo: bool = False

    # Sessions
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    session_expire_days: int = 7
    session_cookie_name: str = "token"
    cookie_secure: bool = False

    # Password reset
    reset_token_ttl_minutes: int = 60
    expose_reset_token: bool = False

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = "no-reply@legalpro.local"
    smtp_use_tls: bool = True

    # Links and storage
    app_url: str = "http://localhost:8080"
    frontend_url: Optional[str] = None
    upload_dir: str = "./uploads"

    # HTTP
    cors_allow_origins: str = "http://localhost:8080,http://127.0.0.1:8080,http://localhost:5173"
    enforce_https: bool = False
    hsts_max_age: int = 31536000

    # Service info
    service_version: str = "1.0.0"

    class Config:
        env_prefix = ""
        case_sensitive = False
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def public_app_url(self) -> str:
        """Base URL for links sent to users (frontend wins over app)."""
        return (self.frontend_url or self.app_url).rstrip("/")

    @property
    def reset_token_exposed(self) -> bool:
        """Reset tokens are only echoed back when explicitly enabled outside production."""
        return self.expose_reset_token and not self.is_production

    def cors_origins(self) -> List[str]:
        origins: List[str] = []
        for item in self.cors_allow_origins.split(","):
            origin = item.strip().strip('"').strip("'").rstrip("/")
            if origin:
                origins.append(origin)
        return origins

    def validate_config(self) -> List[str]:
        """Validate configuration, return list of warnings"""
        warnings = []

        if self.is_production and self.jwt_secret_key == DEFAULT_JWT_SECRET:
            warnings.append("ENVIRONMENT=production but JWT_SECRET_KEY is the development default")

        if self.smtp_host and not (self.smtp_user and self.smtp_password):
            warnings.append("SMTP_HOST set but SMTP_USER/SMTP_PASSWORD missing (emails will not be sent)")

        if self.expose_reset_token and self.is_production:
            warnings.append("EXPOSE_RESET_TOKEN=true is ignored in production")

        return warnings


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
