"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from employer_portal.core.timeutils import BUSINESS_TIMEZONE


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    public_url: str = "http://localhost:3000"


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./employer_portal.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    session_max_age_days: int = 14
    # Bearer token for scheduler-triggered jobs; jobs are disabled while unset.
    cron_secret: Optional[str] = None


class MagicLinkSettings(BaseModel):
    token_ttl_hours: int = 24
    lookup_attempts: int = 3
    lookup_delay_seconds: float = 1.0
    verify_path: str = "/auth/verify"


class EmailSettings(BaseModel):
    backend: Literal["smtp", "console"] = "console"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True
    sender: str = "Colourful jobs <noreply@colourfuljobs.nl>"


class MediaSettings(BaseModel):
    backend: Literal["local", "cloudinary"] = "local"
    local_dir: Path = Field(default=Path("storage/media"))
    local_base_url: str = "/media"
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "employers"
    max_gallery_images: int = 10


class SyncSettings(BaseModel):
    vacancy_webhook_url: Optional[str] = None
    employer_webhook_url: Optional[str] = None
    timeout_seconds: float = 8.0


class CreditSettings(BaseModel):
    validity_days: int = 365
    expiry_warning_days: int = 30


class TeamSettings(BaseModel):
    invite_ttl_hours: int = 24
    invite_path: str = "/invitation"


class RateLimitSettings(BaseModel):
    enabled: bool = True
    login_limit: int = 5
    login_window_seconds: int = 60
    onboarding_limit: int = 3
    onboarding_window_seconds: int = 60 * 60
    email_limit: int = 3
    email_window_seconds: int = 5 * 60
    api_limit: int = 60
    api_window_seconds: int = 60
    invite_limit: int = 10
    invite_window_seconds: int = 60 * 60


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    project_name: str = "Colourful jobs Employer Portal"
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]

    timezone: str = BUSINESS_TIMEZONE

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    magic_link: MagicLinkSettings = MagicLinkSettings()
    email: EmailSettings = EmailSettings()
    media: MediaSettings = MediaSettings()
    sync: SyncSettings = SyncSettings()
    rate_limit: RateLimitSettings = RateLimitSettings()
    credits: CreditSettings = CreditSettings()
    team: TeamSettings = TeamSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def session_max_age_minutes(self) -> int:
        return self.security.session_max_age_days * 24 * 60

    @property
    def media_storage_dir(self) -> str:
        return str(self.media.local_dir)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
