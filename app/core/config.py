from typing import List, Optional
from pydantic import Field
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class SecuritySettings(BaseSettings):
    """Security configuration settings."""

    model_config = SettingsConfigDict(env_prefix="SECURITY_", extra="ignore")

    secret_key: str = Field(default="change-me-in-production")
    algorithm: str = Field(default="HS256")
    access_token_expire: int = Field(default=60)  # minutes
    admin_role: str = Field(default="admin")
    bcrypt_rounds: int = Field(default=12)


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_", extra="ignore")

    url: str = Field(default="sqlite:///./retailhub.db")
    echo: bool = Field(default=False)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(default="INFO")
    json_format: bool = Field(default=False)
    format: str = Field(default="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    file_path: Optional[str] = Field(default=None)
    max_bytes: int = Field(default=10 * 1024 * 1024)
    backup_count: int = Field(default=5)


class UploadSettings(BaseSettings):
    """Bulk upload validation settings."""

    model_config = SettingsConfigDict(env_prefix="UPLOAD_", extra="ignore")

    max_file_size: int = 10 * 1024 * 1024  # 10MB in bytes
    allowed_extensions: List[str] = Field(default=[".xlsx", ".xls"])
    email_pattern: str = Field(default=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    # Indian mobile numbers: 10 digits starting with 6-9
    contact_pattern: str = Field(default=r"^[6-9]\d{9}$")
    pincode_length: int = Field(default=6)
    header_offset: int = Field(default=2)
    code_attempts: int = Field(default=5)
    failed_rows_sheet: str = Field(default="Failed Rows")


class OtpSettings(BaseSettings):
    """OTP store configuration settings."""

    model_config = SettingsConfigDict(env_prefix="OTP_", extra="ignore")

    backend: str = Field(default="memory")  # memory, redis
    ttl_seconds: int = Field(default=300)
    max_attempts: int = Field(default=5)
    length: int = Field(default=6)
    redis_url: str = Field(default="redis://localhost:6379/0")
    key_prefix: str = Field(default="otp:")


class StorageSettings(BaseSettings):
    """File storage configuration settings."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", extra="ignore")

    local_storage_path: str = Field(default="./uploads")
    public_base_url: str = Field(default="/uploads")


class Settings(BaseSettings):
    project_name: str = Field(default="RetailHub Admin API")
    version: str = Field(default="1.0.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    cors_origins: List[str] = Field(default=["*"])

    security: SecuritySettings = Field(default_factory=SecuritySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    otp: OtpSettings = Field(default_factory=OtpSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", env_file_encoding="utf-8")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
