from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    project_name: str = Field(default="Romofete API")
    database_url: str = Field(...)
    jwt_secret: str = Field(...)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expires_minutes: int = Field(default=60 * 24 * 7)
    log_level: str = Field(default="INFO")
    port: int = Field(default=8080)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    admin_username: str | None = Field(default=None)
    admin_email: str | None = Field(default=None)
    admin_password: str | None = Field(default=None)

    smtp_host: str | None = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_username: str | None = Field(default=None)
    smtp_password: str | None = Field(default=None)
    smtp_sender: str | None = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    contact_recipient: str | None = Field(default=None)

    sms_api_url: str = Field(default="https://sms.arkesel.com/api/v2/sms/send")
    sms_api_key: str | None = Field(default=None)
    sms_sender_id: str = Field(default="ROMOFETE")

    low_stock_threshold: int = Field(default=10)

    @model_validator(mode="after")
    def validate_security(self) -> "Settings":
        if len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters long.")
        if "://" not in self.database_url:
            raise ValueError("DATABASE_URL must be a valid connection string.")
        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()
