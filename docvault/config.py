from pydantic_settings import BaseSettings
from pydantic import Field

DEV_SECRET = "dev-secret-change-me"

class Settings(BaseSettings):
    app_name: str = Field("DocVault", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    port: int = Field(3000, alias="PORT")
    app_url: str = Field("http://localhost:3000", alias="APP_URL")

    secret_key: str = Field(DEV_SECRET, alias="JWT_SECRET")
    access_token_expire_minutes: int = Field(60 * 24 * 7, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    database_url: str = Field("sqlite:///./docvault.db", alias="DATABASE_URL")

    upload_dir: str = Field("./uploads", alias="UPLOAD_DIR")
    max_file_size: int = Field(10 * 1024 * 1024, alias="MAX_FILE_SIZE")

    admin_emails: str = Field("", alias="ADMIN_EMAILS")

    rate_limit_window_seconds: int = Field(60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_calls: int = Field(30, alias="RATE_LIMIT_MAX_CALLS")

    log_level: str | None = Field(default=None, alias="LOG_LEVEL")
    log_format: str | None = Field(default=None, alias="LOG_FORMAT")

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() in ("prod", "production")

    @property
    def admin_email_set(self) -> set[str]:
        return {e.strip().lower() for e in self.admin_emails.split(",") if e.strip()}


def get_settings() -> Settings:
    return Settings()
