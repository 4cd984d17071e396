from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PORT: int = 3000
    LOG_LEVEL: str = "info"

    # Unset disables the corresponding sink; submissions still go to the other one.
    GOOGLE_CHAT_WEBHOOK_URL: str | None = None
    APPS_SCRIPT_WEB_APP_URL: str | None = None

    HTTP_TIMEOUT: float = 10.0
    CORS_ALLOW_ORIGINS: list[str] = ["*"]


settings = Settings()
