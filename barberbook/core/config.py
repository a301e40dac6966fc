from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SHOP_NAME: str = "Barber Appointments"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    LEDGER_BASE_URL: str | None = None
    LEDGER_TIMEOUT_SECONDS: float = 10.0

    DEFAULT_SERVICE_DURATION_MINUTES: int = 30


settings = Settings()
