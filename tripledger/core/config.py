from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_TITLE: str = "Trip Ledger"
    DATABASE_URL: str = "sqlite+aiosqlite:///./tripledger.db"
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"


settings = Settings()
