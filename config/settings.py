from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Storage: "memory" (single process), "file" (local JSON) or "redis" (shared)
    STORAGE_BACKEND: str = "file"
    STORAGE_KEY: str = "pm.accountStore.v1"
    STORAGE_DIR: str = ".pm_state"

    # Redis (only read when STORAGE_BACKEND=redis)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Seed account
    SEED_CASH_USD: float = 500.0
    SEED_HISTORY_LIMIT: int = 200

    # Retention for trades / transactions appended by the engine
    HISTORY_LIMIT: int = 300

    # App
    APP_NAME: str = "Prediction Market"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False


settings = Settings()
