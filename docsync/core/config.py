from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./docsync.db"
    database_echo: bool = False

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15

    # Клиентская синхронизация документов
    save_debounce_seconds: float = 1.0
    store_timeout_seconds: float = 10.0
    recent_documents_limit: int = 6
    toggle_failure_policy: str = "revert"  # revert | keep

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
