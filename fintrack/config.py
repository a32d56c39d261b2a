from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Storage backend: "memory", "file" or "sql"
    data_store: str = "memory"

    # File-backed JSON store
    data_file: str = "data/store.json"

    # Database
    database_url: str = "sqlite+aiosqlite:///data/fintrack.db"

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
