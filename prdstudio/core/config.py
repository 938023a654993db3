from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./prdstudio.db"
    sql_echo: bool = False

    log_level: str = "INFO"
    log_format: str = "readable"  # readable | json

    cors_origins: List[str] = ["*"]

    # Демо-данные как в исходном приложении
    seed_demo_data: bool = True
    default_project_id: int = 1

    # Настройки клиента таблицы документов
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 10.0

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
