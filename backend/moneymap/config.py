from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    DEFAULT_HORIZON_YEARS: float = 10
    HORIZON_OPTIONS: list[int] = [5, 10, 20, 30, 40, 50]
    MAX_HORIZON_YEARS: float = 100
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
