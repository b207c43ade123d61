from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # sqlite:///... или postgresql://..., драйвер подставляется в app.core.db
    DATABASE_URL: str = "sqlite:///movies.db"
    SQL_ECHO: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    # idempotent: повторный create-user отдаёт существующий id
    # strict: повторный create-user -> 400
    USER_CREATE_POLICY: Literal["idempotent", "strict"] = "idempotent"
    CORS_ORIGINS: list[str] = ["*"]
    LEADERBOARD_SIZE: int = 10

    class Config:
        env_file = ".env"


settings = Settings()
