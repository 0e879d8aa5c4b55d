from pathlib import Path
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    API_KEY: str = ""
    TOKEN_SECRET: str = "default_secret"
    TOKEN_TTL_SECONDS: int = 300
    REQUIRE_TOKEN: bool = False             # gate /api/chat/* behind bearer tokens
    ENVIRONMENT: str = "production"         # "development" accepts any API key
    ALLOWED_ORIGINS: list[str] = []         # empty allows every origin
    RESPONSE_DELAY_MIN_MS: int = 500
    RESPONSE_DELAY_MAX_MS: int = 1500
    CATALOG_PATH: str | None = None         # JSON list of products, built-in catalog when unset
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()
