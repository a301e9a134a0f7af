from functools import lru_cache
from typing import Annotated
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[2]
BACKEND_ENV_FILE = BACKEND_DIR / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "SubCover API"
    api_prefix: str = "/api"
    environment: str = "development"
    log_level: str = "INFO"

    database_url: str = f"sqlite:///{BACKEND_DIR / 'subcover.db'}"

    static_dir: str | None = None
    max_teacher_id_length: int = 50

    # Only enforced in production; every origin is allowed otherwise.
    cors_origins: Annotated[list[str], NoDecode] = []

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def effective_cors_origins(self) -> list[str]:
        if self.is_production and self.cors_origins:
            return list(self.cors_origins)
        return ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
