# wrkr/core/config.py
from typing import Optional
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

from wrkr import __version__

# .env is looked up from the working directory the process starts in
ENV_FILE = Path.cwd() / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(ENV_FILE), env_prefix="WRKR_", extra="ignore")

    # Application
    PROJECT_NAME: str = "Wrkr"
    VERSION: str = __version__
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Observation snapshot
    STATE_PATH: str = ".wrkr/last-scan.json"

    # Policy catalog overrides
    POLICY_PATH: Optional[str] = None
    REPO_ROOT: Optional[str] = None

    # Planning defaults
    DEFAULT_TOP: int = 3
    DEFAULT_PROFILE: str = "standard"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper() or "INFO"
        return v

    @field_validator("POLICY_PATH", "REPO_ROOT", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


settings = Settings()
