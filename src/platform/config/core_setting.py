from pathlib import Path
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.platform.constant.path import CACHE_DIR


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Gate Validator'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS (comma-separated in the environment)
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        'http://localhost',
        'http://localhost:3000',
    ]

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    # Ticket Store (PostgreSQL)
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'ticketing'
    POSTGRES_PORT: int = 5432

    DB_POOL_SIZE: int = 5
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 10  # Wait for a free connection (seconds)
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Validator device
    VALIDATOR_ID: str = 'mobile_validator'
    OPERATING_TIMEZONE: str = 'America/Sao_Paulo'

    # Local cache
    CACHE_DIR: Path = CACHE_DIR
    CACHE_FILE_NAME: str = 'validator_offline_tickets.json'

    # Sync engine
    SYNC_INTERVAL_SECONDS: float = 120.0
    SYNC_REQUEST_TIMEOUT_SECONDS: float = 15.0

    # Write-through at validation time
    WRITE_THROUGH_TIMEOUT_SECONDS: float = 3.0
    WRITE_THROUGH_BACKOFF_BASE_SECONDS: float = 5.0
    WRITE_THROUGH_BACKOFF_MAX_SECONDS: float = 120.0

    # Connectivity monitor
    # Empty disables probing; reachability then comes from PUT /connectivity only
    CONNECTIVITY_PROBE_URL: str = ''
    CONNECTIVITY_PROBE_TIMEOUT_SECONDS: float = 3.0
    CONNECTIVITY_CHECK_INTERVAL_SECONDS: float = 10.0

    @field_validator('SYNC_INTERVAL_SECONDS', 'CONNECTIVITY_CHECK_INTERVAL_SECONDS')
    @classmethod
    def ensure_positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('Interval must be greater than zero')
        return v


settings = Settings()  # type: ignore
