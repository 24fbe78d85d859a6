"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeInt = Annotated[int, Field(ge=0)]
PositiveInt = Annotated[int, Field(gt=0)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    account_storage_path: NonEmptyStr = Field(
        default="data/accountstorage.txt",
        validation_alias="ACCOUNT_STORAGE_PATH",
    )
    password_hash_iterations: PositiveInt = Field(
        default=120_000,
        validation_alias="PASSWORD_HASH_ITERATIONS",
    )
    default_loan_limit: NonNegativeInt = Field(
        default=100,
        validation_alias="DEFAULT_LOAN_LIMIT",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: NonEmptyStr | None = Field(default=None, validation_alias="LOG_FILE")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()
