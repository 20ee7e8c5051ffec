from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="", case_sensitive=False)

    REDIS_URL: str = Field(default="redis://localhost:6379/0")
    KEY_PREFIX: str = Field(default="brewbook", min_length=1)

    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=True)

    # Optimistic transactions: how many times a WATCH conflict is re-run
    TX_RETRY_MAX: int = Field(default=25, ge=1)
    TX_RETRY_WAIT_MAX: float = Field(default=0.05, ge=0.0)

    # Kinds registered at startup when missing (comma-separated)
    DEFAULT_INGREDIENT_KINDS: str | None = Field(default="COFFEE,MILK,SUGAR,CHOCOLATE")

    def default_kinds(self) -> list[str]:
        if not self.DEFAULT_INGREDIENT_KINDS:
            return []
        return [k.strip() for k in self.DEFAULT_INGREDIENT_KINDS.split(",") if k.strip()]


settings = Settings()
