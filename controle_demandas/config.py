# Configuração e logging
import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações lidas de variáveis de ambiente (prefixo CONTROLE_DEMANDAS_)."""

    model_config = SettingsConfigDict(env_prefix="CONTROLE_DEMANDAS_")

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s - %(levelname)s - %(message)s")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configura o logging raiz da aplicação hospedeira."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format=settings.log_format)
    logging.getLogger(__name__).info(f"Logging configurado em nível {settings.log_level}.")
