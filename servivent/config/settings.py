from functools import lru_cache
from typing import List, Optional

from fastapi import Request
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App Info
    app_name: str = "ServiVENT API"
    version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DB_CONNECTION_STRING", "DATABASE_URL", "database_url"),
        description="Cadena de conexión a la base de datos transaccional"
    )
    db_pool_size: int = 3

    # CORS
    allowed_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Compras: acreditar inventario al crear la compra (además de al recibirla)
    credit_inventory_on_purchase_create: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Settings dependency: la configuración con la que se creó la app"""
    return request.app.state.settings
