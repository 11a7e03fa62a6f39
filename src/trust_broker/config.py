"""
trust_broker/config.py — Configurações centralizadas via .env
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "trust-broker"
    APP_ENV: str = "development"
    APP_PORT: int = 3000

    # Segredo do processo, entra na derivação de toda base_key.
    # Obrigatório, sem default. Gere com: openssl rand -hex 32
    SECRET_SALT: str

    DATABASE_URL: str = "sqlite+aiosqlite:///./trust_broker.db"
    DB_ECHO: bool = False

    # Validade fixa dos api_keys emitidos
    TOKEN_TTL_HOURS: int = 24

    @field_validator("SECRET_SALT")
    @classmethod
    def secret_salt_must_be_strong(cls, v: str) -> str:
        if not v or v in ("troque-em-producao", "changeme", "secret"):
            raise ValueError(
                "SECRET_SALT inválido. Gere um com: openssl rand -hex 32"
            )
        if len(v) < 16:
            raise ValueError(
                "SECRET_SALT muito curto (mínimo 16 caracteres). "
                "Gere um com: openssl rand -hex 32"
            )
        return v

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
