"""Application configuration using pydantic settings with structured sections."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

TURNSTILE_PLACEHOLDER_SECRET = "your-turnstile-secret-key"
RECAPTCHA_PLACEHOLDER_SECRET = "your-recaptcha-secret-key"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = "sqlite+aiosqlite:///./faucet.db"
    echo: bool = False


class SolanaSettings(BaseModel):
    rpc_url: str = "https://api.testnet.solana.com"
    wallet_path: Path = Path("wallet.json")
    amount_per_request: float = Field(default=1.0, gt=0)
    network: Literal["mainnet-beta", "testnet", "devnet", "localnet"] = "testnet"
    transaction_timeout: float = Field(default=30, gt=0)


class SecuritySettings(BaseModel):
    verification_provider: Literal["turnstile", "recaptcha"] = "turnstile"
    turnstile_secret_key: str = TURNSTILE_PLACEHOLDER_SECRET
    recaptcha_secret_key: str = RECAPTCHA_PLACEHOLDER_SECRET
    verification_timeout: float = Field(default=10, gt=0)
    claim_cooldown: int = Field(default=86400, ge=0)


class CorsSettings(BaseModel):
    allowed_origins: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="FAUCET_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    debug: bool = False
    project_name: str = "Solana Faucet"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    solana: SolanaSettings = SolanaSettings()
    security: SecuritySettings = SecuritySettings()
    cors: CorsSettings = CorsSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def amount_per_request(self) -> float:
        return self.solana.amount_per_request

    @property
    def claim_cooldown(self) -> int:
        return self.security.claim_cooldown


@lru_cache()
def get_settings() -> Settings:
    return Settings()
