# finplatform/config.py
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Request


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing."""


def _truthy(value: Optional[str]) -> bool:
    v = value or ""
    return v not in ("", "0", "false", "False", "no", "No")


def _split_origins(raw: Optional[str]) -> List[str]:
    parts = [o.strip() for o in (raw or "*").split(",")]
    return [o for o in parts if o] or ["*"]


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret: str
    bcrypt_rounds: int = 10
    strict_transaction_transitions: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls, env=None) -> "Settings":
        """
        Build settings from the environment (after loading a local .env).
        Missing store credentials or signing secret fail immediately.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        database_url = (env.get("DATABASE_URL") or "").strip()
        jwt_secret = (env.get("JWT_SECRET") or "").strip()

        missing = [name for name, v in (("DATABASE_URL", database_url), ("JWT_SECRET", jwt_secret)) if not v]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        try:
            rounds = int(env.get("BCRYPT_ROUNDS", "10"))
            port = int(env.get("PORT", "3000"))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric configuration: {e}") from e

        return cls(
            database_url=database_url,
            jwt_secret=jwt_secret,
            bcrypt_rounds=rounds,
            strict_transaction_transitions=_truthy(env.get("STRICT_TRANSACTION_TRANSITIONS")),
            cors_origins=_split_origins(env.get("CORS_ORIGINS")),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            host=env.get("HOST", "0.0.0.0"),
            port=port,
        )


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""
    return request.app.state.settings
