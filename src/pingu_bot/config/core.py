import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

ENVIRONMENTS = ("development", "production")
LOG_LEVELS = ("error", "warn", "info", "debug")

_DEFAULT_DATABASE_PATH = Path.cwd() / "data" / "pingu.db"
_DEFAULT_API_BASE = "https://discord.com/api/v10"


def _optional_float(raw) -> float | None:
    if raw is None or str(raw).strip() == "":
        return None
    return float(raw)


class Core:
    def __init__(self, config: dict | None = None) -> None:
        cfg = config or {}
        discord_cfg = cfg.get("discord", {})

        token_env = str(discord_cfg.get("token_env", "DISCORD_TOKEN"))
        client_id_env = str(discord_cfg.get("client_id_env", "DISCORD_CLIENT_ID"))

        self.DISCORD_TOKEN: str | None = os.getenv(token_env)
        self.DISCORD_CLIENT_ID: str | None = str(
            discord_cfg.get("client_id") or os.getenv(client_id_env, "")
        ) or None
        self.API_BASE: str = str(
            discord_cfg.get("api_base", os.getenv("DISCORD_API_BASE", _DEFAULT_API_BASE))
        ).rstrip("/")

        self.DATABASE_PATH: str = str(
            cfg.get("database_path", os.getenv("DATABASE_PATH", str(_DEFAULT_DATABASE_PATH)))
        )
        self.UNSPLASH_ACCESS_KEY: str = str(
            cfg.get("unsplash_access_key", os.getenv("UNSPLASH_ACCESS_KEY", ""))
        )
        self.ENVIRONMENT: str = str(
            cfg.get("environment")
            or os.getenv("PINGU_ENV")
            or os.getenv("NODE_ENV")
            or "development"
        ).lower()
        self.LOG_LEVEL: str = str(cfg.get("log_level", os.getenv("LOG_LEVEL", "info"))).lower()
        self.HANDLER_TIMEOUT: float | None = _optional_float(
            cfg.get("handler_timeout", os.getenv("HANDLER_TIMEOUT"))
        )

        required = [
            ("DISCORD_TOKEN", self.DISCORD_TOKEN),
            ("DISCORD_CLIENT_ID", self.DISCORD_CLIENT_ID),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")

        # NODE_ENV is shared with other tooling and may carry tags like "test".
        if self.ENVIRONMENT not in ENVIRONMENTS:
            logger.warning(
                "Unrecognised environment %r; treating it as non-production.", self.ENVIRONMENT
            )
        if self.LOG_LEVEL not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level {self.LOG_LEVEL!r}; expected one of {', '.join(LOG_LEVELS)}"
            )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"
