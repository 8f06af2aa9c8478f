# teamdex/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

ENV_PREFIX = "TEAMDEX_"


def _flag(raw: str | None, default: bool = False) -> bool:
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _number(raw: str | None, cast, default):
    """Parse a numeric env value; blank or unparsable values keep the default."""
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    """
    Runtime knobs for the host layer. The pure engine never reads these.
    Defaults match the public PokeAPI; every field can be overridden via TEAMDEX_* env vars.
    """
    api_base: str = "https://pokeapi.co/api/v2"
    data_dir: Path = Path("data")
    timeout: float = 10.0
    retries: int = 3
    backoff: float = 0.3
    retry_statuses: tuple[int, ...] = field(default=(429, 500, 502, 503, 504))
    max_workers: int = 8
    offline: bool = False
    verbose: bool = False

    @property
    def log_file(self) -> Path:
        return self.data_dir / "app.log"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name):
            return env.get(ENV_PREFIX + name)

        base = cls()
        return cls(
            api_base=(get("API_BASE") or base.api_base).rstrip("/"),
            data_dir=Path(get("DATA_DIR") or base.data_dir),
            timeout=_number(get("TIMEOUT"), float, base.timeout),
            retries=_number(get("RETRIES"), int, base.retries),
            backoff=base.backoff,
            retry_statuses=base.retry_statuses,
            max_workers=max(1, _number(get("MAX_WORKERS"), int, base.max_workers)),
            offline=_flag(get("OFFLINE")),
            verbose=_flag(get("VERBOSE")),
        )


settings = Settings.from_env()
