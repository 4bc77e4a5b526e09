"""Runtime configuration for the storefront engine.

Settings are read from environment variables once per call to
``load_settings()``. An empty ``STOREFRONT_API_URL`` keeps every external
service on its in-memory fake, which is what development and tests use.
"""

import os
from dataclasses import dataclass
from pathlib import Path

ENVIRONMENTS = ("development", "test", "staging", "production")
STORAGE_BACKENDS = ("memory", "file")


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    api_url: str = ""
    http_timeout: float = 10.0
    storage: str = "memory"
    storage_dir: Path = Path(".storefront")
    key_prefix: str = "storefront"
    currency: str = "GHS"

    @property
    def uses_remote_services(self) -> bool:
        return bool(self.api_url)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build settings from the environment."""
    env = (os.getenv("STOREFRONT_ENV") or os.getenv("ENVIRONMENT") or "development").lower()
    if env not in ENVIRONMENTS:
        raise ValueError(f"Unknown STOREFRONT_ENV {env!r}; expected one of {', '.join(ENVIRONMENTS)}")

    storage = (os.getenv("STOREFRONT_STORAGE") or "memory").lower()
    if storage not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown STOREFRONT_STORAGE {storage!r}; expected one of {', '.join(STORAGE_BACKENDS)}")

    return Settings(
        env=env,
        api_url=(os.getenv("STOREFRONT_API_URL") or "").rstrip("/"),
        http_timeout=_env_float("STOREFRONT_HTTP_TIMEOUT", 10.0),
        storage=storage,
        storage_dir=Path(os.getenv("STOREFRONT_STORAGE_DIR") or ".storefront"),
        key_prefix=os.getenv("STOREFRONT_KEY_PREFIX") or "storefront",
        currency=os.getenv("STOREFRONT_CURRENCY") or "GHS",
    )
