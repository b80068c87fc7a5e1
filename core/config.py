from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional


SHEET_URL_ENV = "GOOGLE_SHEET_CSV_URL"
FETCH_TIMEOUT_ENV = "IDP_FETCH_TIMEOUT"
CORS_ORIGINS_ENV = "IDP_CORS_ORIGINS"

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class ConfigError(RuntimeError):
    """Raised when a required setting (the sheet URL) is missing."""


@dataclass(frozen=True)
class Settings:
    sheet_csv_url: str = ""
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    def require_sheet_url(self) -> str:
        if not self.sheet_csv_url:
            raise ConfigError(f"Server configuration error: missing sheet URL ({SHEET_URL_ENV} is not set)")
        return self.sheet_csv_url


def _as_timeout(value: Optional[str]) -> float:
    if not value:
        return DEFAULT_FETCH_TIMEOUT
    try:
        timeout = float(value)
    except Exception:
        return DEFAULT_FETCH_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_FETCH_TIMEOUT


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    origins = [o.strip() for o in (env.get(CORS_ORIGINS_ENV) or "").split(",") if o.strip()]
    return Settings(
        sheet_csv_url=(env.get(SHEET_URL_ENV) or "").strip(),
        fetch_timeout=_as_timeout(env.get(FETCH_TIMEOUT_ENV)),
        cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
    )
