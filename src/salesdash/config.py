from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys


DEFAULT_API_URL = "http://localhost:3000"


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    token_path: Path
    logs_dir: Path
    reports_dir: Path


@dataclass(frozen=True)
class ApiSettings:
    api_url: str = DEFAULT_API_URL
    env: str = "development"
    timeout: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        return self.env == "development"


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "SalesDash") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"
    reports = base / "reports"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)
    reports.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, token_path=base / "session.json", logs_dir=logs, reports_dir=reports)


def load_api_settings(environ: dict[str, str] | None = None) -> ApiSettings:
    env = os.environ if environ is None else environ
    api_url = (env.get("SALESDASH_API_URL") or DEFAULT_API_URL).strip().rstrip("/")
    raw_timeout = env.get("SALESDASH_TIMEOUT", "10")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        timeout = 10.0
    return ApiSettings(
        api_url=api_url or DEFAULT_API_URL,
        env=(env.get("SALESDASH_ENV") or "development").strip().lower(),
        timeout=timeout if timeout > 0 else 10.0,
    )
