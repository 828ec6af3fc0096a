from __future__ import annotations

"""
Console settings.

Settings are resolved in three layers, later layers winning:

1. Dataclass defaults (a local API on port 3000 under `/api`)
2. `config/settings.yaml` (or an explicit path), if present
3. `RICEMILL_*` environment variables

The resolved `Settings` object is immutable and is passed explicitly to the
HTTP client and the CLI rather than read from module globals.
"""

from dataclasses import dataclass, fields, replace
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .io_paths import DEFAULT_SETTINGS_FILE

logger = logging.getLogger(__name__)

ENV_PREFIX = "RICEMILL_"

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def normalize_prefix(prefix: str) -> str:
    """Ensure the API prefix starts with a single slash and has no trailing one."""
    p = (prefix or "").strip()
    if not p or p == "/":
        return ""
    if not p.startswith("/"):
        p = f"/{p}"
    return p.rstrip("/")


@dataclass(frozen=True)
class Settings:
    api_base_url: str = "http://localhost:3000"
    api_prefix: str = "/api"
    api_token: Optional[str] = None
    # None keeps the transport default (no explicit deadline)
    request_timeout: Optional[float] = None
    crop_year_page_limit: int = 50
    debug: bool = False

    def api_url(self, path: str) -> str:
        """Build an absolute URL for an API path such as `/admin/crop-years`."""
        p = path if path.startswith("/") else f"/{path}"
        return f"{self.api_base_url.rstrip('/')}{normalize_prefix(self.api_prefix)}{p}"


def _coerce(name: str, raw: Any) -> Any:
    if name in ("request_timeout",):
        if raw is None or str(raw).strip() == "":
            return None
        return float(raw)
    if name == "crop_year_page_limit":
        return int(raw)
    if name == "debug":
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in _TRUE_STRINGS
    if name == "api_token":
        return str(raw) if raw else None
    return str(raw)


def _from_mapping(base: Settings, data: Mapping[str, Any], source: str) -> Settings:
    known = {f.name for f in fields(Settings)}
    updates: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown setting '%s' from %s", key, source)
            continue
        try:
            updates[key] = _coerce(key, value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for setting '{key}' in {source}: {value!r}") from exc
    return replace(base, **updates)


def load_settings(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Resolve settings from defaults, a YAML file and the environment.

    An explicit `path` that does not exist is an error; the default file is
    optional.
    """
    settings = Settings()

    settings_file = Path(path) if path is not None else DEFAULT_SETTINGS_FILE
    if settings_file.exists():
        with settings_file.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {settings_file} must contain a mapping at the top level")
        settings = _from_mapping(settings, data, str(settings_file))
        logger.debug("Loaded settings from %s", settings_file)
    elif path is not None:
        raise FileNotFoundError(f"Settings file not found: {settings_file}")

    env = os.environ if environ is None else environ
    overrides = {}
    for f in fields(Settings):
        env_key = f"{ENV_PREFIX}{f.name.upper()}"
        if env_key in env:
            overrides[f.name] = env[env_key]
    if overrides:
        settings = _from_mapping(settings, overrides, "environment")

    return replace(settings, api_prefix=normalize_prefix(settings.api_prefix))


__all__ = ["Settings", "load_settings", "normalize_prefix"]
