"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


logger = logging.getLogger("uvicorn.error")

_DATA_DIR_ENV = "PELADA_DATA_DIR"
_DB_PATH_ENV = "PELADA_DB_PATH"
_UPLOADS_DIR_ENV = "PELADA_UPLOADS_DIR"
_ADMIN_PASSWORD_ENV = "PELADA_ADMIN_PASSWORD"
_SECRET_KEY_ENV = "PELADA_SECRET_KEY"
_TOKEN_TTL_ENV = "PELADA_TOKEN_TTL"
_COOKIE_SECURE_ENV = "PELADA_COOKIE_SECURE"
_MONTHLY_FEE_BASE_ENV = "PELADA_MONTHLY_FEE_BASE"

_TOKEN_TTL_DEFAULT = 12 * 60 * 60
_MONTHLY_FEE_BASE_DEFAULT = 540.0


def _env_float(env: Mapping[str, str], name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if value != value:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(env: Mapping[str, str], name: str, default: int, *, min_value: int | None = None) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    uploads_dir: Path
    admin_password: str
    secret_key: str
    db_path: Optional[Path] = None
    token_ttl: int = _TOKEN_TTL_DEFAULT
    cookie_secure: bool = False
    monthly_fee_base: float = _MONTHLY_FEE_BASE_DEFAULT
    cookie_name: str = "pelada_session"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        db_raw = env.get(_DB_PATH_ENV)
        return cls(
            data_dir=Path(env.get(_DATA_DIR_ENV, "data")),
            uploads_dir=Path(env.get(_UPLOADS_DIR_ENV, "uploads")),
            admin_password=env.get(_ADMIN_PASSWORD_ENV, "admin"),
            secret_key=env.get(_SECRET_KEY_ENV, "change-me"),
            db_path=Path(db_raw) if db_raw else None,
            token_ttl=_env_int(env, _TOKEN_TTL_ENV, _TOKEN_TTL_DEFAULT, min_value=1),
            cookie_secure=_env_bool(env, _COOKIE_SECURE_ENV, False),
            monthly_fee_base=_env_float(env, _MONTHLY_FEE_BASE_ENV, _MONTHLY_FEE_BASE_DEFAULT, clamp_min=0.0),
        )

    @classmethod
    def for_directory(cls, root: Path | str, **overrides) -> "Settings":
        """Settings rooted at a single directory; handy for tests and scripts."""

        root = Path(root)
        values = {
            "data_dir": root / "data",
            "uploads_dir": root / "uploads",
            "admin_password": "admin",
            "secret_key": "test-secret",
        }
        values.update(overrides)
        return cls(**values)
