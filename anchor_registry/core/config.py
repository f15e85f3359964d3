from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal

from anchor_registry.models.identity import is_null_identity

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

DEV_ADMIN = "registry-admin"
DEFAULT_SEED_ISSUER_NAME = "TEST-HEI"


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("", "0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be true|false (got {raw!r})")


def _split_list(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _parse_seed_issuers(raw: str) -> tuple[tuple[str, str], ...]:
    """Parse ``identity[:name]`` entries; name defaults to TEST-HEI."""
    issuers: list[tuple[str, str]] = []
    for entry in _split_list(raw):
        identity, _, name = entry.partition(":")
        identity = identity.strip()
        if not identity:
            raise ValueError(f"SEED_ISSUERS entry has no identity (got {entry!r})")
        issuers.append((identity, name.strip() or DEFAULT_SEED_ISSUER_NAME))
    return tuple(issuers)


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    registry_admin: str
    seed_attesters: tuple[str, ...] = field(default_factory=tuple)
    seed_issuers: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8000")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    log_json = _parse_bool("LOG_JSON", _getenv("LOG_JSON", "false"))

    # Prod must name its administrator explicitly; dev/test get a fixed one.
    registry_admin = _getenv("REGISTRY_ADMIN", "")
    if is_null_identity(registry_admin):
        if app_env_raw == "prod":
            raise ValueError("REGISTRY_ADMIN must be set to a non-null identity in prod")
        registry_admin = DEV_ADMIN

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=log_json,
        port=port,
        registry_admin=registry_admin,
        seed_attesters=_split_list(_getenv("SEED_ATTESTERS", "")),
        seed_issuers=_parse_seed_issuers(_getenv("SEED_ISSUERS", "")),
    )


SETTINGS = load_settings()
