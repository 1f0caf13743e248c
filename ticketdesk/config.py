import logging
import os
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional

from dotenv import load_dotenv

DEFAULT_SUPPORT_ROLE_NAME = "Support"
DEFAULT_DISCOUNT_CODES = "ILLEGAL10"
DEFAULT_CLOSE_DELAY = 5.0
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    token: str
    guild_id: int
    support_role_name: str = DEFAULT_SUPPORT_ROLE_NAME
    discount_codes: FrozenSet[str] = frozenset({DEFAULT_DISCOUNT_CODES})
    close_delay: float = DEFAULT_CLOSE_DELAY
    staff_log_channel_id: Optional[int] = None
    log_level: str = DEFAULT_LOG_LEVEL


def parse_codes(value: str) -> FrozenSet[str]:
    return frozenset(part.strip().upper() for part in value.split(",") if part.strip())


def _parse_int(environ: Mapping[str, str], key: str, required: bool) -> Optional[int]:
    raw = (environ.get(key) or "").strip()
    if not raw:
        if required:
            raise ConfigError(f"Missing {key} environment variable")
        return None
    if not raw.isdigit():
        raise ConfigError(f"{key} must be a numeric Discord id, got {raw!r}")
    return int(raw)


def _parse_delay(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_CLOSE_DELAY
    try:
        delay = float(raw)
    except ValueError:
        raise ConfigError(f"TICKET_CLOSE_DELAY must be a number of seconds, got {raw!r}") from None
    if delay < 0:
        raise ConfigError("TICKET_CLOSE_DELAY cannot be negative.")
    return delay


def _parse_log_level(raw: Optional[str]) -> str:
    level = (raw or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from the environment.
    A local .env file is merged into os.environ first when no mapping is given.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    token = (environ.get("BOT_TOKEN") or "").strip()
    if not token:
        raise ConfigError("Missing BOT_TOKEN environment variable")

    codes = parse_codes(environ.get("DISCOUNT_CODES", DEFAULT_DISCOUNT_CODES))
    support_role_name = environ.get("SUPPORT_ROLE_NAME") or DEFAULT_SUPPORT_ROLE_NAME

    return Settings(
        token=token,
        guild_id=_parse_int(environ, "GUILD_ID", required=True),
        support_role_name=support_role_name,
        discount_codes=codes,
        close_delay=_parse_delay(environ.get("TICKET_CLOSE_DELAY")),
        staff_log_channel_id=_parse_int(environ, "STAFF_LOG_CHANNEL_ID", required=False),
        log_level=_parse_log_level(environ.get("LOG_LEVEL")),
    )
