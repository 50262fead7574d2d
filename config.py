# config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

LOGGER_NAME = "timesheet"
DEFAULT_DB_URL = "sqlite://"  # in-memory, discarded with the session


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DB_URL
    timezone: str = "UTC"
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    seed_fixtures: bool = True
    anchor: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        tz = env.get("TIMESHEET_TZ", "UTC")
        try:
            ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone in TIMESHEET_TZ: {tz!r}")
        log_file = env.get("TIMESHEET_LOG_FILE")
        return cls(
            database_url=env.get("TIMESHEET_DATABASE_URL", DEFAULT_DB_URL),
            timezone=tz,
            log_level=env.get("TIMESHEET_LOG_LEVEL", "INFO").upper(),
            log_file=Path(log_file) if log_file else None,
            seed_fixtures=env.get("TIMESHEET_SEED", "1").strip().lower() not in ("0", "false", "no"),
            anchor=env.get("TIMESHEET_ANCHOR") or None,
        )


def configure_logging(level: str | int = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """Stream handler plus optional file handler. Safe to call on every rerun."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(ch)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(fh)

    logging.captureWarnings(True)
    return logger
