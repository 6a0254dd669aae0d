"""Configuration management via .env file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from folio.reader.pagination import CHARS_PER_PAGE

log = logging.getLogger(__name__)


def _xdg_data_home() -> Path:
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


@dataclass
class AppConfig:
    # Paths
    data_dir: Path = field(default_factory=lambda: _xdg_data_home() / "folio")
    config_dir: Path = field(default_factory=lambda: _xdg_config_home() / "folio")
    db_path: Path = field(init=False)
    log_path: Path = field(init=False)

    # Pagination: characters per page. Changing it repaginates every book.
    chars_per_page: int = CHARS_PER_PAGE

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.db_path = self.data_dir / "folio.db"
        self.log_path = self.data_dir / "folio.log"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    if value <= 0:
        log.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Load config from .env file. Searches CWD then config dir."""
    search_paths = [
        env_path,
        Path.cwd() / ".env",
        _xdg_config_home() / "folio" / ".env",
        Path.home() / ".env",
    ]
    for p in search_paths:
        if p and p.exists():
            load_dotenv(p)
            break

    kwargs = {}
    data_dir = os.getenv("FOLIO_DATA_DIR")
    if data_dir:
        kwargs["data_dir"] = Path(data_dir).expanduser()

    return AppConfig(
        chars_per_page=_int_env("FOLIO_CHARS_PER_PAGE", CHARS_PER_PAGE),
        log_level=os.getenv("FOLIO_LOG_LEVEL", "INFO").upper(),
        **kwargs,
    )
