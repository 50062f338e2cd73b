""" Runtime settings, read from the environment (and a .env file if present). """

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

DEFAULT_STORAGE_DIR = Path.home() / ".mediaflow"


@dataclass
class Settings:
    storage_dir: Path = DEFAULT_STORAGE_DIR
    paste_offset: Tuple[float, float] = (50.0, 50.0)
    duplicate_offset: Tuple[float, float] = (100.0, 100.0)
    log_level: str = "INFO"


def _parse_offset(raw: Optional[str], default: Tuple[float, float]) -> Tuple[float, float]:
    """ "30" -> (30, 30), "30,40" -> (30, 40) """
    if not raw:
        return default
    parts = [p.strip() for p in raw.split(",")]
    try:
        if len(parts) == 1:
            value = float(parts[0])
            return value, value
        if len(parts) == 2:
            return float(parts[0]), float(parts[1])
    except ValueError:
        pass
    raise ValueError(f"Invalid offset: {raw!r} (expected 'N' or 'X,Y')")


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> Settings:
    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    defaults = Settings()
    storage_dir = env.get("MEDIAFLOW_STORAGE_DIR")
    return Settings(
        storage_dir=Path(storage_dir).expanduser() if storage_dir else defaults.storage_dir,
        paste_offset=_parse_offset(env.get("MEDIAFLOW_PASTE_OFFSET"), defaults.paste_offset),
        duplicate_offset=_parse_offset(env.get("MEDIAFLOW_DUPLICATE_OFFSET"), defaults.duplicate_offset),
        log_level=(env.get("MEDIAFLOW_LOG_LEVEL") or defaults.log_level).upper(),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
