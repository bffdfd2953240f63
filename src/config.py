"""Settings resolved from ADO_* environment variables and an optional .env.

Priority: real environment variable > .env in the working directory >
default. Invalid values fall back to defaults rather than failing.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

ENV_PREFIX = "ADO"
DEFAULT_DIR_NAME = ".ado"
DEFAULT_LOG_LEVEL = "INFO"
COLOR_KEYS = ("PRIMARY", "WONTDO", "TODO", "DONE")


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _read_env_file(path: Path) -> Dict[str, str]:
    """Parse KEY=VALUE lines from a .env file, keeping only ADO_* keys."""
    values: Dict[str, str] = {}
    if not path.is_file():
        return values
    try:
        text = path.read_text(encoding='utf-8')
    except OSError:
        return values
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        if k.startswith(ENV_PREFIX + '_'):
            values[k] = v.strip().strip('"').strip("'")
    return values


def _valid_hex(value: str) -> Optional[str]:
    h = value.strip().lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h
    return None


def _resolve_path(raw: str, cwd: Path) -> Path:
    candidate = Path(raw).expanduser()
    return candidate if candidate.is_absolute() else cwd / candidate


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: int = logging.INFO
    log_file: Optional[Path] = None
    colors: Dict[str, str] = field(default_factory=dict)


def get_settings(cwd: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    cwd = Path.cwd() if cwd is None else Path(cwd)
    env: Dict[str, str] = _read_env_file(cwd / '.env')
    env.update({k: v for k, v in (os.environ if environ is None else environ).items()
                if k.startswith(ENV_PREFIX + '_')})

    raw_dir = env.get(_k('DIR'), '').strip() or DEFAULT_DIR_NAME
    data_dir = _resolve_path(raw_dir, cwd)

    level_name = env.get(_k('LOG_LEVEL'), DEFAULT_LOG_LEVEL).strip().upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    raw_log = env.get(_k('LOG_FILE'), '').strip()
    log_file = _resolve_path(raw_log, cwd) if raw_log else None

    colors: Dict[str, str] = {}
    for name in COLOR_KEYS:
        raw = env.get(_k(name))
        if raw:
            hex_code = _valid_hex(raw)
            if hex_code:
                colors[name] = hex_code

    return Settings(data_dir=data_dir, log_level=log_level, log_file=log_file, colors=colors)
