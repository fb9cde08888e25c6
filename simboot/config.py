#!/usr/bin/env python3
# simboot/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) ~/.config/simboot/config.toml
  3) Files in CWD: .env, simboot.ini, simboot.json, simboot.toml
  4) Environment variables prefixed with SIMBOOT_

Validation:
  - XCRUN_PATH / OPEN_PATH / SIMULATOR_APP: non-empty str
  - OPEN_SIMULATOR / COLOR: bool
  - TIMEOUT: None or int >= 1
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - LOG_FILE_PATH: None or normalized path
"""

from dataclasses import dataclass, field
from typing import Any, Mapping
from pathlib import Path
import configparser
import json
import os
import re
import tomllib

from simboot.errors import ConfigError

ENV_PREFIX = "SIMBOOT_"

# ---------- defaults ----------

DEFAULTS: dict[str, Any] = {
    "XCRUN_PATH": "xcrun",
    "OPEN_PATH": "open",
    "SIMULATOR_APP": "Simulator",
    "OPEN_SIMULATOR": True,
    "TIMEOUT": None,                # seconds per external command; None = wait
    "LOG_LEVEL": None,              # 'DEBUG'/'INFO'/'WARNING'/'ERROR'/'CRITICAL'
    "LOG_FILE_PATH": None,
    "COLOR": True,
}


# ---------- data model ----------

@dataclass(frozen=True)
class AppConfig:
    xcrun_path: str
    open_path: str
    simulator_app: str
    open_simulator: bool

    timeout: int | None
    log_level: str | None
    log_file_path: Path | None
    color: bool

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders (stdlib) ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return out

    line_re = re.compile(r"""^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if (v.startswith("'") and v.endswith("'")) or (v.startswith('"') and v.endswith('"')):
            v = v[1:-1]
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser()
    try:
        with path.open(encoding="utf-8") as f:
            cfg.read_file(f)
    except FileNotFoundError:
        return {}
    except configparser.Error as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc
    return data if isinstance(data, dict) else {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'log': {'level': 'debug'}} -> {'LOG_LEVEL': 'debug'}
    A top-level [simboot] table is unwrapped, so both styles work.
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            if not prefix and str(k).lower() == "simboot" and isinstance(v, Mapping):
                flat.update(_flatten_mapping(v))
                continue
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


def _strip_prefix(d: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only SIMBOOT_* keys, without the prefix."""
    return {k[len(ENV_PREFIX):]: v for k, v in d.items()
            if k.upper().startswith(ENV_PREFIX) and len(k) > len(ENV_PREFIX)}


def _find_config_files(cwd: Path) -> list[Path]:
    return [
        Path.home() / ".config" / "simboot" / "config.toml",
        cwd / ".env",
        cwd / "simboot.ini",
        cwd / "simboot.json",
        cwd / "simboot.toml",
    ]


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(val: Any, key: str) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ConfigError(f"{key}: expected boolean, got {val!r}")


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_str(val: Any, key: str) -> str:
    s = _as_opt_str(val)
    if s is None:
        raise ConfigError(f"{key} must not be empty")
    return s.strip()


def _as_opt_int(val: Any, key: str) -> int | None:
    if _as_opt_str(val) is None:
        return None
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    try:
        return int(str(val).strip())
    except ValueError as exc:
        raise ConfigError(f"{key}: expected integer, got {val!r}") from exc


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ConfigError(
            f"LOG_LEVEL must be one of {sorted(allowed)}, got {lv!r}")
    return up


def _as_opt_path(val: Any, base: Path) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    # expand both ~ and env vars
    p = Path(os.path.expandvars(os.path.expanduser(v)))
    return p if p.is_absolute() else (base / p).resolve()


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).upper(): v for k, v in d.items()}


# ---------- merge & load ----------

def _merge_sources(cwd: Path, environ: Mapping[str, str]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    for file in _find_config_files(cwd):
        if file.name == ".env":
            # .env files are shared with other tools; only take our keys
            merged.update(_normalize_keys(_strip_prefix(_load_env_file(file))))
        elif file.suffix == ".ini":
            merged.update(_normalize_keys(_load_ini_file(file)))
        elif file.suffix == ".json":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_json_file(file))))
        elif file.suffix == ".toml":
            merged.update(_normalize_keys(
                _flatten_mapping(_load_toml_file(file))))

    # Environment variables override all
    merged.update(_normalize_keys(_strip_prefix(environ)))
    return merged


# ---------- validation ----------

def _validate_and_build(config: Mapping[str, Any], cwd: Path) -> AppConfig:
    timeout = _as_opt_int(config.get("TIMEOUT", DEFAULTS["TIMEOUT"]), "TIMEOUT")
    if timeout is not None and timeout < 1:
        raise ConfigError("TIMEOUT must be >= 1")

    recognized = set(DEFAULTS.keys())
    extra = {k: v for k, v in config.items() if k not in recognized}

    return AppConfig(
        xcrun_path=_as_str(config.get("XCRUN_PATH", DEFAULTS["XCRUN_PATH"]), "XCRUN_PATH"),
        open_path=_as_str(config.get("OPEN_PATH", DEFAULTS["OPEN_PATH"]), "OPEN_PATH"),
        simulator_app=_as_str(
            config.get("SIMULATOR_APP", DEFAULTS["SIMULATOR_APP"]), "SIMULATOR_APP"),
        open_simulator=_as_bool(
            config.get("OPEN_SIMULATOR", DEFAULTS["OPEN_SIMULATOR"]), "OPEN_SIMULATOR"),
        timeout=timeout,
        log_level=_as_log_level(config.get("LOG_LEVEL", DEFAULTS["LOG_LEVEL"])),
        log_file_path=_as_opt_path(
            config.get("LOG_FILE_PATH", DEFAULTS["LOG_FILE_PATH"]), cwd),
        color=_as_bool(config.get("COLOR", DEFAULTS["COLOR"]), "COLOR"),
        extra=extra,
    )


# ---------- public API ----------

def load_config(
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Load, merge, normalize, and validate configuration.
    No filesystem side-effects; raises ConfigError on invalid values.
    """
    base = (cwd or Path.cwd()).resolve()
    raw = _merge_sources(base, os.environ if environ is None else environ)
    return _validate_and_build(raw, base)
