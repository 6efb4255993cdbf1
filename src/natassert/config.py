"""Runtime settings for natural-assertion rendering.

Settings are resolved from three layers, lowest precedence first:

1. the defaults on ``Settings``;
2. a YAML file (``natassert.yml`` in the working directory, or an
   explicit path), whose keys may sit under a top-level ``natassert:``
   mapping or at the top level;
3. ``NATASSERT_*`` environment variables.

Usage
-----
::

    from natassert.config import configure, get_settings

    configure(mode="always")
    settings = get_settings()
"""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from natassert.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "natassert.yml"

MODES: tuple[str, ...] = ("on", "off", "always")

_ENV_KEYS: dict[str, str] = {
    "NATASSERT_MODE": "mode",
    "NATASSERT_WRAP_WIDTH": "wrap_width",
    "NATASSERT_MAX_INSPECT_SIZE": "max_inspect_size",
    "NATASSERT_TRACE_INDENT": "trace_indent",
}


@dataclass(frozen=True)
class Settings:
    """Rendering options for natural assertions.

    Parameters
    ----------
    mode:
        ``"on"`` explains failing natural assertions, ``"always"`` also
        explains blocks that use a framework assertion, ``"off"`` reports
        a plain failure line only.
    wrap_width:
        Values longer than this are printed on a line of their own in the
        trace.
    max_inspect_size:
        Rendered values are truncated to this many characters.
    trace_indent:
        Number of spaces before each trace line.
    """

    mode: str = "on"
    wrap_width: int = 20
    max_inspect_size: int = 2000
    trace_indent: int = 2

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ConfigError(
                f"Invalid mode {self.mode!r}; expected one of {', '.join(MODES)}"
            )
        for name in ("wrap_width", "max_inspect_size", "trace_indent"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")

    @property
    def enabled(self) -> bool:
        return self.mode != "off"


def _coerce(key: str, raw: Any) -> Any:
    """Convert a raw config value to the type of the ``Settings`` field."""
    if key == "mode":
        if isinstance(raw, bool):
            # YAML reads bare on/off as booleans
            return "on" if raw else "off"
        return str(raw).strip().lower()
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None


def _from_mapping(base: Settings, data: Mapping[str, Any], source: str) -> Settings:
    known = {f.name for f in fields(Settings)}
    overrides: dict[str, Any] = {}
    for key, raw in data.items():
        if key not in known:
            raise ConfigError(f"Unknown setting {key!r} in {source}")
        overrides[key] = _coerce(key, raw)
    if overrides:
        logger.debug("Applying settings from %s: %r", source, overrides)
    return replace(base, **overrides)


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Read the natassert section of a YAML config file.

    Raises
    ------
    ConfigError
        If the file is not valid YAML or its natassert section is not a
        mapping.
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    section = data.get("natassert", data)
    if not isinstance(section, dict):
        raise ConfigError(f"The natassert section of {path} must be a mapping")
    return section


def load_settings(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve ``Settings`` from defaults, a YAML file and the environment.

    Parameters
    ----------
    path:
        Config file to read.  When ``None``, ``natassert.yml`` in the
        current directory is used if it exists.
    env:
        Environment mapping; defaults to ``os.environ``.
    """
    settings = Settings()

    if path is None:
        candidate = Path(DEFAULT_CONFIG_FILE)
        if candidate.is_file():
            path = candidate
    elif not Path(path).is_file():
        raise ConfigError(f"Config file not found: {path}")
    if path is not None:
        settings = _from_mapping(settings, load_yaml(path), str(path))

    env = os.environ if env is None else env
    env_values = {field: env[var] for var, field in _ENV_KEYS.items() if var in env}
    return _from_mapping(settings, env_values, "environment")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def configure(**overrides: Any) -> Settings:
    """Override individual process-wide settings and return the result."""
    global _settings
    _settings = _from_mapping(get_settings(), overrides, "configure()")
    return _settings


def reset_settings() -> None:
    """Forget the process-wide settings so the next access reloads them."""
    global _settings
    _settings = None
