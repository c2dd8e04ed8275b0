"""Config loader for wsltransfer (~/.config/wsltransfer/config.toml)."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path

from ..theme import DEFAULT_THEME, THEMES
from .paths import DEFAULT_MOUNT_PREFIX, PathSyntax, Root

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - exercised on Python <3.11
    import tomli as tomllib  # type: ignore

LOGGER = logging.getLogger(__name__)

DEFAULT_WSL_ROOT = "/home"
DEFAULT_WINDOWS_ROOT = "C:\\Users"

WSL_LABEL = "WSL"
WINDOWS_LABEL = "Windows"


class ConfigError(ValueError):
    """Raised for configuration values that cannot be used."""


@dataclass(frozen=True)
class AppConfig:
    """Startup configuration: the two pane roots and UI preferences."""

    wsl_root: str = DEFAULT_WSL_ROOT
    windows_root: str = DEFAULT_WINDOWS_ROOT
    wsl_syntax: PathSyntax = PathSyntax.UNIX
    windows_syntax: PathSyntax = PathSyntax.WINDOWS
    mount_prefix: str = DEFAULT_MOUNT_PREFIX
    theme: str = DEFAULT_THEME

    def build_roots(self):
        """Return ``(wsl_root, windows_root)`` as Root values."""
        wsl = Root.create(WSL_LABEL, self.wsl_root, self.wsl_syntax, self.mount_prefix)
        windows = Root.create(WINDOWS_LABEL, self.windows_root, self.windows_syntax, self.mount_prefix)
        return wsl, windows


def default_config_path() -> Path:
    """Return default config path (~/.config/wsltransfer/config.toml)."""
    return Path.home() / ".config" / "wsltransfer" / "config.toml"


def _coerce_syntax(value, default):
    if value is None:
        return default
    try:
        return PathSyntax(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(s.value for s in PathSyntax)
        raise ConfigError(f"Unknown path syntax {value!r} (expected one of: {choices})") from None


def _coerce_path(value, default):
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _parse_toml(text: str) -> dict:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        LOGGER.warning("Ignoring invalid config file: %s", exc)
        return {}


def _normalize_config(raw: dict) -> AppConfig:
    roots = raw.get("roots", {})
    if not isinstance(roots, dict):
        roots = {}
    ui = raw.get("ui", {})
    if not isinstance(ui, dict):
        ui = {}

    theme = str(ui.get("theme", DEFAULT_THEME)).strip().lower() or DEFAULT_THEME
    if theme not in THEMES:
        LOGGER.warning("Unknown theme %r, using %r", theme, DEFAULT_THEME)
        theme = DEFAULT_THEME

    return AppConfig(
        wsl_root=_coerce_path(roots.get("wsl"), DEFAULT_WSL_ROOT),
        windows_root=_coerce_path(roots.get("windows"), DEFAULT_WINDOWS_ROOT),
        wsl_syntax=_coerce_syntax(roots.get("wsl_syntax"), PathSyntax.UNIX),
        windows_syntax=_coerce_syntax(roots.get("windows_syntax"), PathSyntax.WINDOWS),
        mount_prefix=_coerce_path(roots.get("mount_prefix"), DEFAULT_MOUNT_PREFIX),
        theme=theme,
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from TOML file; return defaults when missing or unparsable.

    Raises ConfigError for values that parse but cannot be used.
    """
    cfg_path = Path(path) if path is not None else default_config_path()
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except OSError:
        return AppConfig()
    return _normalize_config(_parse_toml(text))


def apply_overrides(config: AppConfig, **overrides) -> AppConfig:
    """Return ``config`` with every non-None override applied (CLI flags)."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "theme" in changes and changes["theme"] not in THEMES:
        raise ConfigError(f"Unknown theme {changes['theme']!r}")
    return dataclasses.replace(config, **changes)
