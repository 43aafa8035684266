"""
Shared helpers for the Permission Center: YAML I/O, XDG paths, pre-flight checks.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Final

import yaml

log = logging.getLogger(__name__)

APP_DIRNAME: Final[str] = "permission-center"
PACKAGE_DATA_DIR: Final[Path] = Path(__file__).resolve().parent.parent / "data"


# =============================================================================
# XDG PATHS
# =============================================================================
def _xdg_dir(env_name: str, fallback: Path) -> Path:
    value = os.environ.get(env_name, "").strip()
    return Path(value) if value else fallback


def config_dir() -> Path:
    """User configuration directory for the panel."""
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / APP_DIRNAME


def data_dir() -> Path:
    """User data directory where overrides are flushed."""
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share") / APP_DIRNAME


def resolve_data_file(filename: str) -> Path:
    """
    Prefer a user-provided copy of `filename` in the config directory,
    falling back to the copy bundled with the package.
    """
    user_path = config_dir() / filename
    if user_path.is_file():
        return user_path
    return PACKAGE_DATA_DIR / filename


# =============================================================================
# CONFIGURATION LOADER
# =============================================================================
def load_config(config_path: Path) -> dict[str, Any]:
    """Load a YAML mapping. Raises on I/O or parse errors."""
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config is not a dictionary (got {type(data).__name__})")
    return data


def load_catalog(catalog_path: Path) -> tuple[dict[str, Any], str | None]:
    """
    Safely load the permissions catalog.

    Returns:
        Tuple of (catalog dict, error message or None)
    """
    try:
        catalog = load_config(catalog_path)
    except FileNotFoundError:
        return {}, f"Catalog file not found: {catalog_path}"
    except yaml.YAMLError as e:
        return {}, f"Catalog parse error: {e}"
    except (OSError, ValueError) as e:
        return {}, f"Could not read catalog: {e}"

    for key in ("permissions", "applications"):
        if not isinstance(catalog.get(key, []), list):
            return {}, f"'{key}' must be a list"

    return catalog, None


# =============================================================================
# OVERRIDES
# =============================================================================
def load_overrides(path: Path) -> dict[str, dict[str, Any]]:
    """Load per-application overrides; a missing or broken file yields none."""
    if not path.is_file():
        return {}
    try:
        data = load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.error("Could not load overrides from %s: %s", path, e)
        return {}

    overrides: dict[str, dict[str, Any]] = {}
    for app_id, values in data.items():
        if isinstance(values, dict):
            overrides[str(app_id)] = dict(values)
        else:
            log.warning("Ignoring malformed overrides for '%s'", app_id)
    return overrides


def save_overrides(path: Path, overrides: dict[str, dict[str, Any]]) -> bool:
    """Write overrides as YAML. Applications without overrides are omitted."""
    payload = {app_id: values for app_id, values in overrides.items() if values}
    if not payload and not path.exists():
        return True
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(payload, f, sort_keys=True)
    except OSError as e:
        log.error("Could not save overrides to %s: %s", path, e)
        return False
    log.info("Saved overrides for %d application(s) to %s", len(payload), path)
    return True


# =============================================================================
# PRE-FLIGHT DEPENDENCY CHECK
# =============================================================================
def preflight_check() -> None:
    """Verify all dependencies are importable before building any UI."""
    missing: list[str] = []

    try:
        import yaml  # noqa: F401
    except ImportError:
        missing.append("python-yaml")

    try:
        import gi
        gi.require_version("Gtk", "4.0")
        gi.require_version("Adw", "1")
        from gi.repository import Adw, Gtk  # noqa: F401
    except (ImportError, ValueError):
        missing.extend(["python-gobject", "gtk4", "libadwaita"])

    if missing:
        unique_missing = list(dict.fromkeys(missing))
        print("\n  Missing dependencies:\n", file=sys.stderr)
        for pkg in unique_missing:
            print(f"    • {pkg}", file=sys.stderr)
        print("", file=sys.stderr)
        sys.exit(1)

