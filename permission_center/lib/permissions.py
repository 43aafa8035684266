"""
Permissions model: the single source of truth for permission values.

Values for the selected application are its catalog defaults overlaid with
the user's overrides. Every change is announced twice: `value-changed` carries
the key and new value, `changed` carries whether the selected application
now has any override at all.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import gi

gi.require_version("GObject", "2.0")
from gi.repository import GObject

from permission_center.lib import utility
from permission_center.lib.catalog import (
    PermissionEntry,
    PermissionValue,
    parse_application_defaults,
    parse_permissions,
)

log = logging.getLogger(__name__)


class PermissionsModel(GObject.Object):
    """Holds permission values per application and tracks overrides."""

    __gtype_name__ = "PermissionCenterPermissionsModel"

    __gsignals__ = {
        "value-changed": (GObject.SignalFlags.RUN_FIRST, None, (str, object)),
        "changed": (GObject.SignalFlags.RUN_FIRST, None, (bool,)),
    }

    def __init__(
        self,
        catalog: Mapping[str, Any],
        overrides: Mapping[str, Mapping[str, Any]] | None = None,
        overrides_path: Path | None = None,
    ) -> None:
        super().__init__()
        self._entries = parse_permissions(catalog.get("permissions"))
        self._by_key: dict[str, PermissionEntry] = {e.permission: e for e in self._entries}
        self._app_defaults = parse_application_defaults(catalog.get("applications"))
        self._overrides: dict[str, dict[str, PermissionValue]] = {}
        self._overrides_path = overrides_path
        self._app_id: str = ""
        self._is_shutdown = False

        for app_id, values in (overrides or {}).items():
            for key, value in values.items():
                if self._is_valid(key, value) and value != self.get_default(key, app_id):
                    self._overrides.setdefault(app_id, {})[key] = value

    # ─────────────────────────────────────────────────────────────────────────
    # SNAPSHOT
    # ─────────────────────────────────────────────────────────────────────────
    def get_all(self) -> list[PermissionEntry]:
        """Permission entries in catalog order, with their global defaults."""
        return list(self._entries)

    # ─────────────────────────────────────────────────────────────────────────
    # SELECTION
    # ─────────────────────────────────────────────────────────────────────────
    @property
    def app_id(self) -> str:
        return self._app_id

    def set_selected_application(self, app_id: str) -> None:
        """Switch to `app_id` and re-announce every value for it."""
        if self._is_shutdown:
            log.warning("Ignoring selection of '%s' after shutdown", app_id)
            return

        self._app_id = app_id or ""
        log.debug("Selected application '%s'", self._app_id)

        for entry in self._entries:
            self.emit("value-changed", entry.permission, self.get_value(entry.permission))
        self.emit("changed", self.is_overridden())

    # ─────────────────────────────────────────────────────────────────────────
    # VALUES
    # ─────────────────────────────────────────────────────────────────────────
    def get_default(self, key: str, app_id: str | None = None) -> PermissionValue:
        entry = self._by_key[key]
        app_id = self._app_id if app_id is None else app_id
        value = self._app_defaults.get(app_id, {}).get(key, entry.value)
        return value if entry.kind.accepts(value) else entry.value

    def get_value(self, key: str, app_id: str | None = None) -> PermissionValue:
        """Current value of `key` for `app_id` (the selected one by default)."""
        app_id = self._app_id if app_id is None else app_id
        overrides = self._overrides.get(app_id, {})
        if key in overrides:
            return overrides[key]
        return self.get_default(key, app_id)

    def set_value(self, key: str, value: PermissionValue) -> None:
        """Store `value` for the selected application and announce it."""
        if self._is_shutdown:
            log.warning("Ignoring write to '%s' after shutdown", key)
            return
        if not self._app_id:
            log.warning("Ignoring write to '%s' with no application selected", key)
            return
        if not self._is_valid(key, value):
            return
        if self.get_value(key) == value:
            return

        overrides = self._overrides.setdefault(self._app_id, {})
        if value == self.get_default(key):
            overrides.pop(key, None)
        else:
            overrides[key] = value

        log.debug("%s: %s = %r", self._app_id, key, value)
        self.emit("value-changed", key, value)
        self.emit("changed", self.is_overridden())

    def is_overridden(self, app_id: str | None = None) -> bool:
        """Whether any value of `app_id` differs from its default."""
        app_id = self._app_id if app_id is None else app_id
        return bool(self._overrides.get(app_id))

    def _is_valid(self, key: str, value: object) -> bool:
        entry = self._by_key.get(key)
        if entry is None:
            log.warning("Unknown permission '%s'", key)
            return False
        if not entry.kind.accepts(value):
            log.warning(
                "Permission '%s' expects a %s value, got %s",
                key, entry.kind, type(value).__name__,
            )
            return False
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # RESET & SHUTDOWN
    # ─────────────────────────────────────────────────────────────────────────
    def reset(self) -> None:
        """Drop every override of the selected application."""
        if self._is_shutdown or not self._app_id:
            return

        cleared = self._overrides.pop(self._app_id, {})
        log.info("Reset %d override(s) of '%s'", len(cleared), self._app_id)

        for key in cleared:
            self.emit("value-changed", key, self.get_value(key))
        self.emit("changed", False)

    def shutdown(self) -> None:
        """Flush overrides once; the model refuses writes afterwards."""
        if self._is_shutdown:
            return
        self._is_shutdown = True

        if self._overrides_path is not None:
            utility.save_overrides(self._overrides_path, self._overrides)
