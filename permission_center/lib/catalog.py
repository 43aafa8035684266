"""
Data types for applications and permissions, plus the catalog-backed
applications source.

The catalog is a YAML document with two lists:

    permissions:
      - group: share
        group_description: Subsystems shared with the host system
        description: Network
        property: shared-network
        kind: toggle
        default: false
    applications:
      - id: org.gnome.Calculator
        name: Calculator
        theme_path: /var/lib/flatpak/exports/share/icons
        permissions:
          shared-network: true

Malformed entries are skipped with a warning; the order of the lists is kept.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

log = logging.getLogger(__name__)

PermissionValue: TypeAlias = bool | str


class PermissionKind(StrEnum):
    """How a permission is edited."""
    TOGGLE = "toggle"
    TEXT = "text"

    @property
    def content_property(self) -> str:
        """Name of the row content property holding the value."""
        return "active" if self is PermissionKind.TOGGLE else "text"

    @property
    def default_value(self) -> PermissionValue:
        return False if self is PermissionKind.TOGGLE else ""

    def accepts(self, value: object) -> bool:
        if self is PermissionKind.TOGGLE:
            return isinstance(value, bool)
        return isinstance(value, str)


@dataclass(frozen=True, slots=True)
class Application:
    app_id: str
    app_name: str
    theme_path: str = ""


@dataclass(frozen=True, slots=True)
class PermissionEntry:
    group: str
    group_description: str
    description: str
    permission: str
    kind: PermissionKind
    value: PermissionValue
    supported: bool = True


# =============================================================================
# PARSING
# =============================================================================
def parse_permissions(items: object) -> list[PermissionEntry]:
    """Build permission entries from the catalog's `permissions` list."""
    entries: list[PermissionEntry] = []
    seen: set[str] = set()

    if not isinstance(items, list):
        return entries

    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            log.warning("Permission %d is not a dictionary, skipping", idx)
            continue

        key = str(item.get("property", "")).strip()
        if not key:
            log.warning("Permission %d has no 'property' key, skipping", idx)
            continue
        if key in seen:
            log.warning("Duplicate permission '%s', skipping", key)
            continue

        try:
            kind = PermissionKind(str(item.get("kind", PermissionKind.TOGGLE)))
        except ValueError:
            log.warning("Permission '%s' has unknown kind '%s'", key, item.get("kind"))
            continue

        value = item.get("default", kind.default_value)
        if value is None:
            value = kind.default_value
        if not kind.accepts(value):
            log.warning("Permission '%s' has a %s default, skipping", key, type(value).__name__)
            continue

        supported = item.get("supported", True)
        if not isinstance(supported, bool):
            log.warning("Permission '%s' has a non-boolean 'supported' flag, skipping", key)
            continue

        seen.add(key)
        entries.append(
            PermissionEntry(
                group=str(item.get("group") or ""),
                group_description=str(item.get("group_description") or ""),
                description=str(item.get("description") or key),
                permission=key,
                kind=kind,
                value=value,
                supported=supported,
            )
        )

    return entries


def parse_applications(items: object) -> list[Application]:
    """Build applications from the catalog's `applications` list."""
    applications: list[Application] = []

    if not isinstance(items, list):
        return applications

    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            log.warning("Application %d is not a dictionary, skipping", idx)
            continue
        app_id = str(item.get("id", "")).strip()
        if not app_id:
            log.warning("Application %d has no 'id', skipping", idx)
            continue
        applications.append(
            Application(
                app_id=app_id,
                app_name=str(item.get("name") or app_id),
                theme_path=str(item.get("theme_path") or ""),
            )
        )

    return applications


def parse_application_defaults(items: object) -> dict[str, dict[str, Any]]:
    """Per-application default values keyed by application id."""
    defaults: dict[str, dict[str, Any]] = {}

    if not isinstance(items, list):
        return defaults

    for item in items:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        values = item.get("permissions") or {}
        if isinstance(values, Mapping):
            defaults.setdefault(str(item["id"]).strip(), {}).update(values)
    return defaults


# =============================================================================
# APPLICATIONS SOURCE
# =============================================================================
class ApplicationsModel:
    """Read-only, ordered view of the applications listed in a catalog."""

    __slots__ = ("_applications",)

    def __init__(self, catalog: Mapping[str, Any]) -> None:
        self._applications = parse_applications(catalog.get("applications"))

    def get_all(self) -> list[Application]:
        return list(self._applications)
