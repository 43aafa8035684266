"""
Shell controller: wires the applications list, the permission rows, the reset
button, the search entry and the responsive layout to the permissions model.

Startup is an explicit sequence:

    load snapshots → derive header roles → stop if either is empty
    → build rows → bind rows → wire tracker and filter → connect listeners
    → select first row

Teardown releases every handle exactly once and then shuts the model down.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import gi

gi.require_version("GObject", "2.0")
from gi.repository import GObject

from permission_center.lib.binding import PermissionBinder
from permission_center.lib.catalog import Application, PermissionEntry
from permission_center.lib.filtering import make_row_filter
from permission_center.lib.navigation import LayoutState, NavigationController
from permission_center.lib.signals import Registrations
from permission_center.lib.tracker import ResetController
from permission_center.lib.viewmodels import (
    ApplicationList,
    ApplicationRow,
    GroupRow,
    PermissionRow,
)

log = logging.getLogger(__name__)


# =============================================================================
# COLLABORATOR CONTRACTS
# =============================================================================
class ApplicationsSource(Protocol):
    def get_all(self) -> Sequence[Application]: ...


class PermissionsSource(Protocol):
    def get_all(self) -> Sequence[PermissionEntry]: ...
    def set_selected_application(self, app_id: str) -> None: ...
    def get_value(self, key: str) -> Any: ...
    def set_value(self, key: str, value: Any) -> None: ...
    def reset(self) -> None: ...
    def shutdown(self) -> None: ...
    def connect(self, signal: str, callback: Any, *args: Any) -> int: ...


class ShellWindow(Protocol):
    """What the shell needs from the window that renders it."""

    applications_list: ApplicationList
    search_entry: GObject.Object
    reset_button: GObject.Object
    back_button: GObject.Object
    applications_bar: GObject.Object
    permissions_bar: GObject.Object
    layout: LayoutState

    def add_group_row(self, row: GroupRow) -> None: ...
    def add_permission_row(self, row: PermissionRow) -> None: ...
    def show_application(self, row: ApplicationRow) -> None: ...
    def show_populated(self) -> None: ...
    def set_title(self, title: str) -> None: ...
    def connect(self, signal: str, callback: Any, *args: Any) -> int: ...


# =============================================================================
# CONTROLLER
# =============================================================================
class ShellController:
    """Composition root for the permission panel."""

    def __init__(
        self,
        window: ShellWindow,
        applications: ApplicationsSource,
        permissions: PermissionsSource,
        settings: GObject.Object,
    ) -> None:
        self._window = window
        self._applications = applications
        self._permissions = permissions
        self._settings = settings

        self._registrations = Registrations()
        self._binder = PermissionBinder(permissions)
        self._tracker = ResetController(permissions, window.reset_button)
        self._navigation = NavigationController(
            window.layout,
            window.applications_bar,
            window.permissions_bar,
            window.back_button,
            settings,
        )

        self.application_rows: list[ApplicationRow] = []
        self.permission_rows: list[PermissionRow] = []
        self.group_rows: list[GroupRow] = []
        self.is_populated = False
        self._is_shutdown = False

    # ─────────────────────────────────────────────────────────────────────────
    # ACCESSORS
    # ─────────────────────────────────────────────────────────────────────────
    @property
    def binder(self) -> PermissionBinder:
        return self._binder

    @property
    def tracker(self) -> ResetController:
        return self._tracker

    @property
    def navigation(self) -> NavigationController:
        return self._navigation

    @property
    def registrations(self) -> Registrations:
        return self._registrations

    @property
    def selected_row(self) -> ApplicationRow | None:
        return self._window.applications_list.get_selected_row()

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    # ─────────────────────────────────────────────────────────────────────────
    # STARTUP
    # ─────────────────────────────────────────────────────────────────────────
    def start(self) -> bool:
        """
        Build and wire the shell.

        Returns:
            False when either snapshot is empty and the empty shell is kept.
            The header roles are derived either way.
        """
        applications = list(self._applications.get_all())
        permissions = list(self._permissions.get_all())

        self._navigation.setup()

        if not applications or not permissions:
            log.info(
                "Nothing to show (%d application(s), %d permission(s))",
                len(applications), len(permissions),
            )
            return False

        self._build_application_rows(applications)
        self._build_permission_rows(permissions)
        self._bind_permission_rows()
        self._wire()

        self._window.show_populated()
        self.is_populated = True

        self._window.applications_list.select_row(
            self._window.applications_list.get_row_at_index(0)
        )
        log.info(
            "Shell ready with %d application(s) and %d permission(s)",
            len(applications), len(permissions),
        )
        return True

    def _build_application_rows(self, applications: list[Application]) -> None:
        applications_list = self._window.applications_list
        for application in applications:
            row = ApplicationRow(application)
            self.application_rows.append(row)
            applications_list.append(row)

    def _build_permission_rows(self, permissions: list[PermissionEntry]) -> None:
        last_group: str | None = None

        for entry in permissions:
            if entry.group != last_group:
                group_row = GroupRow(entry.group, entry.group_description)
                self.group_rows.append(group_row)
                self._window.add_group_row(group_row)
                last_group = entry.group

            row = PermissionRow(entry)
            self.permission_rows.append(row)
            self._window.add_permission_row(row)

    def _bind_permission_rows(self) -> None:
        for row in self.permission_rows:
            self._binder.bind(row, row.permission, row.kind)

    def _wire(self) -> None:
        window = self._window
        connect = self._registrations.connect

        window.applications_list.set_filter_func(make_row_filter(window.search_entry.get_text))

        connect(self._permissions, "changed", self._tracker.on_model_changed)
        connect(window.search_entry, "search-changed", self._on_search_changed)
        connect(window.search_entry, "stop-search", self._on_stop_search)
        connect(window.applications_list, "row-selected", self._on_row_selected)
        connect(window.reset_button, "clicked", self._tracker.reset)
        connect(window.back_button, "clicked", self._navigation.show_applications)
        connect(window.layout, "notify::folded", self._navigation.show_permissions)
        connect(window, "destroy", self._on_destroy)

    # ─────────────────────────────────────────────────────────────────────────
    # HANDLERS
    # ─────────────────────────────────────────────────────────────────────────
    def _on_row_selected(self, _applications_list: ApplicationList, row: ApplicationRow | None) -> None:
        if row is None or self._is_shutdown:
            return

        log.debug("Selected %s", row.app_id)
        self._tracker.on_selection_changed()
        self._permissions.set_selected_application(row.app_id)

        self._window.permissions_bar.set_title(row.app_name)
        self._window.set_title(row.app_name)
        self._window.show_application(row)
        self._navigation.show_permissions()

    def _on_search_changed(self, *_args: Any) -> None:
        self._window.applications_list.invalidate_filter()

    def _on_stop_search(self, *_args: Any) -> None:
        self._window.search_entry.set_text("")
        self._window.applications_list.invalidate_filter()

    def _on_destroy(self, *_args: Any) -> None:
        self.shutdown()

    # ─────────────────────────────────────────────────────────────────────────
    # TEARDOWN
    # ─────────────────────────────────────────────────────────────────────────
    def shutdown(self) -> None:
        """Release every listener and binding, then shut the model down once."""
        if self._is_shutdown:
            return
        self._is_shutdown = True

        self._registrations.dispose()
        self._binder.unbind_all()
        self._navigation.dispose()
        self._permissions.shutdown()
        log.info("Shell shut down")
