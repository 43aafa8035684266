"""
Responsive layout: fold state, visible pane and header bar roles.

Two header bars share the window: one over the applications list, one over
the permissions. The "main" bar always shows the window controls; the other
one only shows them while the layout is folded, since it is then the only bar
on screen. Which bar is main follows the system decoration layout: controls
on the leading edge make the applications bar main.
"""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, Final

import gi

gi.require_version("GObject", "2.0")
from gi.repository import GObject

from permission_center.lib.signals import BindingHandle, SignalHandle, bind_property, connect

log = logging.getLogger(__name__)

PANE_APPLICATIONS: Final[str] = "applications"
PANE_PERMISSIONS: Final[str] = "permissions"

DECORATION_LAYOUT_PROPERTY: Final[str] = "gtk-decoration-layout"
WINDOW_CONTROLS_PROPERTY: Final[str] = "show-window-controls"


class BarRole(StrEnum):
    APPLICATIONS = "applications"
    PERMISSIONS = "permissions"


class LayoutState(GObject.Object):
    """Fold state reported by the window and the pane shown while folded."""

    __gtype_name__ = "PermissionCenterLayoutState"

    folded = GObject.Property(type=bool, default=False)
    visible_pane = GObject.Property(type=str, default=PANE_APPLICATIONS)


def controls_on_leading_edge(decoration_layout: str | None) -> bool:
    """
    True when the close button sits before the ':' separator of a
    decoration layout such as "close,minimize:" or "icon:minimize,close".
    """
    if not decoration_layout:
        return False
    leading = decoration_layout.split(":", 1)[0]
    return "close" in (button.strip() for button in leading.split(","))


class NavigationController:
    """Owns pane transitions and the header bar role assignment."""

    def __init__(
        self,
        layout: LayoutState,
        applications_bar: GObject.Object,
        permissions_bar: GObject.Object,
        back_button: GObject.Object,
        settings: GObject.Object,
    ) -> None:
        self._layout = layout
        self._applications_bar = applications_bar
        self._permissions_bar = permissions_bar
        self._back_button = back_button
        self._settings = settings

        self.main_bar_role = BarRole.PERMISSIONS
        self._back_binding: BindingHandle | None = None
        self._role_binding: BindingHandle | None = None
        self._settings_handle: SignalHandle | None = None
        self._is_disposed = False

    # ─────────────────────────────────────────────────────────────────────────
    # SETUP
    # ─────────────────────────────────────────────────────────────────────────
    def setup(self) -> None:
        """Show the back button while folded and derive the bar roles."""
        if self._back_binding is None:
            self._back_binding = bind_property(
                self._layout, "folded", self._back_button, "visible"
            )
        self.setup_headers()

    def setup_headers(self, *_args: Any) -> None:
        """Re-derive bar roles, replacing the previous listener and binding."""
        if self._is_disposed:
            return

        if self._settings_handle is not None:
            self._settings_handle.dispose()
        self._settings_handle = connect(
            self._settings,
            f"notify::{DECORATION_LAYOUT_PROPERTY}",
            self.setup_headers,
        )

        decoration_layout = self._settings.get_property(DECORATION_LAYOUT_PROPERTY)
        if controls_on_leading_edge(decoration_layout):
            self.main_bar_role = BarRole.APPLICATIONS
            main_bar, secondary_bar = self._applications_bar, self._permissions_bar
        else:
            self.main_bar_role = BarRole.PERMISSIONS
            main_bar, secondary_bar = self._permissions_bar, self._applications_bar

        if self._role_binding is not None:
            self._role_binding.dispose()

        main_bar.set_property(WINDOW_CONTROLS_PROPERTY, True)
        self._role_binding = bind_property(
            self._layout, "folded", secondary_bar, WINDOW_CONTROLS_PROPERTY
        )
        log.debug("Decoration layout %r: %s bar is main", decoration_layout, self.main_bar_role)

    @property
    def has_role_binding(self) -> bool:
        return self._role_binding is not None and self._role_binding.connected

    @property
    def has_settings_listener(self) -> bool:
        return self._settings_handle is not None and self._settings_handle.connected

    # ─────────────────────────────────────────────────────────────────────────
    # TRANSITIONS
    # ─────────────────────────────────────────────────────────────────────────
    @property
    def folded(self) -> bool:
        return self._layout.folded

    @property
    def visible_pane(self) -> str:
        return self._layout.visible_pane

    def show_permissions(self, *_args: Any) -> None:
        if self._layout.visible_pane != PANE_PERMISSIONS:
            self._layout.visible_pane = PANE_PERMISSIONS

    def show_applications(self, *_args: Any) -> None:
        if self._layout.visible_pane != PANE_APPLICATIONS:
            self._layout.visible_pane = PANE_APPLICATIONS
        self._back_button.set_property("active", False)

    # ─────────────────────────────────────────────────────────────────────────
    # TEARDOWN
    # ─────────────────────────────────────────────────────────────────────────
    def dispose(self) -> None:
        if self._is_disposed:
            return
        self._is_disposed = True
        for handle in (self._settings_handle, self._role_binding, self._back_binding):
            if handle is not None:
                handle.dispose()
        self._settings_handle = None
        self._role_binding = None
        self._back_binding = None
