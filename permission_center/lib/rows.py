"""
Row widget definitions for the Permission Center.

Each widget renders one of the toolkit-free rows from `viewmodels.py` and
mirrors its properties. Widget state is tied to row content with
`signals.link_properties`, never with a two-way GObject binding, and every
handle is released in `do_unroot`.

GTK4/Libadwaita compatible.
"""
from __future__ import annotations

import logging
from typing import Any, Final

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gdk, GLib, GObject, Gtk, Pango

from permission_center.lib.catalog import PermissionKind
from permission_center.lib.signals import Registrations, bind_property, link_properties
from permission_center.lib.viewmodels import ApplicationRow, GroupRow, PermissionRow

log = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================
DEFAULT_APP_ICON: Final[str] = "application-x-executable-symbolic"
LIST_ICON_PIXEL_SIZE: Final[int] = 32
INFO_ICON_PIXEL_SIZE: Final[int] = 64
INFO_ICON_PIXEL_SIZE_COMPACT: Final[int] = 48


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def _resolve_app_icon(app_id: str) -> str:
    """Use the application's own icon when the theme has it."""
    display = Gdk.Display.get_default()
    if display is not None and app_id:
        theme = Gtk.IconTheme.get_for_display(display)
        if theme.has_icon(app_id):
            return app_id
    return DEFAULT_APP_ICON


def add_icon_search_path(theme_path: str) -> None:
    """Make the icons exported next to an application resolvable."""
    display = Gdk.Display.get_default()
    if not theme_path or display is None:
        return
    theme = Gtk.IconTheme.get_for_display(display)
    if theme_path not in theme.get_search_path():
        theme.add_search_path(theme_path)


def _css_class_for(group: str) -> str:
    return "group-" + "".join(c if c.isalnum() else "-" for c in group.lower())


# =============================================================================
# APPLICATIONS
# =============================================================================
class ApplicationListRow(Gtk.ListBoxRow):
    """Sidebar row showing an application's icon, name and id."""

    __gtype_name__ = "PermissionCenterApplicationListRow"

    def __init__(self, item: ApplicationRow) -> None:
        super().__init__(css_classes=["application-row"])
        self.item = item
        self._registrations = Registrations()

        box = Gtk.Box(spacing=12)

        icon = Gtk.Image.new_from_icon_name(_resolve_app_icon(item.app_id))
        icon.set_pixel_size(LIST_ICON_PIXEL_SIZE)
        box.append(icon)

        labels = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, valign=Gtk.Align.CENTER)
        name = Gtk.Label(label=item.app_name, xalign=0, css_classes=["heading"])
        name.set_ellipsize(Pango.EllipsizeMode.END)
        app_id = Gtk.Label(label=item.app_id, xalign=0, css_classes=["dim-label", "caption"])
        app_id.set_ellipsize(Pango.EllipsizeMode.END)
        labels.append(name)
        labels.append(app_id)
        box.append(labels)

        self.set_child(box)
        self._registrations.add(bind_property(item, "visible", self, "visible"))

    def do_unroot(self) -> None:
        """GTK4 lifecycle hook: clean up when widget is removed from tree."""
        self._registrations.dispose()
        Gtk.ListBoxRow.do_unroot(self)


class AppInfoViewer(Gtk.Box):
    """Header above the permissions describing the selected application."""

    __gtype_name__ = "PermissionCenterAppInfoViewer"

    compact = GObject.Property(type=bool, default=False)

    def __init__(self) -> None:
        super().__init__(spacing=18, css_classes=["app-info"])
        self.set_margin_bottom(12)

        self._icon = Gtk.Image.new_from_icon_name(DEFAULT_APP_ICON)
        self.append(self._icon)

        labels = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, valign=Gtk.Align.CENTER)
        self._name = Gtk.Label(xalign=0, css_classes=["title-2"], wrap=True)
        self._app_id = Gtk.Label(xalign=0, css_classes=["dim-label"], selectable=True)
        self._app_id.set_ellipsize(Pango.EllipsizeMode.MIDDLE)
        labels.append(self._name)
        labels.append(self._app_id)
        self.append(labels)

        self.connect("notify::compact", self._on_compact_changed)
        self._on_compact_changed()

    def show_application(self, item: ApplicationRow) -> None:
        self._icon.set_from_icon_name(_resolve_app_icon(item.app_id))
        self._name.set_label(item.app_name)
        self._app_id.set_label(item.app_id)

    def _on_compact_changed(self, *_args: Any) -> None:
        if self.compact:
            self._icon.set_pixel_size(INFO_ICON_PIXEL_SIZE_COMPACT)
            self._name.remove_css_class("title-2")
            self._name.add_css_class("title-4")
        else:
            self._icon.set_pixel_size(INFO_ICON_PIXEL_SIZE)
            self._name.remove_css_class("title-4")
            self._name.add_css_class("title-2")


# =============================================================================
# PERMISSIONS
# =============================================================================
class GroupHeader(Adw.PreferencesGroup):
    """Titled group collecting the permission rows that follow it."""

    __gtype_name__ = "PermissionCenterGroupHeader"

    def __init__(self, item: GroupRow) -> None:
        super().__init__()
        self.item = item
        if item.group:
            self.set_title(GLib.markup_escape_text(item.group.replace("-", " ").title()))
            self.add_css_class(_css_class_for(item.group))
        if item.group_description:
            self.set_description(GLib.markup_escape_text(item.group_description))


class PermissionSwitchRow(Adw.ActionRow):
    """Permission row with a switch suffix."""

    __gtype_name__ = "PermissionCenterPermissionSwitchRow"

    def __init__(self, item: PermissionRow) -> None:
        super().__init__(css_classes=["permission-row", _css_class_for(item.group)])
        self.item = item
        self._registrations = Registrations()

        self.set_title(GLib.markup_escape_text(item.description))
        self.set_subtitle(GLib.markup_escape_text(item.permission))

        self.toggle_switch = Gtk.Switch(valign=Gtk.Align.CENTER)
        self.add_suffix(self.toggle_switch)
        self.set_activatable_widget(self.toggle_switch)

        self._registrations.add(
            link_properties(item.content, "active", self.toggle_switch, "active")
        )
        self._registrations.add(bind_property(item, "sensitive", self, "sensitive"))

    def do_unroot(self) -> None:
        self._registrations.dispose()
        Adw.ActionRow.do_unroot(self)


class PermissionEntryRow(Adw.EntryRow):
    """Permission row holding free text, committed with the apply button."""

    __gtype_name__ = "PermissionCenterPermissionEntryRow"

    def __init__(self, item: PermissionRow) -> None:
        super().__init__(css_classes=["permission-row", _css_class_for(item.group)])
        self.item = item
        self._registrations = Registrations()

        self.set_title(GLib.markup_escape_text(item.description))
        self.set_tooltip_text(item.permission)
        self.set_show_apply_button(True)
        self.set_text(item.content.text)

        self._registrations.connect(item.content, "notify::text", self._on_content_changed)
        self._registrations.connect(self, "apply", self._on_apply)
        self._registrations.add(bind_property(item, "sensitive", self, "sensitive"))

    def _on_content_changed(self, content: GObject.Object, _pspec: GObject.ParamSpec) -> None:
        if self.get_text() != content.text:
            self.set_text(content.text)

    def _on_apply(self, _row: Adw.EntryRow) -> None:
        text = self.get_text().strip()
        if self.item.content.text != text:
            self.item.content.text = text

    def do_unroot(self) -> None:
        self._registrations.dispose()
        Adw.EntryRow.do_unroot(self)


def build_permission_row(item: PermissionRow) -> Adw.PreferencesRow:
    """Build the row widget matching the permission's kind."""
    match item.kind:
        case PermissionKind.TEXT:
            return PermissionEntryRow(item)
        case _:
            return PermissionSwitchRow(item)


# =============================================================================
# HEADER BARS
# =============================================================================
class PaneHeaderBar(Adw.Bin):
    """
    Header bar of one pane. `show-window-controls` drives both title button
    areas so the navigation controller can hand the controls to one bar.
    """

    __gtype_name__ = "PermissionCenterPaneHeaderBar"

    show_window_controls = GObject.Property(type=bool, default=False)

    def __init__(self, title: str = "") -> None:
        super().__init__()
        self._title = Adw.WindowTitle(title=title)
        self._header = Adw.HeaderBar(title_widget=self._title, show_back_button=False)
        self.set_child(self._header)

        for target in ("show-start-title-buttons", "show-end-title-buttons"):
            self.bind_property(
                "show-window-controls", self._header, target,
                GObject.BindingFlags.SYNC_CREATE,
            )

    def set_title(self, title: str) -> None:
        self._title.set_title(title)

    def pack_start(self, child: Gtk.Widget) -> None:
        self._header.pack_start(child)

    def pack_end(self, child: Gtk.Widget) -> None:
        self._header.pack_end(child)
