#!/usr/bin/env python3
"""
Permission Center
A GTK4/Libadwaita panel for reviewing and overriding the permissions of
sandboxed applications.

- Two panes: applications on the left, the selected application's
  permissions on the right. Narrow windows fold to one pane at a time.
- Search filters the application list by id as you type.
- Every change is tracked per application; Reset drops the overrides of the
  selected application only.
- Overrides are flushed once when the window goes away.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Final

# =============================================================================
# VERSION CHECK
# =============================================================================
if sys.version_info < (3, 11):
    sys.exit("[FATAL] Python 3.11+ is required.")

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
log = logging.getLogger(__name__)

# =============================================================================
# IMPORTS & PRE-FLIGHT
# =============================================================================
import permission_center.lib.utility as utility

utility.preflight_check()

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gdk, Gio, GLib, Gtk

import permission_center.lib.rows as rows
from permission_center import __version__
from permission_center.lib.catalog import ApplicationsModel
from permission_center.lib.navigation import PANE_APPLICATIONS, PANE_PERMISSIONS, LayoutState
from permission_center.lib.permissions import PermissionsModel
from permission_center.lib.shell import ShellController
from permission_center.lib.signals import Registrations, bind_property
from permission_center.lib.viewmodels import (
    ApplicationList,
    ApplicationRow,
    GroupRow,
    PermissionRow,
)

# =============================================================================
# CONSTANTS
# =============================================================================
APP_ID: Final[str] = "io.github.permissioncenter.PermissionCenter"
APP_TITLE: Final[str] = "Permission Center"
CATALOG_FILENAME: Final[str] = "catalog.yaml"
OVERRIDES_FILENAME: Final[str] = "overrides.yaml"
CSS_FILENAME: Final[str] = "style.css"

# UI Layout Constants
WINDOW_DEFAULT_WIDTH: Final[int] = 1000
WINDOW_DEFAULT_HEIGHT: Final[int] = 700
SIDEBAR_MIN_WIDTH: Final[int] = 260
SIDEBAR_MAX_WIDTH: Final[int] = 340
SIDEBAR_WIDTH_FRACTION: Final[float] = 0.3
FOLD_BREAKPOINT_SP: Final[int] = 640

# Page Identifiers
EMPTY_PAGE_ID: Final[str] = "empty"
APPLICATIONS_PAGE_ID: Final[str] = "with-applications"
PERMISSIONS_PAGE_ID: Final[str] = "with-permissions"

# Icons
ICON_BACK: Final[str] = "go-previous-symbolic"
ICON_MENU: Final[str] = "open-menu-symbolic"
ICON_EMPTY: Final[str] = "system-search-symbolic"
ICON_ERROR: Final[str] = "dialog-error-symbolic"


# =============================================================================
# WINDOW
# =============================================================================
class PermissionCenterWindow(Adw.ApplicationWindow):
    """
    Main window. Builds the widget tree and renders the rows the shell
    controller hands over; all behavior lives in `ShellController`.
    """

    __gtype_name__ = "PermissionCenterWindow"

    def __init__(self, application: Adw.Application, load_error: str | None = None) -> None:
        super().__init__(application=application, title=APP_TITLE)
        self.set_default_size(WINDOW_DEFAULT_WIDTH, WINDOW_DEFAULT_HEIGHT)

        self.layout = LayoutState()
        self.applications_list = ApplicationList()
        self._registrations = Registrations()
        self._list_rows: dict[int, rows.ApplicationListRow] = {}
        self._current_group: Adw.PreferencesGroup | None = None

        self._build_ui(load_error)
        self._wire_view()

    # ─────────────────────────────────────────────────────────────────────────
    # UI CONSTRUCTION
    # ─────────────────────────────────────────────────────────────────────────
    def _build_ui(self, load_error: str | None) -> None:
        self._split = Adw.NavigationSplitView(
            min_sidebar_width=SIDEBAR_MIN_WIDTH,
            max_sidebar_width=SIDEBAR_MAX_WIDTH,
            sidebar_width_fraction=SIDEBAR_WIDTH_FRACTION,
        )
        self._split.set_sidebar(
            Adw.NavigationPage(
                title="Applications",
                tag=PANE_APPLICATIONS,
                child=self._create_applications_pane(load_error),
            )
        )
        self._split.set_content(
            Adw.NavigationPage(
                title="Permissions",
                tag=PANE_PERMISSIONS,
                child=self._create_permissions_pane(load_error),
            )
        )
        self.set_content(self._split)

        fold_breakpoint = Adw.Breakpoint.new(
            Adw.BreakpointCondition.parse(f"max-width: {FOLD_BREAKPOINT_SP}sp")
        )
        fold_breakpoint.add_setter(self._split, "collapsed", True)
        self.add_breakpoint(fold_breakpoint)

    def _create_applications_pane(self, load_error: str | None) -> Adw.ToolbarView:
        view = Adw.ToolbarView()

        self.applications_bar = rows.PaneHeaderBar(APP_TITLE)
        menu = Gio.Menu()
        menu.append("About Permission Center", "app.about")
        menu.append("Quit", "app.quit")
        self.applications_bar.pack_end(Gtk.MenuButton(icon_name=ICON_MENU, menu_model=menu))
        view.add_top_bar(self.applications_bar)

        self.search_entry = Gtk.SearchEntry(placeholder_text="Search applications…")
        self.search_entry.set_margin_start(12)
        self.search_entry.set_margin_end(12)
        self.search_entry.set_margin_bottom(6)
        view.add_top_bar(self.search_entry)

        self._list_box = Gtk.ListBox(css_classes=["navigation-sidebar"])
        self._list_box.set_selection_mode(Gtk.SelectionMode.SINGLE)
        scroll = Gtk.ScrolledWindow(vexpand=True, child=self._list_box)
        scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)

        self._applications_stack = Gtk.Stack()
        self._applications_stack.add_named(
            self._create_status_page("No Applications", load_error), EMPTY_PAGE_ID
        )
        self._applications_stack.add_named(scroll, APPLICATIONS_PAGE_ID)
        self._applications_stack.set_visible_child_name(EMPTY_PAGE_ID)
        view.set_content(self._applications_stack)
        return view

    def _create_permissions_pane(self, load_error: str | None) -> Adw.ToolbarView:
        view = Adw.ToolbarView()

        self.permissions_bar = rows.PaneHeaderBar()
        self.back_button = Gtk.ToggleButton(icon_name=ICON_BACK, visible=False)
        self.back_button.set_tooltip_text("Back")
        self.permissions_bar.pack_start(self.back_button)
        self.reset_button = Gtk.Button(label="Reset", css_classes=["destructive-action"])
        self.reset_button.set_tooltip_text("Reset to defaults")
        self.permissions_bar.pack_end(self.reset_button)
        view.add_top_bar(self.permissions_bar)

        self._permissions_page = Adw.PreferencesPage()
        self._app_info = rows.AppInfoViewer()
        info_group = Adw.PreferencesGroup()
        info_group.add(self._app_info)
        self._permissions_page.add(info_group)

        self._permissions_stack = Gtk.Stack()
        self._permissions_stack.add_named(
            self._create_status_page("No Permissions", load_error), EMPTY_PAGE_ID
        )
        self._permissions_stack.add_named(self._permissions_page, PERMISSIONS_PAGE_ID)
        self._permissions_stack.set_visible_child_name(EMPTY_PAGE_ID)
        view.set_content(self._permissions_stack)
        return view

    def _create_status_page(self, title: str, load_error: str | None) -> Adw.StatusPage:
        if load_error:
            return Adw.StatusPage(
                icon_name=ICON_ERROR,
                title="Catalog Error",
                description=GLib.markup_escape_text(load_error),
            )
        return Adw.StatusPage(icon_name=ICON_EMPTY, title=title)

    def _wire_view(self) -> None:
        """Keep the widgets in step with the toolkit-free state objects."""
        connect = self._registrations.connect

        connect(self.applications_list, "row-added", self._on_application_added)
        connect(self.applications_list, "row-selected", self._on_application_selected)
        connect(self._list_box, "row-selected", self._on_list_box_row_selected)

        self._registrations.add(bind_property(self._split, "collapsed", self.layout, "folded"))
        self._registrations.add(bind_property(self.layout, "folded", self._app_info, "compact"))
        connect(self.layout, "notify::visible-pane", self._on_visible_pane_changed)
        connect(self._split, "notify::show-content", self._on_show_content_changed)
        connect(self, "destroy", self._on_destroy)

    # ─────────────────────────────────────────────────────────────────────────
    # ROWS
    # ─────────────────────────────────────────────────────────────────────────
    def add_group_row(self, row: GroupRow) -> None:
        self._current_group = rows.GroupHeader(row)
        self._permissions_page.add(self._current_group)

    def add_permission_row(self, row: PermissionRow) -> None:
        if self._current_group is None:
            self._current_group = Adw.PreferencesGroup()
            self._permissions_page.add(self._current_group)
        self._current_group.add(rows.build_permission_row(row))

    def show_application(self, row: ApplicationRow) -> None:
        self._app_info.show_application(row)

    def show_populated(self) -> None:
        self._applications_stack.set_visible_child_name(APPLICATIONS_PAGE_ID)
        self._permissions_stack.set_visible_child_name(PERMISSIONS_PAGE_ID)

    def focus_search(self) -> None:
        self.search_entry.grab_focus()

    # ─────────────────────────────────────────────────────────────────────────
    # VIEW SYNC
    # ─────────────────────────────────────────────────────────────────────────
    def _on_application_added(self, _list: ApplicationList, row: ApplicationRow) -> None:
        rows.add_icon_search_path(row.theme_path)
        widget = rows.ApplicationListRow(row)
        self._list_rows[id(row)] = widget
        self._list_box.append(widget)

    def _on_application_selected(self, _list: ApplicationList, row: ApplicationRow) -> None:
        widget = self._list_rows.get(id(row))
        if widget is not None and self._list_box.get_selected_row() is not widget:
            self._list_box.select_row(widget)

    def _on_list_box_row_selected(
        self,
        _list_box: Gtk.ListBox,
        widget: Gtk.ListBoxRow | None,
    ) -> None:
        if isinstance(widget, rows.ApplicationListRow):
            self.applications_list.select_row(widget.item)

    def _on_visible_pane_changed(self, layout: LayoutState, _pspec: Any) -> None:
        show_content = layout.visible_pane == PANE_PERMISSIONS
        if self._split.get_show_content() != show_content:
            self._split.set_show_content(show_content)

    def _on_show_content_changed(self, split: Adw.NavigationSplitView, _pspec: Any) -> None:
        pane = PANE_PERMISSIONS if split.get_show_content() else PANE_APPLICATIONS
        if self.layout.visible_pane != pane:
            self.layout.visible_pane = pane

    def _on_destroy(self, *_args: Any) -> None:
        self._registrations.dispose()


# =============================================================================
# APPLICATION
# =============================================================================
class PermissionCenter(Adw.Application):
    """Application controller: loads the catalog and owns the shell."""

    def __init__(self) -> None:
        super().__init__(
            application_id=APP_ID,
            flags=Gio.ApplicationFlags.FLAGS_NONE,
        )
        self._window: PermissionCenterWindow | None = None
        self._shell: ShellController | None = None
        self._css_provider: Gtk.CssProvider | None = None
        self._display: Gdk.Display | None = None

    # ─────────────────────────────────────────────────────────────────────────
    # LIFECYCLE HOOKS
    # ─────────────────────────────────────────────────────────────────────────
    def do_startup(self) -> None:
        Adw.Application.do_startup(self)
        self._add_action("about", self._on_about)
        self._add_action("quit", self._on_quit, ["<Control>q"])
        self._add_action("search", self._on_search, ["<Control>f"])

    def do_activate(self) -> None:
        if self._window:
            self._window.present()
            return

        catalog_path = utility.resolve_data_file(CATALOG_FILENAME)
        catalog, error = utility.load_catalog(catalog_path)
        if error:
            log.error("%s", error)
        else:
            log.info("Loaded catalog from %s", catalog_path)

        self._apply_css(utility.resolve_data_file(CSS_FILENAME))

        overrides_path = utility.data_dir() / OVERRIDES_FILENAME
        self._window = PermissionCenterWindow(self, error)
        self._shell = ShellController(
            self._window,
            ApplicationsModel(catalog),
            PermissionsModel(catalog, utility.load_overrides(overrides_path), overrides_path),
            Gtk.Settings.get_default(),
        )
        self._shell.start()

        self._window.maximize()
        self._window.present()

    def do_shutdown(self) -> None:
        """Flush the model if the window did not already do it."""
        if self._shell is not None:
            self._shell.shutdown()
        self._remove_css_provider()
        Adw.Application.do_shutdown(self)

    # ─────────────────────────────────────────────────────────────────────────
    # ACTIONS
    # ─────────────────────────────────────────────────────────────────────────
    def _add_action(self, name: str, callback: Any, accels: list[str] | None = None) -> None:
        action = Gio.SimpleAction.new(name, None)
        action.connect("activate", callback)
        self.add_action(action)
        if accels:
            self.set_accels_for_action(f"app.{name}", accels)

    def _on_about(self, *_args: Any) -> None:
        about = Adw.AboutDialog(
            application_name=APP_TITLE,
            application_icon=APP_ID,
            version=__version__,
            license_type=Gtk.License.GPL_3_0,
        )
        about.present(self._window)

    def _on_quit(self, *_args: Any) -> None:
        if self._window:
            self._window.close()
        else:
            self.quit()

    def _on_search(self, *_args: Any) -> None:
        if self._window:
            self._window.focus_search()

    # ─────────────────────────────────────────────────────────────────────────
    # RESOURCE MANAGEMENT
    # ─────────────────────────────────────────────────────────────────────────
    def _apply_css(self, css_path: Path) -> None:
        """Apply the stylesheet to the default display."""
        self._remove_css_provider()

        try:
            css = css_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.info("No custom CSS file found at: %s", css_path)
            return
        except OSError as e:
            log.warning("Failed to read CSS file: %s", e)
            return

        self._display = Gdk.Display.get_default()
        if self._display is None:
            log.warning("No default display available for CSS")
            return

        provider = Gtk.CssProvider()
        try:
            provider.load_from_string(css)
            Gtk.StyleContext.add_provider_for_display(
                self._display,
                provider,
                Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION,
            )
            self._css_provider = provider
        except GLib.Error as e:
            log.error("CSS parsing failed: %s", e.message)

    def _remove_css_provider(self) -> None:
        if self._css_provider is not None and self._display is not None:
            Gtk.StyleContext.remove_provider_for_display(self._display, self._css_provider)
        self._css_provider = None


# =============================================================================
# ENTRY POINT
# =============================================================================
def main() -> int:
    """Application entry point."""
    app = PermissionCenter()
    return app.run(sys.argv)


if __name__ == "__main__":
    sys.exit(main())
