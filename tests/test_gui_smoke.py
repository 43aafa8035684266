"""Widget smoke tests; they need GTK 4, libadwaita and a display."""
import pytest

gi = pytest.importorskip("gi")

try:
    gi.require_version("Gtk", "4.0")
    gi.require_version("Adw", "1")
    from gi.repository import Adw, Gtk
except (ImportError, ValueError):
    pytest.skip("GTK 4 or libadwaita is not available", allow_module_level=True)

if not Gtk.init_check():
    pytest.skip("No display available", allow_module_level=True)

Adw.init()

from permission_center.lib.catalog import parse_permissions  # noqa: E402
from permission_center.lib.rows import (  # noqa: E402
    PaneHeaderBar,
    PermissionEntryRow,
    PermissionSwitchRow,
    build_permission_row,
)
from permission_center.lib.viewmodels import PermissionRow  # noqa: E402

pytestmark = pytest.mark.gui


@pytest.fixture
def rows(catalog):
    return {e.permission: PermissionRow(e) for e in parse_permissions(catalog["permissions"])}


def test_row_widget_matches_kind(rows) -> None:
    assert isinstance(build_permission_row(rows["shared-ipc"]), PermissionSwitchRow)
    assert isinstance(build_permission_row(rows["filesystems-other"]), PermissionEntryRow)


def test_switch_follows_row_content_both_ways(rows) -> None:
    item = rows["shared-ipc"]
    widget = PermissionSwitchRow(item)

    item.content.active = True
    assert widget.toggle_switch.get_active()

    widget.toggle_switch.set_active(False)
    assert item.content.active is False


def test_unsupported_row_is_insensitive(rows) -> None:
    assert not PermissionSwitchRow(rows["sockets-x11"]).get_sensitive()


def test_entry_row_commits_on_apply(rows) -> None:
    item = rows["filesystems-other"]
    widget = PermissionEntryRow(item)

    widget.set_text(" ~/Games ")
    assert item.content.text == ""

    widget.emit("apply")
    assert item.content.text == "~/Games"

    item.content.text = "home"
    assert widget.get_text() == "home"


def test_header_bar_window_controls_property() -> None:
    bar = PaneHeaderBar("Title")
    header = bar.get_child()

    bar.show_window_controls = True
    assert header.get_show_start_title_buttons()
    assert header.get_show_end_title_buttons()

    bar.show_window_controls = False
    assert not header.get_show_end_title_buttons()
