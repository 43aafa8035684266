from __future__ import annotations

import copy

import gi
import pytest

gi.require_version("GObject", "2.0")
from gi.repository import GObject

from permission_center.lib.catalog import ApplicationsModel
from permission_center.lib.navigation import LayoutState
from permission_center.lib.permissions import PermissionsModel
from permission_center.lib.viewmodels import ApplicationList


CATALOG = {
    "permissions": [
        {
            "group": "share",
            "group_description": "Subsystems shared with the host",
            "description": "Network",
            "property": "shared-network",
            "kind": "toggle",
            "default": False,
        },
        {
            "group": "share",
            "group_description": "Subsystems shared with the host",
            "description": "Inter-process communications",
            "property": "shared-ipc",
            "kind": "toggle",
            "default": False,
        },
        {
            "group": "socket",
            "group_description": "Sockets available in the sandbox",
            "description": "X11 windowing system",
            "property": "sockets-x11",
            "kind": "toggle",
            "default": False,
            "supported": False,
        },
        {
            "group": "filesystem",
            "group_description": "Filesystem subsets",
            "description": "Other files",
            "property": "filesystems-other",
            "kind": "text",
            "default": "",
        },
    ],
    "applications": [
        {
            "id": "org.app.A",
            "name": "App A",
            "theme_path": "/tmp/a/icons",
            "permissions": {"shared-network": True},
        },
        {
            "id": "org.app.B",
            "name": "App B",
        },
    ],
}


# =============================================================================
# WIDGET FAKES
# =============================================================================
class FakeButton(GObject.Object):
    __gsignals__ = {"clicked": (GObject.SignalFlags.RUN_FIRST, None, ())}

    sensitive = GObject.Property(type=bool, default=True)

    def set_sensitive(self, sensitive: bool) -> None:
        self.sensitive = sensitive


class FakeToggleButton(FakeButton):
    visible = GObject.Property(type=bool, default=False)
    active = GObject.Property(type=bool, default=False)


class FakeSearchEntry(GObject.Object):
    __gsignals__ = {
        "search-changed": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "stop-search": (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    text = GObject.Property(type=str, default="")

    def get_text(self) -> str:
        return self.text

    def set_text(self, text: str) -> None:
        self.text = text

    def type_text(self, text: str) -> None:
        self.text = text
        self.emit("search-changed")


class FakeHeaderBar(GObject.Object):
    show_window_controls = GObject.Property(type=bool, default=False)

    def __init__(self) -> None:
        super().__init__()
        self.title = ""

    def set_title(self, title: str) -> None:
        self.title = title


class FakeSettings(GObject.Object):
    """Stands in for Gtk.Settings and counts connected handlers."""

    gtk_decoration_layout = GObject.Property(type=str, default="menu:minimize,maximize,close")

    def __init__(self) -> None:
        super().__init__()
        self.handler_ids: set[int] = set()

    def connect(self, signal, callback, *args):
        handler_id = super().connect(signal, callback, *args)
        self.handler_ids.add(handler_id)
        return handler_id

    def disconnect(self, handler_id):
        super().disconnect(handler_id)
        self.handler_ids.discard(handler_id)


class FakeWindow(GObject.Object):
    __gsignals__ = {"destroy": (GObject.SignalFlags.RUN_FIRST, None, ())}

    def __init__(self) -> None:
        super().__init__()
        self.applications_list = ApplicationList()
        self.search_entry = FakeSearchEntry()
        self.reset_button = FakeButton()
        self.back_button = FakeToggleButton()
        self.applications_bar = FakeHeaderBar()
        self.permissions_bar = FakeHeaderBar()
        self.layout = LayoutState()

        self.permission_area: list[GObject.Object] = []
        self.shown_application = None
        self.populated = False
        self.title = ""

    def add_group_row(self, row) -> None:
        self.permission_area.append(row)

    def add_permission_row(self, row) -> None:
        self.permission_area.append(row)

    def show_application(self, row) -> None:
        self.shown_application = row

    def show_populated(self) -> None:
        self.populated = True

    def set_title(self, title: str) -> None:
        self.title = title


class CountingPermissionsModel(PermissionsModel):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.shutdown_calls = 0
        self.reset_calls = 0

    def reset(self) -> None:
        self.reset_calls += 1
        super().reset()

    def shutdown(self) -> None:
        self.shutdown_calls += 1
        super().shutdown()


# =============================================================================
# FIXTURES
# =============================================================================
@pytest.fixture
def catalog():
    return copy.deepcopy(CATALOG)


@pytest.fixture
def model(catalog):
    return CountingPermissionsModel(catalog)


@pytest.fixture
def applications(catalog):
    return ApplicationsModel(catalog)


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def settings():
    return FakeSettings()


@pytest.fixture
def record_signal():
    """Collect emissions of a signal as lists of their arguments."""

    def _record(source, signal):
        calls = []
        source.connect(signal, lambda _source, *args: calls.append(args))
        return calls

    return _record
