"""
Rows handed by the shell to the rendering layer.

These are plain GObjects, not widgets: the widgets in `rows.py` mirror their
properties. Keeping them toolkit-free lets the shell run without a display.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

import gi

gi.require_version("GObject", "2.0")
from gi.repository import GObject

from permission_center.lib.catalog import Application, PermissionEntry, PermissionKind

log = logging.getLogger(__name__)


# =============================================================================
# APPLICATIONS
# =============================================================================
class ApplicationRow(GObject.Object):
    """One application in the sidebar list."""

    __gtype_name__ = "PermissionCenterApplicationRow"

    visible = GObject.Property(type=bool, default=True)

    def __init__(self, application: Application) -> None:
        super().__init__()
        self.application = application

    @property
    def app_id(self) -> str:
        return self.application.app_id

    @property
    def app_name(self) -> str:
        return self.application.app_name

    @property
    def theme_path(self) -> str:
        return self.application.theme_path


class ApplicationList(GObject.Object):
    """
    Ordered application rows with single selection and a filter.

    Mirrors the parts of Gtk.ListBox the shell relies on: `append`,
    `get_row_at_index`, `select_row`, `get_selected_row`, `set_filter_func`
    and `invalidate_filter`. Filtering only flips each row's `visible`
    property, so the order of the rows never changes.
    """

    __gtype_name__ = "PermissionCenterApplicationList"

    __gsignals__ = {
        "row-added": (GObject.SignalFlags.RUN_FIRST, None, (object,)),
        "row-selected": (GObject.SignalFlags.RUN_FIRST, None, (object,)),
    }

    def __init__(self) -> None:
        super().__init__()
        self._rows: list[ApplicationRow] = []
        self._selected: ApplicationRow | None = None
        self._filter_func: Callable[[ApplicationRow], bool] | None = None

    def get_n_rows(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[ApplicationRow]:
        return iter(list(self._rows))

    def append(self, row: ApplicationRow) -> None:
        self._rows.append(row)
        if self._filter_func is not None:
            row.visible = self._filter_func(row)
        self.emit("row-added", row)

    def get_row_at_index(self, index: int) -> ApplicationRow | None:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    def get_selected_row(self) -> ApplicationRow | None:
        return self._selected

    def select_row(self, row: ApplicationRow | None) -> None:
        """Select `row`; unknown rows and re-selection are ignored."""
        if row is None or row is self._selected:
            return
        if not any(candidate is row for candidate in self._rows):
            log.debug("Ignoring selection of a row outside the list")
            return
        self._selected = row
        self.emit("row-selected", row)

    def set_filter_func(self, func: Callable[[ApplicationRow], bool] | None) -> None:
        self._filter_func = func
        self.invalidate_filter()

    def invalidate_filter(self) -> None:
        for row in self._rows:
            visible = True if self._filter_func is None else bool(self._filter_func(row))
            if row.visible != visible:
                row.visible = visible

    def get_visible_rows(self) -> list[ApplicationRow]:
        return [row for row in self._rows if row.visible]


# =============================================================================
# PERMISSIONS
# =============================================================================
class PermissionContent(GObject.Object):
    """The editable value of a permission row."""

    __gtype_name__ = "PermissionCenterPermissionContent"

    active = GObject.Property(type=bool, default=False)
    text = GObject.Property(type=str, default="")


class PermissionRow(GObject.Object):
    __gtype_name__ = "PermissionCenterPermissionRow"

    sensitive = GObject.Property(type=bool, default=True)

    def __init__(self, entry: PermissionEntry) -> None:
        super().__init__()
        self.entry = entry
        self.content = PermissionContent()
        self.content.set_property(entry.kind.content_property, entry.value)
        self.sensitive = entry.supported

    @property
    def permission(self) -> str:
        return self.entry.permission

    @property
    def kind(self) -> PermissionKind:
        return self.entry.kind

    @property
    def description(self) -> str:
        return self.entry.description

    @property
    def group(self) -> str:
        return self.entry.group

    @property
    def value(self) -> bool | str:
        return self.content.get_property(self.entry.kind.content_property)


class GroupRow(GObject.Object):
    """Header shown once before each contiguous run of a group."""

    __gtype_name__ = "PermissionCenterGroupRow"

    def __init__(self, group: str, group_description: str) -> None:
        super().__init__()
        self.group = group
        self.group_description = group_description
