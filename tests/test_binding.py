from permission_center.lib.binding import PermissionBinder
from permission_center.lib.catalog import PermissionKind
from permission_center.lib.viewmodels import PermissionRow


def _row(model, key: str) -> PermissionRow:
    entry = next(e for e in model.get_all() if e.permission == key)
    return PermissionRow(entry)


def test_bind_syncs_row_from_model(model) -> None:
    model.set_selected_application("org.app.A")
    row = _row(model, "shared-network")
    assert row.content.active is False

    PermissionBinder(model).bind(row, "shared-network", PermissionKind.TOGGLE)

    assert row.content.active is True


def test_model_changes_reach_the_row(model) -> None:
    model.set_selected_application("org.app.B")
    row = _row(model, "shared-ipc")
    PermissionBinder(model).bind(row, "shared-ipc", PermissionKind.TOGGLE)

    model.set_value("shared-ipc", True)

    assert row.content.active is True


def test_row_toggle_updates_model_without_echo(model, record_signal) -> None:
    model.set_selected_application("org.app.B")
    row = _row(model, "shared-ipc")
    PermissionBinder(model).bind(row, "shared-ipc", PermissionKind.TOGGLE)
    notifies = record_signal(row.content, "notify::active")
    value_changes = record_signal(model, "value-changed")

    row.content.active = True

    assert model.get_value("shared-ipc") is True
    assert len(notifies) == 1
    assert value_changes == [("shared-ipc", True)]


def test_text_rows_bind_the_text_property(model) -> None:
    model.set_selected_application("org.app.B")
    row = _row(model, "filesystems-other")
    PermissionBinder(model).bind(row, "filesystems-other", PermissionKind.TEXT)

    row.content.text = "xdg-download"
    assert model.get_value("filesystems-other") == "xdg-download"

    model.set_value("filesystems-other", "~/Games")
    assert row.content.text == "~/Games"


def test_rebinding_replaces_the_previous_link(model, record_signal) -> None:
    model.set_selected_application("org.app.B")
    row = _row(model, "shared-ipc")
    binder = PermissionBinder(model)
    binder.bind(row, "shared-ipc", PermissionKind.TOGGLE)
    first = binder.get_binding(row, "shared-ipc")

    binder.bind(row, "shared-ipc", PermissionKind.TOGGLE)
    value_changes = record_signal(model, "value-changed")
    row.content.active = True

    assert len(binder) == 1
    assert not first.is_live
    assert binder.get_binding(row, "shared-ipc").is_live
    assert value_changes == [("shared-ipc", True)]


def test_unsupported_rows_stay_bound(model) -> None:
    model.set_selected_application("org.app.B")
    row = _row(model, "sockets-x11")
    PermissionBinder(model).bind(row, "sockets-x11", PermissionKind.TOGGLE)

    assert row.sensitive is False
    model.set_value("sockets-x11", True)
    assert row.content.active is True


def test_unbind_all_stops_propagation(model) -> None:
    model.set_selected_application("org.app.B")
    row = _row(model, "shared-ipc")
    binder = PermissionBinder(model)
    binder.bind(row, "shared-ipc", PermissionKind.TOGGLE)

    binder.unbind_all()
    model.set_value("shared-ipc", True)
    row.content.active = False

    assert len(binder) == 0
    assert model.get_value("shared-ipc") is True
    assert row.content.active is False


def test_other_keys_do_not_touch_the_row(model, record_signal) -> None:
    model.set_selected_application("org.app.B")
    row = _row(model, "shared-ipc")
    PermissionBinder(model).bind(row, "shared-ipc", PermissionKind.TOGGLE)
    notifies = record_signal(row.content, "notify::active")

    model.set_value("shared-network", True)

    assert notifies == []
