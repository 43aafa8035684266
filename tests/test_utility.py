import pytest
import yaml

from permission_center.lib import utility


@pytest.fixture
def xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path


def test_xdg_directories(xdg) -> None:
    assert utility.config_dir() == xdg / "config" / utility.APP_DIRNAME
    assert utility.data_dir() == xdg / "data" / utility.APP_DIRNAME


def test_blank_xdg_variable_uses_home(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", "  ")
    monkeypatch.setenv("HOME", str(tmp_path))

    assert utility.config_dir() == tmp_path / ".config" / utility.APP_DIRNAME


def test_user_data_file_wins_over_bundled(xdg) -> None:
    assert utility.resolve_data_file("catalog.yaml") == utility.PACKAGE_DATA_DIR / "catalog.yaml"

    user_copy = utility.config_dir() / "catalog.yaml"
    user_copy.parent.mkdir(parents=True)
    user_copy.write_text("permissions: []\n")

    assert utility.resolve_data_file("catalog.yaml") == user_copy


def test_bundled_catalog_loads() -> None:
    catalog, error = utility.load_catalog(utility.PACKAGE_DATA_DIR / "catalog.yaml")

    assert error is None
    assert catalog["permissions"]
    assert catalog["applications"]


@pytest.mark.parametrize(
    ("content", "message"),
    [
        (None, "not found"),
        ("permissions: [unclosed\n", "parse error"),
        ("- just\n- a list\n", "not a dictionary"),
        ("permissions: {a: 1}\n", "'permissions' must be a list"),
    ],
)
def test_broken_catalogs_report_errors(tmp_path, content, message) -> None:
    path = tmp_path / "catalog.yaml"
    if content is not None:
        path.write_text(content)

    catalog, error = utility.load_catalog(path)

    assert catalog == {}
    assert message in error


def test_empty_catalog_file_is_an_empty_catalog(tmp_path) -> None:
    path = tmp_path / "catalog.yaml"
    path.write_text("")

    assert utility.load_catalog(path) == ({}, None)


def test_overrides_round_trip_omits_empty_applications(tmp_path) -> None:
    path = tmp_path / "nested" / "overrides.yaml"

    assert utility.save_overrides(path, {"org.app.A": {"shared-ipc": True}, "org.app.B": {}})
    assert yaml.safe_load(path.read_text()) == {"org.app.A": {"shared-ipc": True}}
    assert utility.load_overrides(path) == {"org.app.A": {"shared-ipc": True}}


def test_nothing_to_save_creates_no_file(tmp_path) -> None:
    path = tmp_path / "overrides.yaml"

    assert utility.save_overrides(path, {"org.app.A": {}})
    assert not path.exists()


def test_clearing_overrides_rewrites_an_existing_file(tmp_path) -> None:
    path = tmp_path / "overrides.yaml"
    path.write_text("org.app.A: {shared-ipc: true}\n")

    assert utility.save_overrides(path, {})
    assert yaml.safe_load(path.read_text()) == {}


def test_malformed_overrides_are_ignored(tmp_path) -> None:
    path = tmp_path / "overrides.yaml"
    path.write_text("org.app.A: true\norg.app.B: {shared-ipc: true}\n")
    assert utility.load_overrides(path) == {"org.app.B": {"shared-ipc": True}}

    path.write_text("[broken\n")
    assert utility.load_overrides(path) == {}

    assert utility.load_overrides(tmp_path / "missing.yaml") == {}
