from permission_center.lib.tracker import ResetController

from conftest import FakeButton


class _Model:
    def __init__(self) -> None:
        self.resets = 0

    def reset(self) -> None:
        self.resets += 1


def test_button_starts_insensitive() -> None:
    button = FakeButton()
    ResetController(_Model(), button)
    assert button.sensitive is False


def test_button_follows_model_reports() -> None:
    button = FakeButton()
    tracker = ResetController(_Model(), button)

    tracker.on_model_changed(None, True)
    assert button.sensitive is True
    assert tracker.has_overrides

    tracker.on_model_changed(None, False)
    assert button.sensitive is False
    assert not tracker.has_overrides


def test_selection_switch_clears_stale_state() -> None:
    button = FakeButton()
    tracker = ResetController(_Model(), button)
    tracker.on_model_changed(None, True)

    tracker.on_selection_changed()

    assert button.sensitive is False
    assert not tracker.has_overrides


def test_reset_delegates_to_the_model() -> None:
    model = _Model()
    tracker = ResetController(model, FakeButton())

    tracker.reset(FakeButton())

    assert model.resets == 1
