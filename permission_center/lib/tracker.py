"""Override tracking for the selected application and the reset button."""
from __future__ import annotations

import logging
from typing import Any, Protocol

log = logging.getLogger(__name__)


class Resettable(Protocol):
    def reset(self) -> None: ...


class SensitiveWidget(Protocol):
    def set_sensitive(self, sensitive: bool) -> None: ...


class ResetController:
    """
    Mirrors the model's override state onto the reset button.

    The controller never works out overrides itself; it only reacts to the
    model's `changed` signal. Between a selection switch and the model's first
    report for the new application the button is insensitive.
    """

    __slots__ = ("_model", "_button", "_has_overrides")

    def __init__(self, model: Resettable, button: SensitiveWidget) -> None:
        self._model = model
        self._button = button
        self._has_overrides = False
        self._button.set_sensitive(False)

    @property
    def has_overrides(self) -> bool:
        return self._has_overrides

    def on_model_changed(self, _model: Any, overridden: bool) -> None:
        self._set(bool(overridden))

    def on_selection_changed(self) -> None:
        self._set(False)

    def reset(self, *_args: Any) -> None:
        """Ask the model to drop the selected application's overrides."""
        log.debug("Reset requested")
        self._model.reset()

    def _set(self, overridden: bool) -> None:
        self._has_overrides = overridden
        self._button.set_sensitive(overridden)
