"""
Model ↔ row synchronization.

A binding is two one-directional observers:

- model `value-changed` → row content property
- row content `notify::<property>` → `model.set_value()`

Each side compares before writing, so a change made on one side reaches the
other exactly once and stops there.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import gi

gi.require_version("GObject", "2.0")
from gi.repository import GObject

from permission_center.lib.catalog import PermissionKind
from permission_center.lib.signals import SignalHandle, connect

log = logging.getLogger(__name__)


class PermissionSource(Protocol):
    def get_value(self, key: str) -> Any: ...
    def set_value(self, key: str, value: Any) -> None: ...
    def connect(self, signal: str, callback: Any, *args: Any) -> int: ...


class BindableRow(Protocol):
    content: GObject.Object


@dataclass(slots=True)
class PermissionBinding:
    row: BindableRow
    key: str
    kind: PermissionKind
    to_row: SignalHandle
    to_model: SignalHandle

    @property
    def is_live(self) -> bool:
        return self.to_row.connected and self.to_model.connected

    def unbind(self) -> None:
        self.to_row.dispose()
        self.to_model.dispose()


class PermissionBinder:
    """Keeps at most one live binding per (row, permission key)."""

    __slots__ = ("_model", "_bindings")

    def __init__(self, model: PermissionSource) -> None:
        self._model = model
        self._bindings: dict[tuple[int, str], PermissionBinding] = {}

    def __len__(self) -> int:
        return len(self._bindings)

    def get_binding(self, row: BindableRow, key: str) -> PermissionBinding | None:
        return self._bindings.get((id(row), key))

    def bind(self, row: BindableRow, key: str, kind: PermissionKind) -> None:
        """Link `row.content` with the model value of `key`, replacing any old link."""
        self.unbind(row, key)

        prop = kind.content_property
        content = row.content
        self._write_row(content, prop, self._model.get_value(key))

        self._bindings[(id(row), key)] = PermissionBinding(
            row=row,
            key=key,
            kind=kind,
            to_row=connect(
                self._model, "value-changed", self._on_model_value_changed, content, key, prop
            ),
            to_model=connect(
                content, f"notify::{prop}", self._on_row_value_changed, key, prop
            ),
        )
        log.debug("Bound '%s' to %s.%s", key, type(row).__name__, prop)

    def unbind(self, row: BindableRow, key: str) -> None:
        binding = self._bindings.pop((id(row), key), None)
        if binding is not None:
            binding.unbind()

    def unbind_all(self) -> None:
        bindings, self._bindings = self._bindings, {}
        for binding in bindings.values():
            binding.unbind()

    # ─────────────────────────────────────────────────────────────────────────
    # OBSERVERS
    # ─────────────────────────────────────────────────────────────────────────
    def _on_model_value_changed(
        self,
        _model: GObject.Object,
        key: str,
        value: Any,
        content: GObject.Object,
        bound_key: str,
        prop: str,
    ) -> None:
        if key == bound_key:
            self._write_row(content, prop, value)

    def _on_row_value_changed(
        self,
        content: GObject.Object,
        _pspec: GObject.ParamSpec,
        key: str,
        prop: str,
    ) -> None:
        value = content.get_property(prop)
        if self._model.get_value(key) != value:
            self._model.set_value(key, value)

    @staticmethod
    def _write_row(content: GObject.Object, prop: str, value: Any) -> None:
        if content.get_property(prop) != value:
            content.set_property(prop, value)
