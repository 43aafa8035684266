"""
Signal and binding handles with explicit, once-only disposal.

Every `connect()` made by the panel goes through `connect()` here so the
caller holds a handle it can release; `Registrations` collects handles and
releases all of them exactly once on teardown.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

import gi

gi.require_version("GObject", "2.0")
from gi.repository import GObject

log = logging.getLogger(__name__)


class Disposable(Protocol):
    def dispose(self) -> None: ...


class SignalHandle:
    """A connected signal handler that can be disconnected once."""

    __slots__ = ("_source", "_handler_id", "signal")

    def __init__(self, source: GObject.Object, signal: str, handler_id: int) -> None:
        self._source: GObject.Object | None = source
        self._handler_id = handler_id
        self.signal = signal

    @property
    def connected(self) -> bool:
        return self._source is not None

    def dispose(self) -> None:
        if self._source is None:
            return
        source, handler_id = self._source, self._handler_id
        self._source = None
        self._handler_id = 0
        if source.handler_is_connected(handler_id):
            source.disconnect(handler_id)


class BindingHandle:
    """Wraps a GObject.Binding so it is unbound at most once."""

    __slots__ = ("_binding",)

    def __init__(self, binding: GObject.Binding) -> None:
        self._binding: GObject.Binding | None = binding

    @property
    def connected(self) -> bool:
        return self._binding is not None

    def dispose(self) -> None:
        if self._binding is None:
            return
        binding, self._binding = self._binding, None
        binding.unbind()


def connect(
    source: GObject.Object,
    signal: str,
    callback: Callable[..., Any],
    *user_data: Any,
) -> SignalHandle:
    """Connect `callback` to `signal` and return its handle."""
    return SignalHandle(source, signal, source.connect(signal, callback, *user_data))


def bind_property(
    source: GObject.Object,
    source_property: str,
    target: GObject.Object,
    target_property: str,
) -> BindingHandle:
    """One-way, sync-on-create binding from `source` to `target`."""
    binding = source.bind_property(
        source_property, target, target_property, GObject.BindingFlags.SYNC_CREATE
    )
    return BindingHandle(binding)


class PropertyLink:
    """
    Two-way link between two GObject properties built from two one-way
    observers. Each side only writes when the values differ, so an update
    never bounces back to where it came from.
    """

    __slots__ = ("_handles",)

    def __init__(
        self,
        first: GObject.Object,
        first_property: str,
        second: GObject.Object,
        second_property: str,
    ) -> None:
        _copy_if_different(first, first_property, second, second_property)
        self._handles = (
            connect(
                first, f"notify::{first_property}", self._on_notify,
                first_property, second, second_property,
            ),
            connect(
                second, f"notify::{second_property}", self._on_notify,
                second_property, first, first_property,
            ),
        )

    @staticmethod
    def _on_notify(
        source: GObject.Object,
        _pspec: GObject.ParamSpec,
        source_property: str,
        target: GObject.Object,
        target_property: str,
    ) -> None:
        _copy_if_different(source, source_property, target, target_property)

    def dispose(self) -> None:
        for handle in self._handles:
            handle.dispose()


def link_properties(
    first: GObject.Object,
    first_property: str,
    second: GObject.Object,
    second_property: str,
) -> PropertyLink:
    """Link two properties both ways; `first` wins the initial sync."""
    return PropertyLink(first, first_property, second, second_property)


def _copy_if_different(
    source: GObject.Object,
    source_property: str,
    target: GObject.Object,
    target_property: str,
) -> None:
    value = source.get_property(source_property)
    if target.get_property(target_property) != value:
        target.set_property(target_property, value)


class Registrations:
    """A bag of handles released together, exactly once."""

    __slots__ = ("_handles", "_is_disposed")

    def __init__(self) -> None:
        self._handles: list[Disposable] = []
        self._is_disposed = False

    def __len__(self) -> int:
        return len(self._handles)

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    def add(self, handle: Disposable) -> Disposable:
        if self._is_disposed:
            # Late registrations are released immediately.
            handle.dispose()
        else:
            self._handles.append(handle)
        return handle

    def connect(
        self,
        source: GObject.Object,
        signal: str,
        callback: Callable[..., Any],
        *user_data: Any,
    ) -> SignalHandle:
        handle = connect(source, signal, callback, *user_data)
        self.add(handle)
        return handle

    def dispose(self) -> None:
        if self._is_disposed:
            return
        self._is_disposed = True
        handles, self._handles = self._handles, []
        log.debug("Releasing %d registration(s)", len(handles))
        for handle in reversed(handles):
            handle.dispose()
