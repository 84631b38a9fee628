"""Tests for synchronous EventBus dispatch."""

from __future__ import annotations

import pluggy

from inmask.plugins.event_bus import EventBus
from inmask.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("inmask")


class Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int]] = []

    @hookimpl
    def post_field_change(self, field_id: str, value: str, caret: int) -> None:
        self.calls.append((field_id, value, caret))


class Exploder:
    @hookimpl
    def post_edit_rejected(self, field_id: str, value: str, caret: int, reason: str) -> None:
        raise ValueError(f"cannot handle {reason}")


def _bus(*plugins: object) -> EventBus:
    pm = PluginManager()
    for plugin in plugins:
        pm.register_plugin(plugin)
    return EventBus(pm)


class TestDispatch:
    def test_delivers_inline(self) -> None:
        recorder = Recorder()
        bus = _bus(recorder)
        ok = bus.dispatch("post_field_change", {"field_id": "f", "value": "12", "caret": 2})
        assert ok is True
        assert recorder.calls == [("f", "12", 2)]

    def test_no_plugins(self) -> None:
        bus = _bus()
        assert bus.dispatch("post_field_change", {"field_id": "f", "value": "", "caret": 0})
        assert bus.failures == []

    def test_unknown_hook_is_dropped(self) -> None:
        bus = _bus(Recorder())
        assert bus.dispatch("post_nothing", {}) is True

    def test_failure_becomes_record(self) -> None:
        bus = _bus(Exploder())
        ok = bus.dispatch(
            "post_edit_rejected",
            {"field_id": "f", "value": "1", "caret": 1, "reason": "max_digits"},
        )
        assert ok is False
        assert bus.failures == [
            {"hook_name": "post_edit_rejected", "error": "cannot handle max_digits"}
        ]

    def test_failures_is_a_copy(self) -> None:
        bus = _bus(Exploder())
        bus.dispatch(
            "post_edit_rejected",
            {"field_id": "f", "value": "", "caret": 0, "reason": "pattern"},
        )
        bus.failures.clear()
        assert len(bus.failures) == 1
