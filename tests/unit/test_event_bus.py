"""
core.event_bus 單元測試
驗證事件發佈/訂閱、萬用字元、優先序、歷史紀錄。
"""

import pytest

from model_matchers.core.event_bus import EventBus


@pytest.mark.unit
class TestEventBusBasic:
    """基本 emit / on / off"""

    def setup_method(self):
        self.bus = EventBus()

    def test_emit_and_receive(self):
        received = []
        self.bus.on("matcher.evaluated", lambda e: received.append(e.data))
        self.bus.emit("matcher.evaluated", {"matched": True})
        assert received == [{"matched": True}]

    def test_decorator_style(self):
        received = []

        @self.bus.on("macro.registered")
        def handler(event):
            received.append(event.name)

        self.bus.emit("macro.registered")
        assert received == ["macro.registered"]

    def test_off_removes_handler(self):
        received = []
        handler = lambda e: received.append(1)
        self.bus.on("x", handler)
        self.bus.off("x", handler)
        self.bus.emit("x")
        assert received == []

    def test_off_all_handlers(self):
        received = []
        self.bus.on("x", lambda e: received.append(1))
        self.bus.on("x", lambda e: received.append(2))
        self.bus.off("x")
        self.bus.emit("x")
        assert received == []

    def test_handler_error_does_not_stop_others(self):
        """handler 出錯只記 log，其他 handler 照樣執行"""
        received = []

        def broken(event):
            raise RuntimeError("boom")

        self.bus.on("x", broken, priority=1)
        self.bus.on("x", lambda e: received.append(e.name), priority=2)
        self.bus.emit("x")
        assert received == ["x"]


@pytest.mark.unit
class TestEventBusMatching:
    """萬用字元與優先序"""

    def setup_method(self):
        self.bus = EventBus()

    def test_wildcard_star(self):
        received = []
        self.bus.on("*", lambda e: received.append(e.name))
        self.bus.emit("macro.registered")
        self.bus.emit("matcher.evaluated")
        assert received == ["macro.registered", "matcher.evaluated"]

    def test_prefix_wildcard(self):
        received = []
        self.bus.on("macro.*", lambda e: received.append(e.name))
        self.bus.emit("macro.registered")
        self.bus.emit("macro.deprecated")
        self.bus.emit("matcher.evaluated")
        assert received == ["macro.registered", "macro.deprecated"]

    def test_priority_order(self):
        order = []
        self.bus.on("x", lambda e: order.append("late"), priority=20)
        self.bus.on("x", lambda e: order.append("early"), priority=1)
        self.bus.emit("x")
        assert order == ["early", "late"]


@pytest.mark.unit
class TestEventBusHistory:

    def test_history_filter_and_limit(self):
        bus = EventBus()
        for i in range(5):
            bus.emit("a", {"i": i})
        bus.emit("b")
        assert len(bus.get_history()) == 6
        assert [e.data["i"] for e in bus.get_history("a", limit=2)] == [3, 4]

    def test_max_history(self):
        bus = EventBus(max_history=3)
        for i in range(10):
            bus.emit("a", {"i": i})
        assert [e.data["i"] for e in bus.get_history()] == [7, 8, 9]

    def test_clear(self):
        bus = EventBus()
        received = []
        bus.on("a", lambda e: received.append(1))
        bus.emit("a")
        bus.clear()
        bus.emit("a")
        assert received == [1]
        assert [e.name for e in bus.get_history()] == ["a"]

    def test_source_recorded(self):
        event = EventBus().emit("a", source="macros")
        assert event.source == "macros"


@pytest.mark.unit
class TestEventBusQueries:

    def test_subscribers_order(self):
        bus = EventBus()
        first = lambda e: None
        second = lambda e: None
        wildcard = lambda e: None
        bus.on("macro.registered", second, priority=5)
        bus.on("macro.*", wildcard, priority=1)
        bus.on("macro.registered", first, priority=5)
        assert bus.subscribers("macro.registered") == [wildcard, second, first]
        assert bus.subscribers("matcher.evaluated") == []

    def test_prefix_needs_dot(self):
        bus = EventBus()
        handler = lambda e: None
        bus.on("macro.*", handler)
        assert bus.subscribers("macros") == []

    def test_history_where(self):
        bus = EventBus()
        bus.emit("matcher.evaluated", {"matcher": "column", "matched": True})
        bus.emit("matcher.evaluated", {"matcher": "index", "matched": False})
        failures = bus.get_history("matcher.evaluated", matched=False)
        assert [e.data["matcher"] for e in failures] == ["index"]

    def test_off_bound_method(self):
        """bound method 每次取用都是新物件，仍要能取消訂閱"""
        class Recorder:
            def __init__(self):
                self.events = []

            def record(self, event):
                self.events.append(event)

        bus = EventBus()
        recorder = Recorder()
        bus.on("x", recorder.record)
        bus.off("x", recorder.record)
        bus.emit("x")
        assert recorder.events == []
