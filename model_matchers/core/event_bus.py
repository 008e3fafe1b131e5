"""
Event Bus — matcher 生命週期事件

pytest plugin 的評估摘要、使用者自己的 hook 都透過這裡收到通知，
不必直接耦合 matcher / macro 程式碼。

內建事件：
    macro.registered     data: test, description, matcher
    macro.deprecated     data: macro, replacement
    matcher.evaluated    data: matcher, description, model, matched

用法：
    from model_matchers.core.event_bus import event_bus

    @event_bus.on("matcher.*")
    def on_matcher(event):
        print(event.data["description"], event.data["matched"])

    # 最近的失敗評估
    event_bus.get_history("matcher.evaluated", matched=False)
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from model_matchers.utils.logger import logger


@dataclass
class Event:
    """事件物件"""
    name: str
    data: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""


@dataclass(frozen=True)
class Subscription:
    """一筆訂閱；priority 相同時依訂閱順序執行"""
    pattern: str
    handler: Callable[[Event], Any]
    priority: int = 10
    seq: int = 0

    def accepts(self, event_name: str) -> bool:
        """pattern 可以是完整名稱、"macro.*" 這種前綴，或 "*" """
        if self.pattern in ("*", event_name):
            return True
        if self.pattern.endswith(".*"):
            return event_name.startswith(self.pattern[:-1])
        return False


class EventBus:
    """
    事件匯流排

    - 精確訂閱: event_bus.on("matcher.evaluated", handler)
    - 前綴:     event_bus.on("macro.*", handler)
    - 全部:     event_bus.on("*", handler)
    - 優先序:   priority 數字小先執行
    """

    def __init__(self, max_history: int = 500):
        self._subscriptions: list[Subscription] = []
        self._history: list[Event] = []
        self._max_history = max_history
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def on(self, pattern: str, handler: Callable | None = None,
           priority: int = 10) -> Callable:
        """訂閱事件。可當 decorator 或直接呼叫。"""
        def _register(fn: Callable) -> Callable:
            subscription = Subscription(pattern, fn, priority, next(self._seq))
            with self._lock:
                self._subscriptions.append(subscription)
            return fn

        if handler is not None:
            return _register(handler)
        return _register

    def off(self, pattern: str, handler: Callable | None = None) -> None:
        """取消訂閱。不指定 handler 則移除該 pattern 所有訂閱。"""
        with self._lock:
            self._subscriptions = [
                s for s in self._subscriptions
                if not (s.pattern == pattern and (handler is None or s.handler == handler))
            ]

    def subscribers(self, event_name: str) -> list[Callable]:
        """依執行順序列出會收到 event_name 的 handler"""
        with self._lock:
            matched = [s for s in self._subscriptions if s.accepts(event_name)]
        matched.sort(key=lambda s: (s.priority, s.seq))
        return [s.handler for s in matched]

    def emit(self, event_name: str, data: dict | None = None,
             source: str = "") -> Event:
        """發佈事件；handler 拋出的錯誤只記 log，不影響其他 handler"""
        event = Event(name=event_name, data=data or {}, source=source)

        with self._lock:
            self._history.append(event)
            del self._history[:-self._max_history]

        for handler in self.subscribers(event_name):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler 錯誤 [{event_name}]: {e}")

        return event

    def get_history(self, event_name: str = "", limit: int = 50,
                    **where: Any) -> list[Event]:
        """
        查詢事件歷史。

        Args:
            event_name: 只取這個名稱的事件，空字串表示全部
            limit: 最多回傳幾筆（最新的）
            where: event.data 必須相符的欄位，例如 matched=False
        """
        with self._lock:
            events = list(self._history)
        if event_name:
            events = [e for e in events if e.name == event_name]
        if where:
            events = [e for e in events if all(e.data.get(k) == v for k, v in where.items())]
        return events[-limit:]

    def clear(self) -> None:
        """清除所有訂閱與歷史"""
        with self._lock:
            self._subscriptions.clear()
            self._history.clear()


# 全域 singleton
event_bus = EventBus()
