"""
pytest plugin

在 conftest.py 加上：

    pytest_plugins = ["model_matchers.plugin"]

提供：
- subject fixture：測試類別 / 模組宣告的 described_type 的新 instance
- model_adapter fixture：預設資料庫連線上的 DjangoAdapter
- model_matchers marker：macro 產生的測試都會帶上
- 測試結束時輸出 matcher 評估摘要
"""

from collections import Counter

import pytest

from model_matchers.adapters.django_adapter import DjangoAdapter
from model_matchers.config.config import Config
from model_matchers.core.event_bus import event_bus
from model_matchers.core.exceptions import MissingSubjectError
from model_matchers.utils.logger import logger


class MatcherMetrics:
    """收集 matcher 評估結果"""

    def __init__(self):
        self.accepted: Counter = Counter()
        self.rejected: Counter = Counter()

    def record(self, event) -> None:
        kind = event.data.get("matcher", "?")
        if event.data.get("matched"):
            self.accepted[kind] += 1
        else:
            self.rejected[kind] += 1

    @property
    def total(self) -> int:
        return sum(self.accepted.values()) + sum(self.rejected.values())

    def summary_lines(self) -> list[str]:
        sep = "=" * 60
        lines = [
            "",
            sep,
            "  MODEL MATCHERS 評估摘要",
            sep,
            f"  總計:   {self.total} 次評估",
            "",
        ]
        for kind in sorted(set(self.accepted) | set(self.rejected)):
            lines.append(
                f"    {kind:<16} 符合 {self.accepted[kind]:>4}   不符合 {self.rejected[kind]:>4}"
            )
        lines.append("")
        return lines


_metrics = MatcherMetrics()


# ── pytest hooks ──

def pytest_configure(config):
    config.addinivalue_line(
        "markers", "model_matchers: 由 model_matchers macro 產生的測試"
    )
    for warning in Config.validate():
        logger.warning(warning)
    event_bus.on("matcher.evaluated", _metrics.record)


def pytest_unconfigure(config):
    event_bus.off("matcher.evaluated", _metrics.record)


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """在終端機輸出 matcher 評估摘要"""
    if _metrics.total == 0:
        return
    for line in _metrics.summary_lines():
        terminalreporter.write_line(line)


# ── fixtures ──

def described_type_for(request):
    """依序尋找測試類別、測試模組上的 described_type"""
    described_type = getattr(request.cls, "described_type", None) if request.cls else None
    if described_type is None:
        described_type = getattr(request.module, "described_type", None)
    if described_type is None:
        raise MissingSubjectError(request.node.nodeid)
    return described_type


@pytest.fixture
def model_adapter():
    """matcher 使用的 ORM adapter，可在 conftest 覆寫"""
    return DjangoAdapter(using=Config.DATABASE_ALIAS)


@pytest.fixture
def subject(request):
    """
    受測 model 的新 instance。

    需要特定欄位值時請在測試中覆寫此 fixture。
    """
    return described_type_for(request)()
