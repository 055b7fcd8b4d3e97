"""Tests for ChartHistory and ActivityLog."""
from itertools import count

import pytest

from dashboard.activity_log import ActivityLog, LogLevel
from dashboard.chart_history import ChartHistory


def sequential_labels():
    counter = count()
    return lambda: f"t{next(counter)}"


class TestChartHistory:

    def test_eviction_keeps_newest_in_order(self):
        history = ChartHistory(capacity=3, label_factory=sequential_labels())
        for battery in (90, 80, 70, 60):
            history.append({"battery": battery}, {"soilHumidity": 50, "soilTemp": 20, "light": 8000})

        assert len(history) == 3
        assert history.labels() == ["t1", "t2", "t3"]
        assert history.series("battery") == [80, 70, 60]

    def test_default_capacity(self):
        history = ChartHistory()
        for i in range(21):
            history.append({"battery": i}, {})
        assert len(history) == 20
        assert history.series("battery")[0] == 1

    def test_missing_values_default_to_zero(self):
        history = ChartHistory(label_factory=sequential_labels())
        point = history.append({}, {"light": 900})
        assert point.battery == 0
        assert point.light == 900

    def test_as_dict(self):
        history = ChartHistory(label_factory=sequential_labels())
        history.append({"battery": 50}, {"soilHumidity": 60, "soilTemp": 21, "light": 7000})
        assert history.as_dict() == {
            "labels": ["t0"],
            "battery": [50],
            "soilHumidity": [60],
            "soilTemp": [21],
            "light": [7000],
        }

    def test_unknown_metric(self):
        with pytest.raises(KeyError):
            ChartHistory().series("speed")


class TestActivityLog:

    def test_newest_first_and_bounded(self):
        log = ActivityLog(max_entries=10)
        for i in range(12):
            log.add(f"event {i}")
        entries = log.entries()
        assert len(entries) == 10
        assert entries[0].message == "event 11"
        assert entries[-1].message == "event 2"

    def test_level(self):
        log = ActivityLog()
        entry = log.add("后端连接断开", LogLevel.ERROR)
        assert entry.level == LogLevel.ERROR
        assert len(entry.time) == 8
