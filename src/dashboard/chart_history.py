from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping

from core.models.circular_buffer import CircularBuffer

METRICS = ("battery", "soilHumidity", "soilTemp", "light")


@dataclass(frozen=True)
class HistoryPoint:
    label: str
    battery: float
    soilHumidity: float
    soilTemp: float
    light: float


def _clock_label() -> str:
    return datetime.now().strftime("%H:%M:%S")


class ChartHistory:
    """Rolling window of the samples shown on the live charts."""

    def __init__(self, capacity: int = 20, label_factory: Callable[[], str] = _clock_label):
        self._buffer: CircularBuffer[HistoryPoint] = CircularBuffer(capacity)
        self._label_factory = label_factory

    @property
    def capacity(self) -> int:
        return self._buffer.capacity

    def append(self, robot: Mapping[str, Any], sensors: Mapping[str, Any]) -> HistoryPoint:
        """Record one sample; the oldest one is dropped once the window is full."""
        point = HistoryPoint(
            label=self._label_factory(),
            battery=robot.get("battery") or 0,
            soilHumidity=sensors.get("soilHumidity") or 0,
            soilTemp=sensors.get("soilTemp") or 0,
            light=sensors.get("light") or 0,
        )
        self._buffer.append(point)
        return point

    def points(self) -> List[HistoryPoint]:
        return self._buffer.get_all()

    def labels(self) -> List[str]:
        return [point.label for point in self._buffer.get_all()]

    def series(self, metric: str) -> List[float]:
        if metric not in METRICS:
            raise KeyError(metric)
        return [getattr(point, metric) for point in self._buffer.get_all()]

    def as_dict(self) -> Dict[str, List]:
        data: Dict[str, List] = {"labels": self.labels()}
        for metric in METRICS:
            data[metric] = self.series(metric)
        return data

    def __len__(self) -> int:
        return self._buffer.size()

    def clear(self):
        self._buffer.clear()
