import logging
import threading
import time
from typing import Iterable, List, Optional

from core.models.telemetry import (
    Coordinates,
    RobotStatus,
    RobotStatusUpdate,
    SensorReading,
    SensorReadingUpdate,
    Statistics,
    StatisticsUpdate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    TelemetryEnvelope,
)

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """Raised when a task id does not exist in the cache."""

    def __init__(self, task_id: int):
        super().__init__(f"Task #{task_id} not found")
        self.task_id = task_id


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class TelemetryCache:
    """
    Last-known robot, sensor, task and statistics values.

    Writers are the transports (possibly from a network thread) and the write
    API; readers get deep copies so the cache cannot be mutated from outside.
    Every category update happens under one lock acquisition.
    """

    def __init__(
        self,
        robot: Optional[RobotStatus] = None,
        sensors: Optional[SensorReading] = None,
        tasks: Optional[Iterable[Task]] = None,
        statistics: Optional[Statistics] = None,
    ):
        self._lock = threading.Lock()
        self._robot = robot or RobotStatus()
        self._sensors = sensors or SensorReading()
        self._tasks: List[Task] = list(tasks or [])
        self._statistics = statistics or Statistics()
        self._next_task_id = max((task.id for task in self._tasks), default=0) + 1
        self.last_update: Optional[float] = None

    @classmethod
    def with_demo_data(cls) -> "TelemetryCache":
        """Cache seeded with the values the emulated robot starts from."""
        return cls(
            robot=RobotStatus(
                battery=85, speed=1.2, temperature=28,
                coordinates=Coordinates(lat=40.2, lon=116.4),
            ),
            sensors=SensorReading(soil_humidity=65, soil_temp=22, light=8000, air_humidity=55),
            tasks=[
                Task(id=1, name="A区灌溉作业", status=TaskStatus.ACTIVE, progress=45),
                Task(id=2, name="B区病虫害检测", status=TaskStatus.PENDING, progress=0),
                Task(id=3, name="D区施肥作业", status=TaskStatus.DONE, progress=100),
            ],
            statistics=Statistics(completed_area=12.5, total_area=38.2),
        )

    def _touch(self):
        self.last_update = time.time()

    # Reads

    def robot_status(self) -> RobotStatus:
        with self._lock:
            return self._robot.model_copy(deep=True)

    def sensor_reading(self) -> SensorReading:
        with self._lock:
            return self._sensors.model_copy(deep=True)

    def statistics(self) -> Statistics:
        with self._lock:
            return self._statistics.model_copy(deep=True)

    def tasks(self) -> List[Task]:
        with self._lock:
            return [task.model_copy(deep=True) for task in self._tasks]

    # Merges

    def merge_robot_status(self, update: RobotStatusUpdate) -> RobotStatus:
        fields = update.model_dump(exclude_unset=True, exclude_none=True)
        coordinates = fields.pop("coordinates", {})
        for axis in ("lat", "lon"):
            if axis in fields:
                coordinates[axis] = fields.pop(axis)
        if "battery" in fields:
            fields["battery"] = _clamp(fields["battery"], 0, 100)
        if "speed" in fields:
            fields["speed"] = max(0.0, fields["speed"])

        with self._lock:
            fields["coordinates"] = self._robot.coordinates.model_copy(update=coordinates)
            self._robot = self._robot.model_copy(update=fields)
            self._touch()
            return self._robot.model_copy(deep=True)

    def merge_sensor_reading(self, update: SensorReadingUpdate) -> SensorReading:
        fields = update.model_dump(exclude_unset=True, exclude_none=True)
        for key in ("soil_humidity", "air_humidity"):
            if key in fields:
                fields[key] = _clamp(fields[key], 0, 100)
        if "light" in fields:
            fields["light"] = _clamp(fields["light"], 0, 100000)

        with self._lock:
            self._sensors = self._sensors.model_copy(update=fields)
            self._touch()
            return self._sensors.model_copy(deep=True)

    def merge_statistics(self, update: StatisticsUpdate) -> Statistics:
        fields = update.model_dump(exclude_unset=True, exclude_none=True)

        with self._lock:
            total = max(0.0, fields.get("total_area", self._statistics.total_area))
            completed = _clamp(fields.get("completed_area", self._statistics.completed_area), 0.0, total)
            self._statistics = Statistics(completed_area=completed, total_area=total)
            self._touch()
            return self._statistics.model_copy(deep=True)

    def replace_tasks(self, tasks: List[Task]) -> List[Task]:
        """Replace the task list with one pushed by the robot."""
        ids = [task.id for task in tasks]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate task ids in task list: {ids}")

        with self._lock:
            self._tasks = [task.model_copy(update={"progress": _clamp(task.progress, 0, 100)}) for task in tasks]
            # Ids handed out earlier stay retired even if the robot dropped them.
            self._next_task_id = max(self._next_task_id, max(ids, default=0) + 1)
            self._touch()
            logger.debug("Task list replaced (%d tasks, next id %d)", len(ids), self._next_task_id)
            return [task.model_copy(deep=True) for task in self._tasks]

    def apply_envelope(self, envelope: TelemetryEnvelope):
        if envelope.robot is not None:
            self.merge_robot_status(envelope.robot)
        if envelope.sensors is not None:
            self.merge_sensor_reading(envelope.sensors)
        if envelope.tasks is not None:
            self.replace_tasks(envelope.tasks)
        if envelope.statistics is not None:
            self.merge_statistics(envelope.statistics)

    # Task CRUD

    def create_task(self, data: TaskCreate) -> Task:
        with self._lock:
            task = Task(
                id=self._next_task_id,
                name=data.name,
                status=data.status,
                progress=_clamp(data.progress, 0, 100),
            )
            self._next_task_id += 1
            self._tasks.append(task)
            self._touch()
            return task.model_copy(deep=True)

    def update_task(self, task_id: int, data: TaskUpdate) -> Task:
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        if "progress" in fields:
            fields["progress"] = _clamp(fields["progress"], 0, 100)

        with self._lock:
            for index, task in enumerate(self._tasks):
                if task.id == task_id:
                    self._tasks[index] = task.model_copy(update=fields)
                    self._touch()
                    return self._tasks[index].model_copy(deep=True)
        raise TaskNotFoundError(task_id)

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            remaining = [task for task in self._tasks if task.id != task_id]
            if len(remaining) == len(self._tasks):
                raise TaskNotFoundError(task_id)
            self._tasks = remaining
            self._touch()
