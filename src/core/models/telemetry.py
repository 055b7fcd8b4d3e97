"""
Telemetry data models shared by the cache, the transports and the API.

Field names are snake_case in Python and camelCase on the wire.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    """Lifecycle of a field task."""
    ACTIVE = "active"
    PENDING = "pending"
    DONE = "done"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinates(CamelModel):
    lat: float = Field(0.0, ge=-90, le=90)
    lon: float = Field(0.0, ge=-180, le=180)


class RobotStatus(CamelModel):
    battery: float = 0.0
    speed: float = 0.0
    temperature: float = 0.0
    coordinates: Coordinates = Field(default_factory=Coordinates)


class SensorReading(CamelModel):
    soil_humidity: float = 0.0
    soil_temp: float = 0.0
    light: float = 0.0
    air_humidity: float = 0.0


class Task(CamelModel):
    id: int
    name: str
    status: TaskStatus = TaskStatus.PENDING
    progress: float = 0.0


class Statistics(CamelModel):
    completed_area: float = 0.0
    total_area: float = 0.0

    @computed_field
    @property
    def progress(self) -> float:
        """Completion percentage, derived on every read."""
        if self.total_area <= 0:
            return 0.0
        return self.completed_area / self.total_area * 100


# Partial updates. Unknown fields are rejected instead of being silently ignored.

class PatchModel(CamelModel):
    model_config = ConfigDict(extra="forbid")


class CoordinatesUpdate(PatchModel):
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)


class RobotStatusUpdate(PatchModel):
    battery: Optional[float] = None
    speed: Optional[float] = None
    temperature: Optional[float] = None
    coordinates: Optional[CoordinatesUpdate] = None
    # Flat lat/lon are accepted as a shortcut for coordinates.
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)


class SensorReadingUpdate(PatchModel):
    soil_humidity: Optional[float] = None
    soil_temp: Optional[float] = None
    light: Optional[float] = None
    air_humidity: Optional[float] = None


class StatisticsUpdate(PatchModel):
    completed_area: Optional[float] = None
    total_area: Optional[float] = None


class StatisticsReport(StatisticsUpdate):
    """Statistics pushed by the robot. A reported progress is accepted and dropped."""
    progress: Optional[float] = Field(None, exclude=True)


class TaskCreate(PatchModel):
    name: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    progress: float = 0.0


class TaskUpdate(PatchModel):
    name: Optional[str] = None
    status: Optional[TaskStatus] = None
    progress: Optional[float] = None


class TelemetryEnvelope(PatchModel):
    """Combined payload pushed by stream transports (serial, WebSocket)."""
    robot: Optional[RobotStatusUpdate] = None
    sensors: Optional[SensorReadingUpdate] = None
    tasks: Optional[List[Task]] = None
    statistics: Optional[StatisticsReport] = None

    @model_validator(mode="after")
    def check_unique_task_ids(self) -> "TelemetryEnvelope":
        if self.tasks is not None:
            ids = [task.id for task in self.tasks]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate task ids in task list: {ids}")
        return self
