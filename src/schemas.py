import time
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.transports.base import TransportState

T = TypeVar("T")


def now_ms() -> int:
    return int(time.time() * 1000)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    timestamp: int = Field(default_factory=now_ms)
    message: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: int = Field(default_factory=now_ms)


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class ControlRequest(BaseModel):
    command: Optional[str] = None
    action: Optional[str] = None


class ControlResponse(BaseModel):
    success: bool = True
    timestamp: int = Field(default_factory=now_ms)
    executed: bool
    command: Optional[str] = None
    action: Optional[str] = None
    message: str


class DataSourceStatus(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    transport_type: str
    connected: bool
    state: TransportState
    last_update_timestamp: Optional[int] = None
