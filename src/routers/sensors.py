from fastapi import APIRouter, HTTPException

from core.models.telemetry import SensorReading, SensorReadingUpdate
from routers.services import get_query_service
from schemas import ApiResponse

router = APIRouter(prefix="/sensors", tags=["sensors"])


@router.get("", response_model=ApiResponse[SensorReading], response_model_exclude_none=True)
async def get_sensors() -> ApiResponse[SensorReading]:
    reading = await get_query_service().get_sensor_reading()
    return ApiResponse[SensorReading](data=reading)


@router.post("", response_model=ApiResponse[SensorReading], response_model_exclude_none=True)
async def update_sensors(update: SensorReadingUpdate) -> ApiResponse[SensorReading]:
    """Merge the supplied sensor values; humidity and light are clamped to their physical range."""
    if not update.model_fields_set:
        raise HTTPException(status_code=400, detail="请至少提供一个传感器数据字段")
    reading = get_query_service().update_sensor_reading(update)
    return ApiResponse[SensorReading](data=reading, message="传感器数据更新成功")
