from fastapi import APIRouter, HTTPException

from core.models.telemetry import Statistics, StatisticsUpdate
from routers.services import get_query_service
from schemas import ApiResponse

router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("", response_model=ApiResponse[Statistics], response_model_exclude_none=True)
async def get_statistics() -> ApiResponse[Statistics]:
    stats = await get_query_service().get_statistics()
    return ApiResponse[Statistics](data=stats)


@router.post("", response_model=ApiResponse[Statistics], response_model_exclude_none=True)
async def update_statistics(update: StatisticsUpdate) -> ApiResponse[Statistics]:
    """
    Update worked and total area. `progress` is derived from the two and cannot be set.
    The completed area is capped at the total area.
    """
    if not update.model_fields_set:
        raise HTTPException(status_code=400, detail="请至少提供一个统计字段")
    stats = get_query_service().update_statistics(update)
    return ApiResponse[Statistics](data=stats, message="统计数据更新成功")
