from fastapi import APIRouter

from core.service_manager import service_manager
from routers.services import get_query_service
from schemas import ApiResponse, DataSourceStatus

router = APIRouter(prefix="/datasource", tags=["datasource"])


@router.get("", response_model=ApiResponse[DataSourceStatus], response_model_exclude_none=True)
async def get_data_source_status() -> ApiResponse[DataSourceStatus]:
    """Which transport feeds the cache, whether it is connected and when data last arrived."""
    get_query_service()
    state = service_manager.transport.get_connection_state()
    last_update = state.last_update_timestamp
    return ApiResponse[DataSourceStatus](data=DataSourceStatus(
        transport_type=state.transport_type,
        connected=state.connected,
        state=state.state,
        last_update_timestamp=int(last_update * 1000) if last_update is not None else None,
    ))
