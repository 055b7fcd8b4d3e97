from typing import List

from fastapi import APIRouter, HTTPException

from core.models.telemetry import Task, TaskCreate, TaskUpdate
from core.telemetry_cache import TaskNotFoundError
from routers.services import get_query_service
from schemas import ApiResponse, MessageResponse

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _parse_task_id(task_id: str) -> int:
    try:
        value = int(task_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="无效的任务ID")
    if value <= 0:
        raise HTTPException(status_code=400, detail="无效的任务ID")
    return value


@router.get("", response_model=ApiResponse[List[Task]], response_model_exclude_none=True)
async def get_tasks() -> ApiResponse[List[Task]]:
    """All tasks in creation order."""
    tasks = await get_query_service().get_tasks()
    return ApiResponse[List[Task]](data=tasks)


@router.post("", response_model=ApiResponse[Task], response_model_exclude_none=True)
async def create_task(data: TaskCreate) -> ApiResponse[Task]:
    """Create a task. `status` defaults to `pending` and `progress` to 0."""
    try:
        task = get_query_service().create_task(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ApiResponse[Task](data=task, message="任务创建成功")


@router.put("/{task_id}", response_model=ApiResponse[Task], response_model_exclude_none=True, responses={
    404: {
        "description": "Unknown task id.",
        "content": {
            "application/json": {
                "example": {"success": False, "message": "任务 #42 不存在"}
            }
        }
    }
})
async def update_task(task_id: str, data: TaskUpdate) -> ApiResponse[Task]:
    task_number = _parse_task_id(task_id)
    if not data.model_fields_set:
        raise HTTPException(status_code=400, detail="请至少提供一个更新字段")
    try:
        task = get_query_service().update_task(task_number, data)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=f"任务 #{task_number} 不存在")
    return ApiResponse[Task](data=task, message="任务更新成功")


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: str) -> MessageResponse:
    """Delete a task. Its id is never handed out again."""
    task_number = _parse_task_id(task_id)
    try:
        get_query_service().delete_task(task_number)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail=f"任务 #{task_number} 不存在")
    return MessageResponse(message="任务删除成功")
