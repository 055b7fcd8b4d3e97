from fastapi import APIRouter, HTTPException

from core.models.telemetry import RobotStatus, RobotStatusUpdate
from core.services.command_dispatcher import InvalidCommandError
from routers.services import get_command_dispatcher, get_query_service
from schemas import ApiResponse, ControlRequest, ControlResponse

router = APIRouter(prefix="/robot", tags=["robot"])


@router.get("/status", response_model=ApiResponse[RobotStatus], response_model_exclude_none=True)
async def get_robot_status() -> ApiResponse[RobotStatus]:
    """Current battery, speed, temperature and GPS position."""
    status = await get_query_service().get_robot_status()
    return ApiResponse[RobotStatus](data=status)


@router.post("/status", response_model=ApiResponse[RobotStatus], response_model_exclude_none=True)
async def update_robot_status(update: RobotStatusUpdate) -> ApiResponse[RobotStatus]:
    """
    Merge the supplied fields into the robot status.

    Fields that are not sent keep their current value. `lat`/`lon` may be sent
    flat or inside `coordinates`.
    """
    if not update.model_fields_set:
        raise HTTPException(status_code=400, detail="请至少提供一个状态字段")
    status = get_query_service().update_robot_status(update)
    return ApiResponse[RobotStatus](data=status, message="机器人状态更新成功")


@router.post("/control", response_model=ControlResponse, response_model_exclude_none=True, responses={
    400: {
        "description": "Neither or both of command/action supplied.",
        "content": {
            "application/json": {
                "example": {"success": False, "message": "缺少 command 或 action 参数"}
            }
        }
    }
})
async def send_control(request: ControlRequest) -> ControlResponse:
    """
    Send a motion command (`forward`, `backward`, `left`, `right`, `stop`) or a
    field action (`irrigation`, `fertilize`, `scan`, `harvest`) to the robot.

    Exactly one of `command` and `action` must be given. A transport that is down
    yields `executed: false` with the reason in `message`, not an error status.
    """
    try:
        result = await get_command_dispatcher().dispatch(command=request.command, action=request.action)
    except InvalidCommandError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ControlResponse(**result.to_dict())
