import logging
from typing import Optional

from dashboard.activity_log import ActivityLog, LogLevel
from dashboard.api_client import ApiError, RobotApiClient

logger = logging.getLogger(__name__)

KEY_MAP = {
    "ArrowUp": "forward",
    "w": "forward",
    "W": "forward",
    "ArrowDown": "backward",
    "s": "backward",
    "S": "backward",
    "ArrowLeft": "left",
    "a": "left",
    "A": "left",
    "ArrowRight": "right",
    "d": "right",
    "D": "right",
    " ": "stop",
}


class ControlPanel:
    """Direction buttons, work buttons and keyboard shortcuts, wired to the control endpoint."""

    def __init__(self, client: RobotApiClient, log: ActivityLog):
        self.client = client
        self.log = log

    async def move(self, direction: str) -> Optional[dict]:
        try:
            result = await self.client.send_command(direction)
        except ApiError as e:
            logger.warning(f"Command {direction} failed: {e}")
            self.log.add("指令发送失败", LogLevel.ERROR)
            return None
        self.log.add(result.get("message", ""), LogLevel.INFO if result.get("executed") else LogLevel.WARNING)
        return result

    async def execute_action(self, action: str) -> Optional[dict]:
        try:
            result = await self.client.send_action(action)
        except ApiError as e:
            logger.warning(f"Action {action} failed: {e}")
            self.log.add("操作执行失败", LogLevel.ERROR)
            return None
        self.log.add(result.get("message", ""), LogLevel.INFO if result.get("executed") else LogLevel.WARNING)
        return result

    async def handle_key(self, key: str) -> Optional[dict]:
        """Translate a key press into a motion command. Unmapped keys are ignored."""
        direction = KEY_MAP.get(key)
        if direction is None:
            return None
        return await self.move(direction)
