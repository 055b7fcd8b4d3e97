import logging
from dataclasses import dataclass
from typing import Optional

from core.transports.base import CommandKind, Transport

logger = logging.getLogger(__name__)

COMMAND_LABELS = {
    "forward": "前进",
    "backward": "后退",
    "left": "左转",
    "right": "右转",
    "stop": "停止",
}

ACTION_LABELS = {
    "irrigation": "灌溉",
    "fertilize": "施肥",
    "scan": "扫描",
    "harvest": "收割",
}


class InvalidCommandError(ValueError):
    """Raised when a control request carries neither or both of command/action."""


@dataclass
class DispatchResult:
    executed: bool
    message: str
    command: Optional[str] = None
    action: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"executed": self.executed, "message": self.message}
        if self.command is not None:
            result["command"] = self.command
        if self.action is not None:
            result["action"] = self.action
        return result


class CommandDispatcher:
    """Validates motion commands and field actions and forwards them to the transport."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def dispatch(self, command: Optional[str] = None, action: Optional[str] = None) -> DispatchResult:
        if not command and not action:
            raise InvalidCommandError("缺少 command 或 action 参数")
        if command and action:
            raise InvalidCommandError("command 和 action 参数不能同时提供")

        if command:
            ack = await self.transport.send_command(CommandKind.COMMAND, command)
            message = f"指令已发送: {COMMAND_LABELS.get(command, command)}" if ack.executed else ack.message
            result = DispatchResult(ack.executed, message, command=command)
        else:
            ack = await self.transport.send_command(CommandKind.ACTION, action)
            message = f"{ACTION_LABELS.get(action, action)}作业已启动" if ack.executed else ack.message
            result = DispatchResult(ack.executed, message, action=action)

        if ack.executed:
            logger.info(message)
        else:
            logger.warning(f"Control request not executed: {message}")
        return result
