"""Tests for RobotApiClient and ControlPanel."""
import httpx
import pytest

from dashboard.activity_log import ActivityLog, LogLevel
from dashboard.api_client import ApiError, RobotApiClient
from dashboard.controls import KEY_MAP, ControlPanel
from main import app


def backend_client():
    return RobotApiClient("http://testserver/api", transport=httpx.ASGITransport(app=app))


class TestRobotApiClient:

    @pytest.mark.asyncio
    async def test_reads(self):
        async with backend_client() as client:
            assert (await client.health())["message"] == "Server is running"
            assert (await client.get_robot_status())["battery"] == 85
            assert (await client.get_sensors())["soilHumidity"] == 65
            assert (await client.get_statistics())["totalArea"] == 38.2
            assert len(await client.get_tasks()) == 3

    @pytest.mark.asyncio
    async def test_error_envelope_raises(self):
        def handler(request):
            return httpx.Response(400, json={"success": False, "message": "缺少 command 或 action 参数"})

        async with RobotApiClient("http://robot/api", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.send_command("")
        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "缺少 command 或 action 参数"

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with RobotApiClient("http://robot/api", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ApiError, match="timed out"):
                await client.get_sensors()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        async with RobotApiClient("http://robot/api", transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>"))) as client:
            with pytest.raises(ApiError):
                await client.get_tasks()


class TestControlPanel:

    def test_key_map(self):
        assert KEY_MAP["ArrowUp"] == KEY_MAP["w"] == KEY_MAP["W"] == "forward"
        assert KEY_MAP["ArrowDown"] == KEY_MAP["s"] == "backward"
        assert KEY_MAP["a"] == "left"
        assert KEY_MAP["D"] == "right"
        assert KEY_MAP[" "] == "stop"

    @pytest.mark.asyncio
    async def test_key_sends_command(self):
        log = ActivityLog()
        async with backend_client() as client:
            panel = ControlPanel(client, log)
            result = await panel.handle_key("ArrowLeft")
            assert result["command"] == "left"
            assert await panel.handle_key("x") is None
        assert log.entries()[0].message == "指令已发送: 左转"
        assert len(log) == 1

    @pytest.mark.asyncio
    async def test_action(self):
        log = ActivityLog()
        async with backend_client() as client:
            await ControlPanel(client, log).execute_action("harvest")
        assert log.entries()[0].message == "收割作业已启动"

    @pytest.mark.asyncio
    async def test_failures_logged(self):
        def handler(request):
            raise httpx.ConnectError("down")

        log = ActivityLog()
        async with RobotApiClient("http://robot/api", transport=httpx.MockTransport(handler)) as client:
            panel = ControlPanel(client, log)
            assert await panel.move("forward") is None
            assert await panel.execute_action("scan") is None
        assert [(e.message, e.level) for e in log.entries()] == [
            ("操作执行失败", LogLevel.ERROR),
            ("指令发送失败", LogLevel.ERROR),
        ]
