import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from dashboard.activity_log import ActivityLog, LogLevel
from dashboard.alerts import AlertEngine, NotificationCenter
from dashboard.api_client import ApiError, RobotApiClient
from dashboard.chart_history import ChartHistory
from dashboard.settings import DashboardSettings

logger = logging.getLogger(__name__)

CATEGORIES = ("status", "sensors", "tasks", "statistics", "clock")


@dataclass
class DashboardState:
    robot: Dict[str, Any] = field(default_factory=dict)
    sensors: Dict[str, Any] = field(default_factory=dict)
    tasks: List[Dict[str, Any]] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)
    clock: str = ""
    # None until the first request has completed either way
    connected: Optional[bool] = None


class ClientPoller:
    """
    Refreshes each data category on its own timer.

    Every category runs as an independent asyncio task, so a slow or failing
    endpoint never holds up the others. Connectivity changes are reported once
    per transition to the activity log and the alert engine.
    """

    def __init__(
        self,
        client: RobotApiClient,
        settings: Optional[DashboardSettings] = None,
        alerts: Optional[AlertEngine] = None,
        chart: Optional[ChartHistory] = None,
        log: Optional[ActivityLog] = None,
        on_update: Optional[Callable[[str, DashboardState], None]] = None,
        intervals: Optional[Dict[str, float]] = None,
    ):
        settings = settings or DashboardSettings()
        self.client = client
        self.alerts = alerts or AlertEngine(
            cooldown=settings.alert_cooldown,
            history_size=settings.alert_history_size,
            notifications=NotificationCenter(duration=settings.notification_duration),
        )
        self.chart = chart or ChartHistory(settings.chart_capacity)
        self.log = log or ActivityLog(settings.activity_log_size)
        self.on_update = on_update
        self.state = DashboardState()
        self.intervals: Dict[str, float] = {
            "status": settings.status_interval,
            "sensors": settings.sensors_interval,
            "tasks": settings.tasks_interval,
            "statistics": settings.statistics_interval,
            "clock": settings.clock_interval,
        }
        if intervals:
            self.intervals.update(intervals)
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def start(self):
        """Launch one polling task per category. Calling it again while running does nothing."""
        if self._tasks:
            return
        loop = asyncio.get_running_loop()
        for category in CATEGORIES:
            self._tasks[category] = loop.create_task(self._run(category), name=f"poll-{category}")
        logger.info("Polling started: %s", self.intervals)

    async def stop(self):
        """Cancel every polling task and wait for them to finish."""
        tasks, self._tasks = list(self._tasks.values()), {}
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("Polling stopped")

    async def _run(self, category: str):
        interval = self.intervals[category]
        while True:
            try:
                await self.poll_once(category)
            except Exception:
                logger.exception("Unexpected error while polling %s", category)
            await asyncio.sleep(interval)

    async def poll_once(self, category: str) -> bool:
        """Run a single refresh of one category. Returns True on success."""
        if category == "clock":
            self.state.clock = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self._notify(category)
            return True

        try:
            if category == "status":
                data = await self.client.get_robot_status()
            elif category == "sensors":
                data = await self.client.get_sensors()
            elif category == "tasks":
                data = await self.client.get_tasks()
            elif category == "statistics":
                data = await self.client.get_statistics()
            else:
                raise ValueError(f"Unknown poll category '{category}'")
        except ApiError as e:
            logger.debug("Polling %s failed: %s", category, e)
            # An error envelope still proves the backend is reachable
            self._set_connected(e.status_code is not None)
            return False

        self._set_connected(True)
        if category == "status":
            self.state.robot = data
            self.alerts.check(self.state.robot, self.state.sensors)
            # Charts need both halves of the sample
            if self.state.sensors:
                self.chart.append(self.state.robot, self.state.sensors)
        elif category == "sensors":
            self.state.sensors = data
            self.alerts.check(self.state.robot, self.state.sensors)
        elif category == "tasks":
            self.state.tasks = data
        else:
            self.state.statistics = data
        self._notify(category)
        return True

    def _set_connected(self, connected: bool):
        if self.state.connected is connected:
            return
        self.state.connected = connected
        if connected:
            self.log.add("已连接到后端服务", LogLevel.SUCCESS)
            logger.info("Backend reachable")
        else:
            self.log.add("后端连接断开", LogLevel.ERROR)
            logger.warning("Backend unreachable")
        self.alerts.check_connection(connected)

    def _notify(self, category: str):
        if self.on_update is None:
            return
        try:
            self.on_update(category, self.state)
        except Exception:
            logger.exception("Update callback failed for %s", category)
