"""Headless dashboard: polls the backend and logs what a screen would show."""
import asyncio
import logging

from dashboard.activity_log import ActivityLog
from dashboard.alerts import AlertEngine, NotificationCenter
from dashboard.api_client import RobotApiClient
from dashboard.chart_history import ChartHistory
from dashboard.poller import ClientPoller, DashboardState
from dashboard.settings import DashboardSettings

logger = logging.getLogger("dashboard")


def render(category: str, state: DashboardState):
    if category == "status" and state.robot:
        robot = state.robot
        coords = robot.get("coordinates", {})
        logger.info(
            "battery %s%%  speed %s m/s  temp %s°C  N%s° E%s°",
            robot.get("battery"), robot.get("speed"), robot.get("temperature"),
            coords.get("lat"), coords.get("lon"),
        )
    elif category == "sensors" and state.sensors:
        logger.info("sensors %s", state.sensors)
    elif category == "statistics" and state.statistics:
        logger.info("area %s / %s (%.1f%%)", state.statistics.get("completedArea"),
                    state.statistics.get("totalArea"), state.statistics.get("progress", 0))


async def run(settings: DashboardSettings):
    notifications = NotificationCenter(
        duration=settings.notification_duration,
        sink=lambda n: logger.warning("[%s] %s", n.alert.severity.value, n.alert.message),
    )
    alerts = AlertEngine(
        cooldown=settings.alert_cooldown,
        history_size=settings.alert_history_size,
        notifications=notifications,
    )
    log = ActivityLog(settings.activity_log_size)
    log.add("系统启动成功")

    async with RobotApiClient(settings.base_url, settings.request_timeout) as client:
        poller = ClientPoller(
            client,
            settings=settings,
            alerts=alerts,
            chart=ChartHistory(settings.chart_capacity),
            log=log,
            on_update=render,
        )
        poller.start()
        try:
            await asyncio.Event().wait()
        finally:
            await poller.stop()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = DashboardSettings()
    logger.info("Backend: %s", settings.base_url)
    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Dashboard stopped")


if __name__ == "__main__":
    main()
