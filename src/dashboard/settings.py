from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    base_url: str = "http://localhost:3000/api"
    # Seconds before a request to the backend counts as failed
    request_timeout: float = 5.0

    status_interval: float = 2.0
    sensors_interval: float = 3.0
    tasks_interval: float = 5.0
    statistics_interval: float = 10.0
    clock_interval: float = 1.0

    alert_cooldown: float = 30.0
    alert_history_size: int = 50
    notification_duration: float = 5.0
    chart_capacity: int = 20
    activity_log_size: int = 10
