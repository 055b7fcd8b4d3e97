"""
Threshold alerts over live telemetry.

Each rule compares one telemetry field against a threshold. A rule that fires
becomes an active alert; it is cleared as soon as the condition stops holding.
Repeated triggers of the same rule only notify once per cooldown window.
"""
import logging
import time
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class Condition(str, Enum):
    BELOW = "below"
    ABOVE = "above"


SEVERITY_ORDER = {Severity.CRITICAL: 0, Severity.WARNING: 1, Severity.INFO: 2}

UNITS = {
    "battery": "%",
    "temperature": "°C",
    "soilHumidity": "%",
    "soilTemp": "°C",
    "light": " Lux",
    "airHumidity": "%",
}

DISCONNECTED_RULE_ID = "disconnected"


@dataclass
class AlertRule:
    id: str
    field: str
    condition: Condition
    threshold: float
    severity: Severity
    label: str
    enabled: bool = True
    # None means the engine-wide cooldown applies
    cooldown: Optional[float] = None

    def matches(self, value: float) -> bool:
        if self.condition == Condition.BELOW:
            return value < self.threshold
        return value > self.threshold


@dataclass
class ActiveAlert:
    rule_id: str
    message: str
    severity: Severity
    triggered_at: float
    value: Any


@dataclass
class Notification:
    alert: ActiveAlert
    expires_at: float


DEFAULT_RULES = (
    AlertRule("lowBattery", "battery", Condition.BELOW, 20, Severity.CRITICAL, "电量过低"),
    AlertRule("highTemperature", "temperature", Condition.ABOVE, 40, Severity.WARNING, "温度过高"),
    AlertRule("lowSoilHumidity", "soilHumidity", Condition.BELOW, 30, Severity.WARNING, "土壤湿度过低"),
    AlertRule("highSoilHumidity", "soilHumidity", Condition.ABOVE, 90, Severity.INFO, "土壤湿度过高"),
    AlertRule("lowLight", "light", Condition.BELOW, 1000, Severity.INFO, "光照不足"),
)

DISCONNECTED_RULE = AlertRule(
    DISCONNECTED_RULE_ID, "connection", Condition.BELOW, 0, Severity.CRITICAL, "与服务器断开连接",
)


def format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class NotificationCenter:
    """
    Transient pop-up notifications. Each one disappears `duration` seconds after
    it was shown. An optional sink (the renderer) is told about every new one.
    """

    def __init__(self, duration: float = 5.0, sink: Optional[Callable[[Notification], None]] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.duration = duration
        self.sink = sink
        self._clock = clock
        self._notifications: List[Notification] = []

    def show(self, alert: ActiveAlert) -> Notification:
        now = self._clock()
        notification = Notification(alert, now + self.duration)
        self._notifications = [n for n in self._notifications if n.expires_at > now]
        self._notifications.append(notification)
        if self.sink is not None:
            try:
                self.sink(notification)
            except Exception:
                logger.exception("Notification sink failed for %s", alert.rule_id)
        return notification

    def visible(self) -> List[Notification]:
        now = self._clock()
        self._notifications = [n for n in self._notifications if n.expires_at > now]
        return list(self._notifications)


class AlertEngine:
    def __init__(
        self,
        rules: Iterable[AlertRule] = DEFAULT_RULES,
        cooldown: float = 30.0,
        history_size: int = 50,
        notifications: Optional[NotificationCenter] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        # Copies so toggling a rule never touches the module defaults
        self.rules: Dict[str, AlertRule] = {rule.id: replace(rule) for rule in rules}
        self.cooldown = cooldown
        self.notifications = notifications or NotificationCenter(clock=clock)
        self._clock = clock
        self._active: Dict[str, ActiveAlert] = {}
        self._last_emitted: Dict[str, float] = {}
        self.history: deque[ActiveAlert] = deque(maxlen=history_size)

    def _cooldown_for(self, rule: AlertRule) -> float:
        return self.cooldown if rule.cooldown is None else rule.cooldown

    def check(self, robot: Optional[Mapping[str, Any]] = None, sensors: Optional[Mapping[str, Any]] = None):
        """Evaluate every enabled rule against the merged robot and sensor snapshot."""
        snapshot = {**(robot or {}), **(sensors or {})}
        for rule in self.rules.values():
            if not rule.enabled:
                continue
            value = snapshot.get(rule.field)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                continue
            if rule.matches(value):
                self.trigger(rule, value)
            else:
                self.resolve(rule.id)

    def trigger(self, rule: AlertRule, value: Any) -> Optional[ActiveAlert]:
        """
        Mark a rule as firing. Returns the new alert when a notification was
        emitted, None when the trigger fell inside the cooldown window.
        """
        now = self._clock()
        cooldown = self._cooldown_for(rule)
        existing = self._active.get(rule.id)
        last = self._last_emitted.get(rule.id)
        alert = ActiveAlert(
            rule_id=rule.id,
            message=f"{rule.label}: {format_value(value)}{UNITS.get(rule.field, '')}",
            severity=rule.severity,
            triggered_at=now,
            value=value,
        )

        if existing is not None and now - existing.triggered_at < cooldown:
            return None
        if existing is None and last is not None and now - last < cooldown:
            # Flapping around the threshold: active again, but stay quiet
            self._active[rule.id] = alert
            return None

        self._active[rule.id] = alert
        self._last_emitted[rule.id] = now
        self.history.appendleft(alert)
        self.notifications.show(alert)
        logger.warning("[alert] %s", alert.message)
        return alert

    def resolve(self, rule_id: str) -> bool:
        if self._active.pop(rule_id, None) is None:
            return False
        logger.info("[alert] %s cleared", rule_id)
        return True

    def check_connection(self, connected: bool):
        if connected:
            self.resolve(DISCONNECTED_RULE_ID)
        else:
            self.trigger(DISCONNECTED_RULE, "离线")

    def is_active(self, rule_id: str) -> bool:
        return rule_id in self._active

    def active_alerts(self) -> List[ActiveAlert]:
        """Active alerts, most severe first, then by rule id."""
        return sorted(self._active.values(), key=lambda a: (SEVERITY_ORDER[a.severity], a.rule_id))

    def active_count(self) -> int:
        return len(self._active)

    def clear_all(self):
        self._active.clear()

    def set_rule_enabled(self, rule_id: str, enabled: bool):
        self.rules[rule_id].enabled = enabled
