"""
Alert records and the bounded alert log.

Alerts are immutable once issued.  Acknowledging one replaces the stored
record with a copy whose ``acknowledged`` flag is set; nothing else about
the engine changes.
"""

import logging
from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Tuple

from config import ALERT_LOG_SIZE
from models.errors import ValidationError

logger = logging.getLogger(__name__)

WARNING = "WARNING"
CRITICAL = "CRITICAL"
BREACH = "BREACH"
CLEAR = "CLEAR"

ALERT_LEVELS = (WARNING, CRITICAL, BREACH, CLEAR)
ACTIONABLE_LEVELS = (WARNING, CRITICAL, BREACH)
URGENT_LEVELS = (CRITICAL, BREACH)


@dataclass(frozen=True)
class Alert:
    """A single entry of the alert log.

    Args:
        id: Strictly increasing alert identifier.
        timestamp: Issue time in milliseconds.
        level: One of WARNING, CRITICAL, BREACH, CLEAR.
        message: What happened.
        zone_label: Zone (or breach label) the alert refers to.
        physical_location: Rack / distance description, None for CLEAR.
        recommended_action: Operator instruction, None for CLEAR.
        acknowledged: Display-only flag set by the operator.
    """

    id: int
    timestamp: float
    level: str
    message: str
    zone_label: str
    physical_location: Optional[str] = None
    recommended_action: Optional[str] = None
    acknowledged: bool = False

    def __post_init__(self):
        if self.level not in ALERT_LEVELS:
            raise ValidationError(f"Invalid alert level: {self.level}")

    @property
    def time_label(self) -> str:
        """Wall-clock rendering of the timestamp (HH:MM:SS)."""
        return datetime.fromtimestamp(self.timestamp / 1000.0).strftime("%H:%M:%S")


class AlertLog:
    """Newest-first log of at most ``max_size`` alerts.

    Ids are assigned on push, so they strictly increase in issue order and
    the oldest entries are evicted first.
    """

    def __init__(self, max_size: int = ALERT_LOG_SIZE):
        if max_size < 1:
            raise ValidationError(f"max_size must be >= 1, got {max_size}")
        self._alerts = deque(maxlen=max_size)
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._alerts)

    @property
    def max_size(self) -> int:
        return self._alerts.maxlen

    def push(
        self,
        level: str,
        message: str,
        timestamp: float,
        zone_label: str,
        physical_location: Optional[str] = None,
        recommended_action: Optional[str] = None,
    ) -> Alert:
        """Create the next alert and place it at the head of the log."""
        alert = Alert(
            id=self._last_id + 1,
            timestamp=timestamp,
            level=level,
            message=message,
            zone_label=zone_label,
            physical_location=physical_location,
            recommended_action=recommended_action,
        )
        self._last_id = alert.id
        self._alerts.appendleft(alert)
        logger.info("Alert #%d %s: %s (%s)", alert.id, level, message, zone_label)
        return alert

    def most_recent(self) -> Optional[Alert]:
        return self._alerts[0] if self._alerts else None

    def acknowledge(self, alert_id: int) -> Alert:
        """Mark an alert acknowledged; acknowledging twice is a no-op."""
        for i, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                if not alert.acknowledged:
                    self._alerts[i] = replace(alert, acknowledged=True)
                return self._alerts[i]
        raise ValidationError(f"No alert with id {alert_id} in the log")

    def entries(self) -> Tuple[Alert, ...]:
        """Newest-first tuple of the current alerts."""
        return tuple(self._alerts)
