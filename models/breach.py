"""
Breach data model.

A breach is a simulated containment failure: a Gaussian thermal plume
centered on one sensor of the fiber, with a spatial width, a peak
intensity and a fixed lifetime.  Breaches never end on their own terms;
they simply stop being active once their lifetime has elapsed.
"""

import numbers
from dataclasses import dataclass
from typing import List, Optional

from models.errors import ValidationError


@dataclass(frozen=True)
class Breach:
    """A single induced containment breach.

    Args:
        id: Monotonic breach identifier (starts at 1).
        position: Sensor index at the plume center, 0 <= position < sensor_count.
        width: Spatial width in sensors (plume sigma is half of this).
        intensity: Peak temperature rise at the plume center (degC).
        duration_ms: Lifetime in milliseconds.
        created_at: Creation timestamp in milliseconds.
        label: Operator-facing description of the breach site.
        sensor_count: Length of the fiber the position refers to.
    """

    id: int
    position: int
    width: float
    intensity: float
    duration_ms: float
    created_at: float
    label: str
    sensor_count: int

    def __post_init__(self):
        validate_breach_params(
            self.position, self.sensor_count,
            width=self.width, intensity=self.intensity, duration_ms=self.duration_ms,
        )

    @property
    def expires_at(self) -> float:
        return self.created_at + self.duration_ms

    def is_active(self, now: float) -> bool:
        """True while ``now - created_at < duration_ms``."""
        return now - self.created_at < self.duration_ms


def validate_position(position, sensor_count: int) -> None:
    """Reject anything that is not an integer sensor index on the fiber."""
    if isinstance(position, bool) or not isinstance(position, numbers.Integral):
        raise ValidationError(f"position must be an integer sensor index, got {position!r}")
    if not 0 <= position < sensor_count:
        raise ValidationError(
            f"position must satisfy 0 <= position < {sensor_count}, got {position}"
        )


def validate_breach_params(
    position,
    sensor_count: int,
    width: Optional[float] = None,
    intensity: Optional[float] = None,
    duration_ms: Optional[float] = None,
) -> None:
    """Validate breach parameters; None means "not given" and is skipped."""
    validate_position(position, sensor_count)
    if width is not None and not width > 0:
        raise ValidationError(f"width must be > 0, got {width}")
    if intensity is not None and not intensity >= 0:
        raise ValidationError(f"intensity must be >= 0, got {intensity}")
    if duration_ms is not None and not duration_ms > 0:
        raise ValidationError(f"duration_ms must be > 0, got {duration_ms}")


def active_breaches(breaches: List[Breach], now: float) -> List[Breach]:
    """Return the breaches still alive at ``now``, preserving order."""
    return [b for b in breaches if b.is_active(now)]
