"""
Facility Layout for the Containment Breach Simulation Engine.

Maps positions along the fiber onto the contained aisle: quadrant zones,
racks and the physical distance from the north end of the run.
"""

from typing import List, Tuple

from config import FIBER_LENGTH_IN, N_PRESSURE_ZONES

ZONE_NAMES = ["Zone A — North", "Zone B", "Zone C", "Zone D — South"]


def zone_index(position: int, sensor_count: int) -> int:
    """Quadrant (0..3) containing a sensor index."""
    return min(int(position // (sensor_count / N_PRESSURE_ZONES)), N_PRESSURE_ZONES - 1)


def zone_label(position: int, sensor_count: int) -> str:
    """Operator-facing name of the quadrant containing a sensor index."""
    return ZONE_NAMES[zone_index(position, sensor_count)]


def zone_center(zone: int, sensor_count: int) -> float:
    """Fiber position (in sensor units) at the middle of a quadrant."""
    return (zone + 0.5) * (sensor_count / N_PRESSURE_ZONES)


def rack_index(position: int, sensor_count: int, rack_count: int) -> int:
    """Rack (0-based) whose segment of the fiber contains a sensor index."""
    return min(int(position / sensor_count * rack_count), rack_count - 1)


def physical_location(position: int, sensor_count: int, rack_count: int) -> str:
    """
    Describe where a sensor sits, e.g. ``Rack R3, 13'4" from N``.

    The fiber is assumed to run FIBER_LENGTH_IN inches from the north end
    of the aisle with sensors evenly spaced.
    """
    rack = rack_index(position, sensor_count, rack_count) + 1
    inches = round(position / sensor_count * FIBER_LENGTH_IN)
    return f"Rack R{rack}, {inches // 12}'{inches % 12}\" from N"


def rack_sensor_slices(sensor_count: int, rack_count: int) -> List[Tuple[int, int]]:
    """Half-open [start, end) sensor ranges covered by each rack."""
    return [
        (i * sensor_count // rack_count, (i + 1) * sensor_count // rack_count)
        for i in range(rack_count)
    ]
