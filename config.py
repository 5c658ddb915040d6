"""
Global configuration and constants for the Containment Breach Simulation Engine.
"""

from dataclasses import dataclass

from models.errors import ValidationError

# --- Fiber / Facility Layout ---
N_SENSORS = 120              # Sensing points along the fiber (index = physical position)
N_RACKS = 8                  # Racks along the contained aisle
N_PRESSURE_ZONES = 4         # Differential-pressure quadrants, one per quarter of the fiber
FIBER_LENGTH_IN = 480        # Physical fiber run in inches (40 ft)

# --- Baselines ---
BASELINE_TEMP_C = 19.2           # Cold-aisle supply temperature
BASELINE_PRESSURE_PA = 28.4      # Nominal containment differential pressure
BASELINE_SINE_AMPLITUDE = 0.8    # Spatial ripple of the thermal baseline (degC)
BASELINE_SINE_PERIOD = 10.0      # Sensors per radian of ripple
BASELINE_TEMP_JITTER = 0.6       # Full width of the fixed per-sensor offset (degC)
BASELINE_PRESSURE_JITTER = 1.0   # Full width of the fixed per-zone offset (Pa)
RACK_POWER_MIN_KW = 62.0         # Initial rack power range
RACK_POWER_SPAN_KW = 35.0

# --- Signal Evolution (first-order low-pass) ---
THERMAL_RETAIN = 0.68            # Weight kept from the previous reading
THERMAL_NOISE = 0.1              # Uniform noise half-width on the thermal target (degC)
PRESSURE_RETAIN = 0.58
PRESSURE_NOISE = 0.35            # Uniform noise half-width on the pressure target (Pa)
REFERENCE_BREACH_INTENSITY = 14.0      # Intensity at which pressure drop and bypass reach their nominal values
PRESSURE_DROP_MAX_PA = 9.0       # Drop at the zone center for a reference-intensity breach
RACK_POWER_RETAIN = 0.97
RACK_POWER_TARGET_MIN_KW = 65.0
RACK_POWER_TARGET_SPAN_KW = 28.0

# --- Breach Defaults (drawn when the caller does not specify) ---
BREACH_WIDTH_RANGE = (4.0, 7.0)              # Sensors
BREACH_INTENSITY_RANGE = (9.0, 14.0)         # degC at the plume center
BREACH_DURATION_RANGE_MS = (55000.0, 80000.0)
PLUME_CUTOFF_WIDTHS = 2.0        # Plume contributes only where |i - pos| < 2 * width
PLUME_SIGMA_FRACTION = 0.5       # Gaussian sigma as a fraction of width

# Demo breach sites offered to the operator (sensor index -> label)
PRESET_BREACH_ZONES = [
    {"position": 8, "label": "Zone A — Door Seal"},
    {"position": 32, "label": "Zone B — Curtain Seam"},
    {"position": 64, "label": "Zone C — Top Panel"},
    {"position": 91, "label": "Zone D — End Cap"},
]

# --- Risk Scoring (BARI) ---
THERMAL_SCORE_OFFSET_C = 1.0     # Delta below this contributes nothing
THERMAL_SCORE_SPAN_C = 10.0      # Delta at which the thermal score saturates (+offset)
PRESSURE_SCORE_SPAN_PA = 16.0
RACK_SCORE_OFFSET_C = 1.0
RACK_SCORE_SPAN_C = 6.0
BARI_WEIGHTS = {"thermal": 0.5, "pressure": 0.3, "rack": 0.2}
RACK_MEAN_EDGE_DIVISOR = 12      # N // 12 sensors trimmed at each fiber end for the rack mean

# Classification bands: inclusive lower bound, first match from the top wins
BARI_CLASSIFICATIONS = [
    (0.80, "CRITICAL"),
    (0.55, "HIGH_RISK"),
    (0.30, "ELEVATED"),
    (0.0, "ALL_CLEAR"),
]
STATUS_BREACH_THRESHOLD = 0.55   # bari strictly above -> "BREACH DETECTED"
STATUS_ELEVATED_THRESHOLD = 0.30

# --- Alerting ---
AUTO_ALERT_WARNING_DELTA_C = 4.5
AUTO_ALERT_CRITICAL_DELTA_C = 7.0
ALERT_SUPPRESSION_MS = 9000.0    # Quiet window after the most recent alert of any level
ALERT_LOG_SIZE = 30

# --- ASHRAE Thermal Guideline Classes (upper bound of inlet temperature, degC) ---
ASHRAE_CLASS_LIMITS = [
    (27.0, "A1"),
    (35.0, "A2"),
    (40.0, "A3"),
]
ASHRAE_FALLBACK_CLASS = "A4"
A1_LIMIT_C = 27.0

# --- Trend ---
TREND_MIN_INTENSITY = 2.0        # Strongest active breach must exceed this to report a trend
TREND_BASE_C_PER_MIN = 0.65
TREND_SPAN_C_PER_MIN = 0.35

# --- Energy / Carbon ---
CO2_FACTOR = 0.000410            # Grid carbon intensity factor (US average)
ENERGY_RATE = 0.078              # $/kWh
BYPASS_KW_PER_REFERENCE_BREACH = 18.0

# --- Timing ---
TICK_INTERVAL_MS = 500


@dataclass(frozen=True)
class EngineConfig:
    """Construction-time parameters of a ContainmentEngine.

    Args:
        sensor_count: Number of sensing points along the fiber.
        rack_count: Number of racks sharing the fiber run.
        baseline_temp: Nominal cold-aisle temperature (degC).
        baseline_pressure: Nominal containment differential pressure (Pa).
        co2_factor: Grid carbon intensity used for bypass impact.
        energy_rate: Electricity price ($/kWh) used for bypass impact.
    """

    sensor_count: int = N_SENSORS
    rack_count: int = N_RACKS
    baseline_temp: float = BASELINE_TEMP_C
    baseline_pressure: float = BASELINE_PRESSURE_PA
    co2_factor: float = CO2_FACTOR
    energy_rate: float = ENERGY_RATE

    def __post_init__(self):
        if self.sensor_count < N_PRESSURE_ZONES:
            raise ValidationError(
                f"sensor_count must be >= {N_PRESSURE_ZONES}, got {self.sensor_count}"
            )
        if self.rack_count < 1 or self.rack_count > self.sensor_count:
            raise ValidationError(
                f"rack_count must be in [1, sensor_count], got {self.rack_count}"
            )
        if self.co2_factor < 0 or self.energy_rate < 0:
            raise ValidationError("co2_factor and energy_rate must be >= 0")
