"""Project-wide constants for the attractor engine."""

APP_NAME = "Chaotic Systems"

SPEED_FACTOR_MIN = 0.1
SPEED_FACTOR_MAX = 10.0
SPEED_FACTOR_DEFAULT = 1.0
SPEED_FACTOR_UNIT = 0.01  # +/- step per key press

DEFAULT_STEP_PER_MS = 0.0004
DEFAULT_MAX_POINTS = 50000
DEFAULT_DRAW_SCALE = 5.0
DEFAULT_STROKE_WEIGHT = 0.5

DEFAULT_MODEL = "lorentz"
DEFAULT_TICKS = 2000
DEFAULT_FRAME_MS = 1000.0 / 120  # reference frame rate is 120 fps
