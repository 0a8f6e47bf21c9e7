# Exp_Tracker/engine/engine_config.py
"""
Configuration for the animation tracker runtime.
Adjust these values based on your needs.
"""

# Blend weight ramp used by Tracker.play (seconds)
WEIGHT_FADE_TIME = 0.1

# Fade used by AnimationTrack.play/stop/adjust_weight when no fade is given
DEFAULT_FADE_TIME = 0.1

# Tracker.play defaults when speed/weight are omitted
DEFAULT_SPEED = 1.0
DEFAULT_WEIGHT = 1.0

# Baking rate for Blender actions (frames per second)
DEFAULT_FPS = 30.0

# Effective weights at or below this are treated as silent
WEIGHT_EPSILON = 0.001

# How long a Tracker waits for the local character to spawn.
# None = wait forever (matches the engine's blocking CharacterAdded wait)
CHARACTER_WAIT_TIMEOUT = None

# Blender tick interval for the animator update timer (seconds, 30Hz)
TICK_INTERVAL = 1.0 / 30.0

# Debug categories enabled when Blender scene properties are unavailable
# (unit tests, background workers). Names match dev_logger category map values.
DEBUG_CATEGORIES = set()

# Master debug frequency (1-30 Hz). 30 = every message, no gating.
DEBUG_MASTER_HZ = 30
