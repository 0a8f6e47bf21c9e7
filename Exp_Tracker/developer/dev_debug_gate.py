# Exp_Tracker/developer/dev_debug_gate.py
"""
Debug output frequency gating system.

Prevents log spam by limiting debug output to specified Hz (1-30).

Gating is per MESSAGE KEY, not per category, so different log types within
the same category (e.g., PLAY vs STOP) don't block each other.

Inside Blender the toggles come from scene properties (dev_debug_<category>,
dev_debug_master_hz). Outside Blender they come from engine_config.
"""

import time

# bpy is optional so the gate works in workers and unit tests.
try:
    import bpy  # type: ignore
except ImportError:
    bpy = None  # noqa: N816

from ..engine import engine_config

# Track last print time for each unique message key
_last_print_times = {}


def _scene():
    if bpy is None:
        return None
    return getattr(bpy.context, "scene", None)


def _category_enabled(scene, category: str) -> bool:
    prop = f"dev_debug_{category}"
    if scene is not None and hasattr(scene, prop):
        return bool(getattr(scene, prop))
    return category in engine_config.DEBUG_CATEGORIES


def _master_hz(scene) -> int:
    if scene is not None and hasattr(scene, "dev_debug_master_hz"):
        return scene.dev_debug_master_hz
    return engine_config.DEBUG_MASTER_HZ


def should_print_debug(category: str, message_key: str = None) -> bool:
    """
    Check if debug output should be recorded based on master frequency gate.

    Args:
        category: Debug category name (e.g., "tracker", "animator")
        message_key: Optional unique key for this message type. If provided,
                     gating is per message_key instead of per category.

    Returns:
        True if enabled and enough time has passed since last print
    """
    scene = _scene()

    if not _category_enabled(scene, category):
        return False

    frequency = _master_hz(scene)

    # 30Hz = every message (no gating)
    if frequency >= 30:
        return True

    time_threshold = 1.0 / max(1, frequency)
    gate_key = message_key if message_key else category

    current_time = time.perf_counter()
    last_time = _last_print_times.get(gate_key, 0.0)

    if (current_time - last_time) >= time_threshold:
        _last_print_times[gate_key] = current_time
        return True

    return False


def reset_debug_timers():
    """Reset all debug print timers (called on game start/end)."""
    _last_print_times.clear()
