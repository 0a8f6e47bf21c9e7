# Exp_Tracker/engine/__init__.py
"""
Tracker runtime - the host side the tracker delegates to.

Worker-safe: nothing in this package touches bpy.
Character/Animator live in submodules (engine.character, engine.animations).
"""

from .engine_config import (
    WEIGHT_FADE_TIME,
    DEFAULT_FADE_TIME,
    DEFAULT_SPEED,
    DEFAULT_WEIGHT,
    DEFAULT_FPS,
    CHARACTER_WAIT_TIMEOUT,
)
from .signal import Signal, Connection
from .instances import Instance, InstanceKind, Animation, Folder

__all__ = [
    'Signal',
    'Connection',
    'Instance',
    'InstanceKind',
    'Animation',
    'Folder',
    'WEIGHT_FADE_TIME',
    'DEFAULT_FADE_TIME',
    'DEFAULT_SPEED',
    'DEFAULT_WEIGHT',
    'DEFAULT_FPS',
    'CHARACTER_WAIT_TIMEOUT',
]
