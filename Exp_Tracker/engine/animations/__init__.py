# Exp_Tracker/engine/animations/__init__.py
"""
Animation Runtime - Worker-safe playback state.

This module contains NO bpy references and can be used in worker processes.

Core Components:
- BakedAnimation: duration, fps, looping and timeline markers (numpy index)
- AnimationCache: storage and per-owner binding of baked animations
- KeyframeSequenceProvider: animation id -> keyframe/marker structure
- AnimationTrack: playback handle (play/stop/weight/speed, host signals)
- Animator: performer that loads and steps tracks for one character

NOTE: No pose blending here. The Blender bridge hands weights and times
to NLA strips and Blender evaluates the pose.
"""

from .data import BakedAnimation, AnimationMarker
from .cache import AnimationCache
from .keyframes import (
    Keyframe,
    KeyframeMarker,
    KeyframeSequence,
    KeyframeSequenceError,
    KeyframeSequenceProvider,
    sequence_from_baked,
    get_keyframe_provider,
    set_keyframe_provider,
)
from .track import AnimationTrack
from .animator import Animator

__all__ = [
    "BakedAnimation",
    "AnimationMarker",
    "AnimationCache",
    "Keyframe",
    "KeyframeMarker",
    "KeyframeSequence",
    "KeyframeSequenceError",
    "KeyframeSequenceProvider",
    "sequence_from_baked",
    "get_keyframe_provider",
    "set_keyframe_provider",
    "AnimationTrack",
    "Animator",
]
