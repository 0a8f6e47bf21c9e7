# Exp_Tracker/blender/actions.py
"""
Blender Actions -> tracker assets.

- bake_action: Action -> BakedAnimation (duration, looping, pose markers)
- folder_from_actions: Actions -> container of Animation assets
- ActionKeyframeProvider: keyframe sequences read from Action F-Curves

Blender 5.0+ layered action API for F-Curves.
"""

import bpy
from typing import Dict, Iterable, List, Optional

from ..engine.engine_config import DEFAULT_FPS
from ..engine.instances import Animation, Folder, Instance
from ..engine.animations.cache import AnimationCache
from ..engine.animations.data import BakedAnimation
from ..engine.animations.keyframes import (
    Keyframe,
    KeyframeSequence,
    KeyframeSequenceProvider,
)
from ..developer.dev_logger import log_game


def _source_fps(fps: Optional[float]) -> float:
    return fps if fps and fps > 0 else DEFAULT_FPS


def bake_action(action, fps: Optional[float] = None, looping: bool = True) -> BakedAnimation:
    """
    Bake a Blender Action to playback data.

    Marker times are seconds from the action's first frame.
    """
    if action is None:
        raise ValueError("Cannot bake None action")

    source_fps = _source_fps(fps)
    frame_start, frame_end = action.frame_range
    duration = max(0.0, (frame_end - frame_start) / source_fps)

    markers = [
        (m.name, max(0.0, (m.frame - frame_start) / source_fps))
        for m in action.pose_markers
    ]

    baked = BakedAnimation(
        name=action.name,
        duration=duration,
        fps=source_fps,
        looping=looping,
        markers=markers,
    )
    log_game("ANIM-CACHE", f"BAKE action={action.name} duration={duration:.2f}s markers={len(markers)}")
    return baked


def _get_all_fcurves(action) -> List:
    """Get all FCurves from action using Blender 5.0 layered API."""
    all_fcurves = []
    for layer in action.layers:
        for strip in layer.strips:
            for channelbag in strip.channelbags:
                all_fcurves.extend(channelbag.fcurves)
    return all_fcurves


def matching_actions(prefix: str = "") -> List:
    """Actions whose name starts with prefix (all actions when empty)."""
    return [a for a in bpy.data.actions if a.name.startswith(prefix)]


def folder_from_actions(actions: Iterable, prefix: str = "", name: str = "Animations") -> Instance:
    """
    Container of Animation assets, one per Action.

    Asset names drop the prefix ("char_Idle" -> "Idle"); animation ids
    keep the full Action name.
    """
    folder = Folder(name)
    for action in actions:
        asset_name = action.name[len(prefix):] if prefix and action.name.startswith(prefix) else action.name
        folder.add(Animation(name=asset_name, animation_id=action.name))
    return folder


class ActionKeyframeProvider(KeyframeSequenceProvider):
    """
    Keyframe sequences built from Action data.

    One Keyframe per distinct keyed frame across all F-Curves; pose markers
    attach to the keyframe at their frame (a keyframe is added if none).
    Ids with no Action fall back to the baked cache.
    """

    def __init__(self, fps: Optional[float] = None, cache: Optional[AnimationCache] = None):
        super().__init__(cache=cache)
        self.fps = _source_fps(fps)

    def get_keyframe_sequence(self, animation_id: str) -> KeyframeSequence:
        action = bpy.data.actions.get(animation_id)
        if action is None:
            return super().get_keyframe_sequence(animation_id)

        frame_start = action.frame_range[0]
        frames = set()
        for fcurve in _get_all_fcurves(action):
            for point in fcurve.keyframe_points:
                frames.add(float(point.co[0]))
        for marker in action.pose_markers:
            frames.add(float(marker.frame))

        sequence = KeyframeSequence(name=action.name, loop=bool(getattr(action, "use_cyclic", True)))
        by_frame: Dict[float, Keyframe] = {}
        for frame in sorted(frames):
            by_frame[frame] = sequence.add_keyframe(max(0.0, (frame - frame_start) / self.fps))

        for marker in sorted(action.pose_markers, key=lambda m: m.frame):
            by_frame[float(marker.frame)].add_marker(marker.name)

        return sequence

