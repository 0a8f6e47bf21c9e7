# Exp_Tracker/blender/runtime.py
"""
Blender runtime - Drives the tracker host from inside Blender.

- spawn_local_character: bake actions, build the Animator, spawn it on the
  local player (unblocks any Tracker waiting for the character)
- _tick (bpy.app.timers): advance the Animator, write tracks to NLA
- create_tracker: Tracker over the scene's tracker actions

Only this module writes to bpy data.
"""

import time
import bpy
from typing import Optional

from ..engine import engine_config
from ..engine.character import Character, get_local_player
from ..engine.animations.animator import Animator
from ..engine.animations.keyframes import set_keyframe_provider
from ..animations.tracker import Tracker
from ..developer.dev_logger import log_game, increment_frame
from .actions import ActionKeyframeProvider, bake_action, folder_from_actions, matching_actions

NLA_TRACK_PREFIX = "exp_tracker:"

_runtime = {
    "character": None,
    "tracker": None,
    "armature_name": None,
    "fps": engine_config.DEFAULT_FPS,
    "last_tick": None,
}


def _scene_fps(scene) -> float:
    return scene.render.fps / (scene.render.fps_base or 1.0)


# =============================================================================
# SPAWN / DESPAWN
# =============================================================================

def spawn_local_character(scene=None) -> Optional[Character]:
    """Build the performer for scene.target_armature and spawn it."""
    if scene is None:
        scene = bpy.context.scene

    arm = scene.target_armature
    if not arm:
        print("Error: No target armature set in scene.target_armature.")
        return None

    if _runtime["character"] is not None:
        despawn_local_character()

    fps = _scene_fps(scene)
    animator = Animator(owner_name=arm.name)
    animator.add_animations([bake_action(a, fps) for a in matching_actions(scene.tracker_action_prefix)])

    set_keyframe_provider(ActionKeyframeProvider(fps, cache=animator.cache))

    character = Character(arm.name, animator)
    _runtime["character"] = character
    _runtime["armature_name"] = arm.name
    _runtime["fps"] = fps
    _runtime["last_tick"] = None

    start_tick()
    get_local_player().spawn(character)

    log_game("BLENDER", f"SPAWN armature={arm.name} animations={animator.cache.count}")
    return character


def despawn_local_character() -> None:
    """Stop ticking, remove tracker NLA tracks, destroy the performer."""
    destroy_tracker()
    stop_tick()

    character = get_local_player().despawn()
    _runtime["character"] = None

    obj = bpy.data.objects.get(_runtime["armature_name"] or "")
    if obj is not None:
        purge_tracker_nla(obj)

    if character is not None:
        character.animator.destroy()
        log_game("BLENDER", f"DESPAWN armature={character.name}")


def create_tracker(scene=None) -> Optional[Tracker]:
    """
    Tracker over the scene's tracker actions for the local player.

    Replaces any tracker this runtime already holds. Returns None when no
    character is spawned (never waits on the main thread).
    """
    if scene is None:
        scene = bpy.context.scene

    player = get_local_player()
    if player.character is None:
        print("Error: No character spawned. Spawn the target armature first.")
        return None

    destroy_tracker()

    prefix = scene.tracker_action_prefix
    folder = folder_from_actions(matching_actions(prefix), prefix=prefix)
    tracker = Tracker(folder, player=player, timeout=0)
    _runtime["tracker"] = tracker

    log_game("BLENDER", f"TRACKER tracks={len(tracker.tracks)} events={len(tracker.track_events)}")
    return tracker


def get_tracker() -> Optional[Tracker]:
    return _runtime["tracker"]


def destroy_tracker() -> bool:
    """Destroy the tracker this runtime holds. False if there was none."""
    tracker = _runtime["tracker"]
    if tracker is None:
        return False
    _runtime["tracker"] = None
    tracker.destroy()
    return True


# =============================================================================
# TICK
# =============================================================================

def _tick():
    character = _runtime["character"]
    if character is None:
        return None  # unregisters the timer

    now = time.perf_counter()
    last = _runtime["last_tick"]
    _runtime["last_tick"] = now
    delta_time = 0.0 if last is None else now - last

    character.animator.update(delta_time)
    increment_frame()

    obj = bpy.data.objects.get(_runtime["armature_name"])
    if obj is not None:
        apply_to_nla(obj, character.animator, _runtime["fps"])

    return engine_config.TICK_INTERVAL


def start_tick() -> None:
    if not bpy.app.timers.is_registered(_tick):
        bpy.app.timers.register(_tick, first_interval=0.0)


def stop_tick() -> None:
    if bpy.app.timers.is_registered(_tick):
        bpy.app.timers.unregister(_tick)


# =============================================================================
# NLA WRITES
# =============================================================================

def _ensure_nla_track(ad, animation_id: str):
    """One NLA track + strip per animation id, created on first use."""
    name = NLA_TRACK_PREFIX + animation_id
    nla = ad.nla_tracks.get(name)
    if nla is not None and len(nla.strips) > 0:
        return nla

    action = bpy.data.actions.get(animation_id)
    if action is None:
        return None

    if nla is None:
        nla = ad.nla_tracks.new()
        nla.name = name

    strip = nla.strips.new(action.name, int(action.frame_range[0]), action)
    strip.blend_in = 0.0
    strip.blend_out = 0.0
    strip.blend_type = 'COMBINE'
    strip.use_animated_influence = True
    return nla


def apply_to_nla(obj, animator: Animator, fps: float) -> int:
    """
    Mirror audible tracks onto NLA strips.

    Strip influence = track weight. The strip is slid so the current scene
    frame lands on the track's time position. Silent tracks are muted.

    Returns:
        Number of strips updated
    """
    ad = obj.animation_data or obj.animation_data_create()
    playing = {p["animation_id"]: p for p in animator.get_compute_job_data()["playing"]}

    for animation_id in animator.cache.get_bound(animator.owner_name):
        nla = ad.nla_tracks.get(NLA_TRACK_PREFIX + animation_id)
        if nla is not None:
            nla.mute = animation_id not in playing

    frame_now = bpy.context.scene.frame_current
    count = 0
    for animation_id, p in playing.items():
        nla = _ensure_nla_track(ad, animation_id)
        if nla is None:
            continue

        strip = nla.strips[0]
        strip.influence = p["weight"]
        strip.frame_start_ui = frame_now - p["time"] * fps
        count += 1

    return count


def purge_tracker_nla(obj) -> None:
    """Remove every NLA track this runtime created on obj."""
    ad = getattr(obj, "animation_data", None)
    if not ad:
        return
    for nla in list(ad.nla_tracks):
        if nla.name.startswith(NLA_TRACK_PREFIX):
            ad.nla_tracks.remove(nla)
