# Exp_Tracker/engine/animations/animator.py
"""
Animator - The performer that plays tracks against one character.

WORKER-SAFE ARCHITECTURE:
- Animator: owns tracks, advances playback state (times, weights, fades)
- Blender bridge: reads get_compute_job_data() and writes NLA strips via bpy

Usage:
    animator = Animator("Player")
    animator.add_animation(BakedAnimation("Walk", 1.0))
    track = animator.load_animation(Animation(name="Walk"))
    track.play()

    # Each frame:
    animator.update(delta_time)               # Times, fades, markers, ended
    job_data = animator.get_compute_job_data()
"""

from typing import Dict, List, Optional, Tuple

from ..engine_config import WEIGHT_EPSILON
from ..instances import Animation
from .cache import AnimationCache
from .data import BakedAnimation
from .track import AnimationTrack
from ...developer.dev_logger import log_game


class Animator:
    """
    Performer for a single character.

    Loads AnimationTracks from the shared cache and steps them every frame.
    Tracks stay registered until destroyed (individually or with the animator).
    """

    def __init__(self, owner_name: str = "Character", cache: Optional[AnimationCache] = None):
        self.owner_name = owner_name

        # Baked animation storage (may be shared across characters)
        self.cache = cache if cache is not None else AnimationCache()

        self._tracks: List[AnimationTrack] = []

        # Global time scale (1.0 = normal, 0.5 = half speed)
        self.time_scale: float = 1.0

    # =========================================================================
    # CACHE MANAGEMENT
    # =========================================================================

    def add_animation(self, animation: BakedAnimation) -> None:
        """Add a baked animation to the cache."""
        self.cache.add(animation)

    def add_animations(self, animations: List[BakedAnimation]) -> int:
        """Add multiple animations. Returns count added."""
        return self.cache.add_many(animations)

    # =========================================================================
    # TRACKS
    # =========================================================================

    def load_animation(self, animation: Animation) -> AnimationTrack:
        """
        Create a playback handle for an animation asset.

        Raises:
            ValueError: the asset's animation id is not in the cache
        """
        baked = self.cache.get(animation.animation_id)
        if baked is None:
            raise ValueError(
                f"Animation '{animation.animation_id}' is not loaded on '{self.owner_name}'"
            )

        track = AnimationTrack(animation, baked, animator=self)
        self._tracks.append(track)
        self.cache.bind(self.owner_name, baked.name)

        log_game("ANIMATOR", f"LOAD track={animation.name} id={animation.animation_id} owner={self.owner_name}")
        return track

    def get_tracks(self) -> List[AnimationTrack]:
        """All live tracks loaded on this animator."""
        return list(self._tracks)

    def get_playing_animation_tracks(self) -> List[AnimationTrack]:
        return [t for t in self._tracks if t.is_playing]

    def _release(self, track: AnimationTrack) -> None:
        """Called by AnimationTrack.destroy()."""
        if track in self._tracks:
            self._tracks.remove(track)

    # =========================================================================
    # RUNTIME UPDATE
    # =========================================================================

    def update(self, delta_time: float) -> None:
        """
        Advance every track. Host signals (markers, stopped, ended) fire here.

        Args:
            delta_time: Time since last frame in seconds
        """
        dt = delta_time * self.time_scale
        for track in list(self._tracks):
            track.update(dt)

    def get_active_weights(self) -> List[Tuple[str, float]]:
        """(track_name, effective_weight) for audible tracks."""
        result = []
        for track in self._tracks:
            if track.weight_current > WEIGHT_EPSILON:
                result.append((track.name, track.weight_current))
        return result

    def get_compute_job_data(self) -> Dict[str, object]:
        """
        Snapshot of audible tracks for the pose writer.

        Returns:
            {
                "object_name": str,
                "playing": [
                    {"anim_name": str, "animation_id": str, "time": float,
                     "weight": float, "speed": float, "looping": bool},
                    ...
                ]
            }
        """
        playing = []
        for track in self._tracks:
            if track.weight_current <= WEIGHT_EPSILON:
                continue
            playing.append({
                "anim_name": track.name,
                "animation_id": track.animation.animation_id,
                "time": track.time_position,
                "weight": track.weight_current,
                "speed": track.speed,
                "looping": track.looped,
            })

        return {"object_name": self.owner_name, "playing": playing}

    def has_active_animations(self) -> bool:
        return any(t.is_playing or t.is_fading_out for t in self._tracks)

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def destroy(self) -> None:
        """Destroy every track and drop this owner's cache bindings."""
        for track in list(self._tracks):
            track.destroy()
        self._tracks.clear()
        self.cache.unbind_all(self.owner_name)

    def __repr__(self) -> str:
        playing = len(self.get_playing_animation_tracks())
        return f"Animator('{self.owner_name}', {len(self._tracks)} tracks, {playing} playing)"
