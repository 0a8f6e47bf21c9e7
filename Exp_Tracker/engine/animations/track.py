# Exp_Tracker/engine/animations/track.py
"""
AnimationTrack - Host playback handle for one animation on one performer.

Owns the playback state the runtime advances each frame:
time position, speed, blend weight (with fades), and stop/end lifecycle.

Lifecycle:
    play()  -> is_playing, weight fades in toward weight_target
    stop()  -> not is_playing, `stopped` fires, weight fades out
    update  -> once faded out, `ended` fires (never inside stop())

Markers fire their signal with the marker value as playback crosses them.
A non-looping track that reaches its end stops itself.

Worker-safe: no bpy references.
"""

from typing import TYPE_CHECKING, Dict, Optional

from ..engine_config import DEFAULT_FADE_TIME, WEIGHT_EPSILON
from ..instances import Animation
from ..signal import Signal
from .data import BakedAnimation
from ...developer.dev_logger import log_game

if TYPE_CHECKING:
    from .animator import Animator


class AnimationTrack:
    """
    A playable instance of one baked animation.

    Created by Animator.load_animation(). Host-fired signals:
        stopped  - stop() was called (or a one-shot track reached its end)
        ended    - the track finished fading out after stopping
        did_loop - a looping track wrapped around
    """

    def __init__(
        self,
        animation: Animation,
        baked: BakedAnimation,
        animator: Optional["Animator"] = None
    ):
        self.animation = animation
        self.name = animation.name
        self._baked = baked
        self._animator = animator

        self.length: float = baked.duration
        self.looped: bool = baked.looping

        # Playback state
        self.time_position: float = 0.0
        self.speed: float = 1.0
        self.is_playing: bool = False

        # Weight state: current fades toward target at _fade_rate per second
        self.weight_target: float = 1.0
        self.weight_current: float = 0.0
        self._fade_to: float = 0.0
        self._fade_rate: float = 0.0
        self._stopping: bool = False

        # Include markers at time_position itself on the next advance
        self._include_start: bool = True

        self.stopped = Signal("Stopped")
        self.ended = Signal("Ended")
        self.did_loop = Signal("DidLoop")
        self._marker_signals: Dict[str, Signal] = {}

        self.destroyed = False

    # =========================================================================
    # PLAYBACK CONTROL
    # =========================================================================

    def play(
        self,
        fade_time: float = DEFAULT_FADE_TIME,
        weight: Optional[float] = None,
        speed: Optional[float] = None
    ) -> None:
        """Start from the beginning, fading toward weight_target."""
        if self.destroyed:
            return

        if weight is not None:
            self.weight_target = weight
        if speed is not None:
            self.speed = speed

        self.time_position = 0.0
        self._include_start = True
        self.is_playing = True
        self._stopping = False
        self._start_fade(self.weight_target, fade_time)

        log_game("ANIMATOR", f"PLAY track={self.name} weight={self.weight_target:.2f} speed={self.speed:.2f}")

    def stop(self, fade_time: float = DEFAULT_FADE_TIME) -> None:
        """Stop playing and fade out. `ended` fires on a later update."""
        if self.destroyed or not self.is_playing:
            return

        self.is_playing = False
        self._stopping = True
        self._start_fade(0.0, fade_time)

        log_game("ANIMATOR", f"STOP track={self.name} fade={fade_time:.2f}")
        self.stopped.fire()

    def adjust_weight(self, weight: float = 1.0, fade_time: float = DEFAULT_FADE_TIME) -> None:
        """Set the blend weight target, ramping over fade_time while playing."""
        self.weight_target = weight
        if self.is_playing:
            self._start_fade(weight, fade_time)

    def adjust_speed(self, speed: float = 1.0) -> None:
        self.speed = speed

    def get_marker_reached_signal(self, name: str) -> Signal:
        """Signal fired (with the marker value) when playback crosses `name`."""
        signal = self._marker_signals.get(name)
        if signal is None:
            signal = Signal(f"MarkerReached:{name}")
            self._marker_signals[name] = signal
        return signal

    @property
    def effective_weight(self) -> float:
        return self.weight_current

    @property
    def is_fading_out(self) -> bool:
        return self._stopping

    # =========================================================================
    # RUNTIME UPDATE
    # =========================================================================

    def update(self, delta_time: float) -> None:
        """
        Advance fades and playback time.

        Args:
            delta_time: Time since last frame in seconds (already time-scaled)
        """
        if self.destroyed:
            return

        if self._stopping:
            self._update_fade(delta_time)
            if self.weight_current <= WEIGHT_EPSILON:
                self._finish()
            return

        if not self.is_playing:
            return

        self._update_fade(delta_time)
        self._advance(delta_time * self.speed)

    def _advance(self, step: float) -> None:
        if step <= 0.0:
            return

        start = self.time_position
        end = start + step
        include_start = self._include_start
        self._include_start = False

        if end < self.length:
            self.time_position = end
            self._fire_markers(start, end, include_start)
            return

        # Reached the end of the timeline
        self._fire_markers(start, self.length, include_start)
        if self.destroyed or not self.is_playing:
            return

        if self.looped and self.length > 0.0:
            # One wrap per loop covered by this step
            remaining = end - self.length
            while True:
                self.did_loop.fire()
                if self.destroyed or not self.is_playing:
                    return
                if remaining < self.length:
                    self.time_position = remaining
                    self._fire_markers(0.0, remaining, True)
                    return
                self._fire_markers(0.0, self.length, True)
                if self.destroyed or not self.is_playing:
                    return
                remaining -= self.length
        else:
            self.time_position = self.length
            self.stop()

    def _fire_markers(self, start: float, end: float, include_start: bool) -> None:
        if not self._marker_signals:
            return
        for marker in self._baked.markers_between(start, end, include_start):
            signal = self._marker_signals.get(marker.name)
            if signal is not None:
                signal.fire(marker.value)
            # Stop or destroy from a marker listener ends this advance
            if self.destroyed or not self.is_playing:
                return

    def _start_fade(self, target: float, fade_time: float) -> None:
        self._fade_to = target
        if fade_time is None or fade_time <= 0.0:
            self.weight_current = target
            self._fade_rate = 0.0
        else:
            self._fade_rate = abs(target - self.weight_current) / fade_time

    def _update_fade(self, delta_time: float) -> None:
        if self.weight_current == self._fade_to:
            return
        step = self._fade_rate * delta_time
        if self.weight_current < self._fade_to:
            self.weight_current = min(self._fade_to, self.weight_current + step)
        else:
            self.weight_current = max(self._fade_to, self.weight_current - step)

    def _finish(self) -> None:
        self._stopping = False
        self.weight_current = 0.0
        log_game("ANIMATOR", f"ENDED track={self.name}")
        self.ended.fire()

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def destroy(self) -> None:
        """Halt immediately and detach every listener. No signals fire."""
        if self.destroyed:
            return

        self.destroyed = True
        self.is_playing = False
        self._stopping = False
        self.weight_current = 0.0

        self.stopped.disconnect_all()
        self.ended.disconnect_all()
        self.did_loop.disconnect_all()
        for signal in self._marker_signals.values():
            signal.disconnect_all()
        self._marker_signals.clear()

        if self._animator is not None:
            self._animator._release(self)
            self._animator = None

    def __repr__(self) -> str:
        state = "playing" if self.is_playing else ("fading" if self._stopping else "stopped")
        return f"AnimationTrack('{self.name}', {state}, t={self.time_position:.2f}/{self.length:.2f})"
