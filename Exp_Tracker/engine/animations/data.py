# Exp_Tracker/engine/animations/data.py
"""
BakedAnimation - Playback data for one animation asset.

Holds what the runtime needs to play a track: duration, frame rate,
default looping, and the named markers placed along the timeline.

Worker-safe: contains no Blender references, can be pickled.

NUMPY INDEX:
  - Marker times are kept in a sorted float64 array
  - markers_between() uses searchsorted, so crossing checks per update
    stay O(log n) regardless of marker count
"""

import numpy as np
from typing import List, NamedTuple, Optional, Sequence


class AnimationMarker(NamedTuple):
    """A named point on the animation timeline (seconds)."""
    name: str
    time: float
    value: str = ""


class BakedAnimation:
    """
    Baked animation data.

    Attributes:
        name: Animation id (from Blender Action name)
        duration: Total duration in seconds
        fps: Frames per second
        frame_count: Total number of frames
        looping: Whether this animation loops by default
        markers: Markers sorted by time (stable for equal times)
        marker_times: np.ndarray float64 (num_markers,) matching markers
    """

    __slots__ = (
        'name', 'duration', 'fps', 'frame_count',
        'looping', 'markers', 'marker_times'
    )

    def __init__(
        self,
        name: str,
        duration: float,
        fps: float = 30.0,
        looping: bool = True,
        markers: Optional[Sequence] = None
    ):
        self.name = name
        self.duration = max(0.0, float(duration))
        self.fps = fps
        self.frame_count = int(self.duration * fps) + 1
        self.looping = looping

        # Accept (name, time) or (name, time, value) tuples
        parsed = [AnimationMarker(*m) for m in (markers or [])]
        parsed.sort(key=lambda m: m.time)
        self.markers: List[AnimationMarker] = parsed
        self.marker_times = np.array([m.time for m in parsed], dtype=np.float64)

    @property
    def has_markers(self) -> bool:
        return len(self.markers) > 0

    @property
    def marker_names(self) -> List[str]:
        """Marker names in timeline order (duplicates kept)."""
        return [m.name for m in self.markers]

    def markers_between(
        self,
        start: float,
        end: float,
        include_start: bool = False
    ) -> List[AnimationMarker]:
        """
        Markers crossed when playback moves from start to end.

        Window is (start, end], or [start, end] when include_start is set.
        Returns an empty list when end < start.
        """
        if not self.markers or end < start:
            return []

        side = 'left' if include_start else 'right'
        lo = int(np.searchsorted(self.marker_times, start, side=side))
        hi = int(np.searchsorted(self.marker_times, end, side='right'))
        return self.markers[lo:hi]

    def to_dict(self) -> dict:
        """Convert to plain dict for serialization/pickling to worker."""
        return {
            "name": self.name,
            "duration": self.duration,
            "fps": self.fps,
            "frame_count": self.frame_count,
            "looping": self.looping,
            "markers": [tuple(m) for m in self.markers],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BakedAnimation":
        """Reconstruct from plain dict (after unpickling in worker)."""
        return cls(
            name=data["name"],
            duration=data["duration"],
            fps=data.get("fps", 30.0),
            looping=data.get("looping", True),
            markers=data.get("markers", []),
        )

    def __repr__(self) -> str:
        parts = [f"'{self.name}'", f"{self.duration:.2f}s", f"{self.fps}fps"]
        if self.has_markers:
            parts.append(f"{len(self.markers)} markers")
        if not self.looping:
            parts.append("once")
        return f"BakedAnimation({', '.join(parts)})"
