# Exp_Tracker/engine/animations/keyframes.py
"""
Keyframe sequences - Structural description of an animation.

A KeyframeSequence holds Keyframes; each Keyframe may hold
KeyframeMarkers (named timeline events). The KeyframeSequenceProvider
maps an animation id to its sequence. Lookups are fallible: unknown ids
raise KeyframeSequenceError.

Worker-safe: no bpy references. The Blender bridge subclasses the
provider to read sequences straight from Actions.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..instances import Instance, InstanceKind
from .cache import AnimationCache
from .data import BakedAnimation


class KeyframeSequenceError(LookupError):
    """Raised when no keyframe sequence exists for an animation id."""


@dataclass(eq=False)
class KeyframeMarker(Instance):
    kind: InstanceKind = InstanceKind.KEYFRAME_MARKER
    value: str = ""


@dataclass(eq=False)
class Keyframe(Instance):
    kind: InstanceKind = InstanceKind.KEYFRAME
    time: float = 0.0

    def add_marker(self, name: str, value: str = "") -> KeyframeMarker:
        return self.add(KeyframeMarker(name=name, value=value))

    def get_markers(self) -> List[Instance]:
        """Marker children in insertion order."""
        return [c for c in self.children if c.is_a(InstanceKind.KEYFRAME_MARKER)]


@dataclass(eq=False)
class KeyframeSequence(Instance):
    kind: InstanceKind = InstanceKind.KEYFRAME_SEQUENCE
    loop: bool = True

    def add_keyframe(self, time: float) -> Keyframe:
        return self.add(Keyframe(name="Keyframe", time=time))

    def get_keyframes(self) -> List[Instance]:
        """Keyframe children in insertion order."""
        return [c for c in self.children if c.is_a(InstanceKind.KEYFRAME)]


def sequence_from_baked(animation: BakedAnimation) -> KeyframeSequence:
    """
    Derive a keyframe sequence from baked data.

    Produces a keyframe at 0, one per distinct marker time, and one at the
    end. Markers sharing a time land on the same keyframe, in timeline order.
    """
    sequence = KeyframeSequence(name=animation.name, loop=animation.looping)
    times = sorted({0.0, animation.duration, *(m.time for m in animation.markers)})

    by_time: Dict[float, Keyframe] = {}
    for t in times:
        by_time[t] = sequence.add_keyframe(t)

    for marker in animation.markers:
        by_time[marker.time].add_marker(marker.name, marker.value)

    return sequence


class KeyframeSequenceProvider:
    """
    Maps animation ids to keyframe sequences.

    Explicit registrations win; otherwise the sequence is derived from the
    baked animation in the attached cache.
    """

    def __init__(self, cache: Optional[AnimationCache] = None):
        self.cache = cache
        self._sequences: Dict[str, KeyframeSequence] = {}

    def register(self, animation_id: str, sequence: KeyframeSequence) -> None:
        self._sequences[animation_id] = sequence

    def unregister(self, animation_id: str) -> bool:
        return self._sequences.pop(animation_id, None) is not None

    def get_keyframe_sequence(self, animation_id: str) -> KeyframeSequence:
        sequence = self._sequences.get(animation_id)
        if sequence is not None:
            return sequence

        if self.cache is not None:
            baked = self.cache.get(animation_id)
            if baked is not None:
                return sequence_from_baked(baked)

        raise KeyframeSequenceError(f"No keyframe sequence for animation '{animation_id}'")


# Process-wide provider (swapped for the Action-backed one inside Blender)
_provider: Optional[KeyframeSequenceProvider] = None


def get_keyframe_provider() -> KeyframeSequenceProvider:
    global _provider
    if _provider is None:
        _provider = KeyframeSequenceProvider()
    return _provider


def set_keyframe_provider(provider: Optional[KeyframeSequenceProvider]) -> None:
    global _provider
    _provider = provider
