# Exp_Tracker/animations/markers.py
"""
Marker discovery - Which named markers each animation carries.

Keyframe data lookups are best-effort: a provider failure for one asset
means that asset contributes no markers. Nothing is raised to the caller.
"""

from typing import List, Optional

from ..engine.instances import Animation, InstanceKind
from ..engine.animations.keyframes import KeyframeSequence, KeyframeSequenceProvider
from ..developer.dev_logger import log_game


def fetch_keyframe_sequence(
    provider: KeyframeSequenceProvider,
    animation: Animation
) -> Optional[KeyframeSequence]:
    """Keyframe sequence for an asset, or None if the provider fails."""
    try:
        return provider.get_keyframe_sequence(animation.animation_id)
    except Exception as e:
        log_game("TRACK-EVENTS", f"SKIP anim={animation.name} id={animation.animation_id} error={e}")
        return None


def collect_marker_names(sequence: KeyframeSequence) -> List[str]:
    """Marker names in encounter order: keyframes in sequence order, then markers."""
    markers: List[str] = []
    for keyframe in sequence.get_keyframes():
        if not keyframe.is_a(InstanceKind.KEYFRAME):
            continue
        for marker in keyframe.get_markers():
            if not marker.is_a(InstanceKind.KEYFRAME_MARKER):
                continue
            markers.append(marker.name)
    return markers
