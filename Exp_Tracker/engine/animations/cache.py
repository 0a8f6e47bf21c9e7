# Exp_Tracker/engine/animations/cache.py
"""
AnimationCache - Baked animations by id, and which performer loaded which.

Worker-safe: no bpy references.

The Blender bridge reads the bindings to know which NLA tracks belong to
an armature; the keyframe provider reads the baked markers.
"""

from typing import Dict, List, Optional, Set
from .data import BakedAnimation


class AnimationCache:
    """
    Usage:
        cache = AnimationCache()
        cache.add(BakedAnimation("Walk", 1.0))
        cache.bind("Player", "Walk")
        cache.get_bound("Player")  # ["Walk"]
    """

    __slots__ = ('_animations', '_bindings')

    def __init__(self):
        self._animations: Dict[str, BakedAnimation] = {}
        # {owner_id: animation ids}
        self._bindings: Dict[str, Set[str]] = {}

    def add(self, animation: BakedAnimation) -> None:
        """Add or replace an animation."""
        self._animations[animation.name] = animation

    def add_many(self, animations: List[BakedAnimation]) -> int:
        for anim in animations:
            self.add(anim)
        return len(animations)

    def get(self, animation_id: str) -> Optional[BakedAnimation]:
        return self._animations.get(animation_id)

    @property
    def count(self) -> int:
        return len(self._animations)

    # =========================================================================
    # OWNER BINDINGS
    # =========================================================================

    def bind(self, owner_id: str, animation_id: str) -> bool:
        """Record that an owner loaded an animation. False if it is unknown."""
        if animation_id not in self._animations:
            return False
        self._bindings.setdefault(owner_id, set()).add(animation_id)
        return True

    def unbind_all(self, owner_id: str) -> None:
        self._bindings.pop(owner_id, None)

    def get_bound(self, owner_id: str) -> List[str]:
        """Animation ids bound to an owner, sorted."""
        return sorted(self._bindings.get(owner_id, ()))

    def __repr__(self) -> str:
        return f"AnimationCache({self.count} animations, {len(self._bindings)} owners)"
