# Exp_Tracker/engine/instances.py
"""
Instance tree - Tagged host objects.

The host hands the tracker containers of objects (folders of animations,
keyframe sequences holding keyframes and markers). Each object carries a
type tag from a closed set; callers filter by tag instead of by class.

Worker-safe: no bpy references.
"""

import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional


class InstanceKind(enum.Enum):
    """Closed set of host object types."""
    FOLDER = "Folder"
    ANIMATION = "Animation"
    KEYFRAME_SEQUENCE = "KeyframeSequence"
    KEYFRAME = "Keyframe"
    KEYFRAME_MARKER = "KeyframeMarker"
    POSE = "Pose"
    OTHER = "Other"


@dataclass(eq=False)
class Instance:
    """A named, tagged node with ordered children."""
    name: str
    kind: InstanceKind = InstanceKind.FOLDER
    children: List["Instance"] = field(default_factory=list)

    def is_a(self, kind: InstanceKind) -> bool:
        return self.kind is kind

    def add(self, child: "Instance") -> "Instance":
        """Append a child and return it."""
        self.children.append(child)
        return child

    def get_children(self) -> List["Instance"]:
        return list(self.children)

    def get_descendants(self) -> List["Instance"]:
        """All nested instances, depth-first pre-order."""
        return list(self._walk())

    def find_first_child(self, name: str) -> Optional["Instance"]:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def _walk(self) -> Iterator["Instance"]:
        for child in self.children:
            yield child
            yield from child._walk()


@dataclass(eq=False)
class Animation(Instance):
    """
    Animation asset: a name plus the id the host uses to look up
    its baked data and keyframe sequence.
    """
    kind: InstanceKind = InstanceKind.ANIMATION
    animation_id: str = ""

    def __post_init__(self):
        if not self.animation_id:
            self.animation_id = self.name


def Folder(name: str, *children: Instance) -> Instance:
    """Build a folder instance holding the given children."""
    return Instance(name=name, kind=InstanceKind.FOLDER, children=list(children))
