# Exp_Tracker/blender/__init__.py
"""
Blender bridge - bpy side of the tracker.

Registers scene properties (target armature, action prefix, debug toggles)
plus the operators and sidebar panel that drive the runtime.
Importing this package requires bpy.
"""

import bpy

from .actions import bake_action, folder_from_actions, ActionKeyframeProvider
from .runtime import (
    spawn_local_character,
    despawn_local_character,
    create_tracker,
    destroy_tracker,
    get_tracker,
    apply_to_nla,
)
from .operators import DEBUG_TOGGLES, classes

__all__ = [
    "bake_action",
    "folder_from_actions",
    "ActionKeyframeProvider",
    "spawn_local_character",
    "despawn_local_character",
    "create_tracker",
    "destroy_tracker",
    "get_tracker",
    "apply_to_nla",
]


def add_scene_properties():
    bpy.types.Scene.target_armature = bpy.props.PointerProperty(
        name="Target Armature",
        type=bpy.types.Object,
        description="Armature (or main character object) animated by the tracker"
    )
    bpy.types.Scene.tracker_action_prefix = bpy.props.StringProperty(
        name="Action Prefix",
        default="",
        description="Only Actions starting with this prefix become tracker animations"
    )
    bpy.types.Scene.dev_debug_master_hz = bpy.props.IntProperty(
        name="Debug Hz",
        default=30,
        min=1,
        max=30,
        description="Max log rate per message type (30 = every message)"
    )
    for category in DEBUG_TOGGLES:
        setattr(
            bpy.types.Scene,
            f"dev_debug_{category}",
            bpy.props.BoolProperty(name=category.replace("_", " ").title(), default=False)
        )


def remove_scene_properties():
    names = ["target_armature", "tracker_action_prefix", "dev_debug_master_hz"]
    names += [f"dev_debug_{category}" for category in DEBUG_TOGGLES]
    for name in names:
        if hasattr(bpy.types.Scene, name):
            delattr(bpy.types.Scene, name)


def register():
    add_scene_properties()
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    despawn_local_character()
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
    remove_scene_properties()
