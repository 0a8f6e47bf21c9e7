# Exp_Tracker/blender/operators.py
"""
Operators and the sidebar panel that drive the tracker runtime.

Spawn the target armature, build a Tracker over the scene's actions,
audition tracks by name, tear everything down, export the diagnostics log.
"""

import os
import tempfile

import bpy

from ..developer.dev_logger import export_game_log, clear_log, get_stats, start_session
from ..developer.dev_debug_gate import reset_debug_timers
from .runtime import (
    spawn_local_character,
    despawn_local_character,
    create_tracker,
    destroy_tracker,
    get_tracker,
)

# Debug categories exposed as scene toggles (dev_debug_<name>)
DEBUG_TOGGLES = ("tracker", "track_events", "animator", "anim_cache", "character", "blender")


class EXP_TRACKER_OT_SpawnCharacter(bpy.types.Operator):
    """Bake the scene's actions and spawn the target armature as the local character"""

    bl_idname = "exp_tracker.spawn_character"
    bl_label = "Spawn Character"

    def execute(self, context):
        start_session()
        reset_debug_timers()
        character = spawn_local_character(context.scene)
        if character is None:
            self.report({'WARNING'}, "No target armature set.")
            return {'CANCELLED'}

        count = character.animator.cache.count
        self.report({'INFO'}, f"Spawned {character.name} with {count} animations.")
        return {'FINISHED'}


class EXP_TRACKER_OT_DespawnCharacter(bpy.types.Operator):
    bl_idname = "exp_tracker.despawn_character"
    bl_label = "Despawn Character"

    def execute(self, context):
        despawn_local_character()
        return {'FINISHED'}


class EXP_TRACKER_OT_CreateTracker(bpy.types.Operator):
    """Build a tracker over the scene's actions for the spawned character"""

    bl_idname = "exp_tracker.create_tracker"
    bl_label = "Create Tracker"

    def execute(self, context):
        try:
            tracker = create_tracker(context.scene)
        except ValueError as e:
            # An action added after spawning has not been baked yet
            self.report({'ERROR'}, f"{e}. Respawn the character.")
            return {'CANCELLED'}

        if tracker is None:
            self.report({'WARNING'}, "No character spawned.")
            return {'CANCELLED'}

        self.report({'INFO'}, f"Tracker ready: {len(tracker.tracks)} tracks.")
        return {'FINISHED'}


class EXP_TRACKER_OT_DestroyTracker(bpy.types.Operator):
    bl_idname = "exp_tracker.destroy_tracker"
    bl_label = "Destroy Tracker"

    def execute(self, context):
        if not destroy_tracker():
            self.report({'WARNING'}, "No tracker to destroy.")
            return {'CANCELLED'}
        return {'FINISHED'}


class EXP_TRACKER_OT_PlayTrack(bpy.types.Operator):
    bl_idname = "exp_tracker.play_track"
    bl_label = "Play Track"

    track_name: bpy.props.StringProperty(name="Track")
    exclusive: bpy.props.BoolProperty(name="Exclusive", default=True)

    def execute(self, context):
        tracker = get_tracker()
        if tracker is None:
            self.report({'WARNING'}, "No tracker. Create one first.")
            return {'CANCELLED'}
        tracker.play(self.track_name, exclusive=self.exclusive)
        return {'FINISHED'}


class EXP_TRACKER_OT_StopAll(bpy.types.Operator):
    bl_idname = "exp_tracker.stop_all"
    bl_label = "Stop All"

    def execute(self, context):
        tracker = get_tracker()
        if tracker is None:
            return {'CANCELLED'}
        tracker.stop_all()
        return {'FINISHED'}


class EXP_TRACKER_OT_ExportLog(bpy.types.Operator):
    """Write the diagnostics buffer to a text file and clear it"""

    bl_idname = "exp_tracker.export_log"
    bl_label = "Export Log"

    filepath: bpy.props.StringProperty(subtype='FILE_PATH', default="")

    def execute(self, context):
        path = self.filepath or os.path.join(tempfile.gettempdir(), "exp_tracker_diagnostics.txt")
        if not export_game_log(path):
            self.report({'WARNING'}, "Nothing to export.")
            return {'CANCELLED'}
        clear_log()
        self.report({'INFO'}, f"Log written to {path}")
        return {'FINISHED'}


class VIEW3D_PT_exp_tracker(bpy.types.Panel):
    bl_label = "Animation Tracker"
    bl_idname = "VIEW3D_PT_exp_tracker"
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = "Exploratory"

    def draw(self, context):
        layout = self.layout
        scene = context.scene

        # ─── Character ───
        box = layout.box()
        box.label(text="Character", icon='ARMATURE_DATA')
        box.prop(scene, "target_armature", text="Armature")
        box.prop(scene, "tracker_action_prefix", text="Prefix")
        row = box.row(align=True)
        row.operator("exp_tracker.spawn_character", icon='PLAY')
        row.operator("exp_tracker.despawn_character", icon='X')

        # ─── Tracker ───
        tracker = get_tracker()
        box = layout.box()
        box.label(text="Tracker", icon='ACTION')
        row = box.row(align=True)
        row.operator("exp_tracker.create_tracker", icon='ADD')
        row.operator("exp_tracker.destroy_tracker", icon='TRASH')

        if tracker is not None:
            col = box.column(align=True)
            for name in tracker.tracks:
                icon = 'PAUSE' if tracker.is_playing(name) else 'PLAY'
                op = col.operator("exp_tracker.play_track", text=name, icon=icon)
                op.track_name = name
            box.operator("exp_tracker.stop_all", icon='CANCEL')

        # ─── Diagnostics ───
        box = layout.box()
        box.label(text="Diagnostics", icon='CONSOLE')
        box.prop(scene, "dev_debug_master_hz")
        col = box.column(align=True)
        for prop in DEBUG_TOGGLES:
            col.prop(scene, f"dev_debug_{prop}")
        stats = get_stats()
        box.label(text=f"Buffered: {stats['buffer_size']} (frame {stats['current_frame']})")
        box.operator("exp_tracker.export_log", icon='EXPORT')


classes = (
    EXP_TRACKER_OT_SpawnCharacter,
    EXP_TRACKER_OT_DespawnCharacter,
    EXP_TRACKER_OT_CreateTracker,
    EXP_TRACKER_OT_DestroyTracker,
    EXP_TRACKER_OT_PlayTrack,
    EXP_TRACKER_OT_StopAll,
    EXP_TRACKER_OT_ExportLog,
    VIEW3D_PT_exp_tracker,
)
