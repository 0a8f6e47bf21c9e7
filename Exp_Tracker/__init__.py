# ##### BEGIN GPL LICENSE BLOCK #####
#
#  This program is free software; you can redistribute it and/or
#  modify it under the terms of the GNU General Public License
#  as published by the Free Software Foundation; either version 2
#  of the License, or (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU General Public License for more details.
#
#  You should have received a copy of the GNU General Public License
#  along with this program; if not, write to the Free Software Foundation,
#  Inc., 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301, USA.
#
# ##### END GPL LICENSE BLOCK #####

bl_info = {
    "name": "Exploratory Tracker",
    "blender": (5, 0, 0),
    "author": "Spencer Shade",
    "doc_url": "https://exploratory.online/",
    "tracker_url": "https://discord.gg/GJpGAAvMBe",
    "description": "Name-keyed animation tracks with marker events for the player character",
    "version": (1, 0, 0),
}

# ============================================================================
# BPY IMPORT GUARD
# ============================================================================
# The animations/engine/developer packages are worker-safe and import without
# Blender. Only the blender bridge needs bpy, and it is loaded on register().
try:
    import bpy  # noqa: F401
except ImportError:
    bpy = None  # noqa: N816

from .animations import BaseTracker, Tracker, TaskBin

__all__ = ["BaseTracker", "Tracker", "TaskBin", "register", "unregister"]


def register():
    if bpy is None:
        raise RuntimeError("Exploratory Tracker must be registered from inside Blender")
    from . import blender
    blender.register()


def unregister():
    if bpy is None:
        return
    from . import blender
    blender.unregister()
