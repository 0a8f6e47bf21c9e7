# Exp_Tracker/animations/__init__.py
"""
Animations Module - Track management for the local character.

Components:
- Tracker / BaseTracker: name-keyed play/stop/chain over an Animator
- TaskBin: disposer list used for every acquired listener and track
- markers: best-effort marker discovery from keyframe sequences
"""

from .tracker import BaseTracker, Tracker
from .cleanup import TaskBin
from .markers import fetch_keyframe_sequence, collect_marker_names

__all__ = [
    "BaseTracker",
    "Tracker",
    "TaskBin",
    "fetch_keyframe_sequence",
    "collect_marker_names",
]
