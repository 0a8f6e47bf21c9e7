# Exp_Tracker/developer/dev_logger.py
"""
Developer Logger - Fast Memory Buffer Logging System

Performance: ~1μs per log call (vs ~1000μs+ for console print)
Export: Batch write to file when the session stops.

Usage:
    from Exp_Tracker.developer.dev_logger import log_game, export_game_log, clear_log

    # During gameplay (fast - just appends to buffer)
    log_game("TRACKER", "PLAY track=Idle speed=1.0 weight=1.0")
    log_game("TRACK-EVENTS", "SKIP anim=Jump error=...")

    # When the session stops
    export_game_log("/tmp/tracker_diagnostics.txt")
    clear_log()
"""

import time
from typing import Dict, List, Optional
from .dev_debug_gate import should_print_debug

# Global log buffer
_log_buffer: List[Dict] = []

# Session tracking
_session_start_time: Optional[float] = None
_current_frame: int = 0

# Performance stats
_total_logs: int = 0
_logs_per_category: Dict[str, int] = {}

# ══════════════════════════════════════════════════════════════════════════════
# CATEGORY MAPPING (log category -> debug property name)
# ══════════════════════════════════════════════════════════════════════════════
# Property names match scene properties: dev_debug_{property_name}
# Categories missing from this map are never gated.

_CATEGORY_MAP = {
    'TRACKER': 'tracker',            # Play/stop/chain decisions
    'TRACK-EVENTS': 'track_events',  # Marker discovery and binding
    'ANIMATOR': 'animator',          # Host track lifecycle
    'ANIM-CACHE': 'anim_cache',      # Baking and cache loads
    'CHARACTER': 'character',        # Spawn / wait
    'BLENDER': 'blender',            # NLA writes, timers
}


def start_session():
    """Call when the game starts - resets session tracking."""
    global _session_start_time, _current_frame, _total_logs
    _session_start_time = time.perf_counter()
    _current_frame = 0
    _total_logs = 0
    _logs_per_category.clear()
    _log_buffer.clear()

    print("[DevLogger] Session started - fast logging active")


def increment_frame():
    """Call once per frame to track frame numbers."""
    global _current_frame
    _current_frame += 1


def _extract_message_key(category: str, message: str) -> str:
    """
    Unique key for frequency gating: "category:PREFIX" where PREFIX is the
    first word of the message.

    Examples:
        ("TRACKER", "PLAY track=Idle") -> "tracker:PLAY"
        ("ANIMATOR", "ENDED track=Jump") -> "animator:ENDED"
    """
    first_space = message.find(' ')
    if first_space > 0:
        prefix = message[:first_space]
    else:
        prefix = message[:20]

    debug_property = _CATEGORY_MAP.get(category, category.lower())
    return f"{debug_property}:{prefix}"


def log_game(category: str, message: str):
    """
    Fast in-memory logging with frequency gating. Zero I/O during gameplay.

    Args:
        category: Log category (e.g., "TRACKER", "ANIMATOR")
        message: The log message, first word is the message type
    """
    global _total_logs

    debug_property = _CATEGORY_MAP.get(category)
    if debug_property:
        message_key = _extract_message_key(category, message)
        if not should_print_debug(debug_property, message_key):
            return  # Frequency gate blocked

    _log_buffer.append({
        'frame': _current_frame,
        'time': time.perf_counter(),
        'category': category,
        'message': message
    })

    _total_logs += 1
    _logs_per_category[category] = _logs_per_category.get(category, 0) + 1


def export_game_log(filepath: str) -> bool:
    """
    Write entire buffer to file. Call when the session stops.

    Returns:
        True if successful, False if error
    """
    if not _log_buffer:
        print("[DevLogger] No logs to export (buffer empty)")
        return False

    try:
        start_time = _session_start_time if _session_start_time else _log_buffer[0]['time']

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write("=" * 80 + "\n")
            f.write("ANIMATION TRACKER DIAGNOSTICS LOG\n")
            f.write(f"Total Logs: {_total_logs}\n")
            f.write(f"Total Frames: {_current_frame}\n")
            f.write(f"Duration: {_log_buffer[-1]['time'] - start_time:.3f}s\n")
            f.write("=" * 80 + "\n\n")

            f.write("Logs per Category:\n")
            for cat, count in sorted(_logs_per_category.items()):
                f.write(f"  {cat}: {count}\n")
            f.write("\n" + "=" * 80 + "\n\n")

            for entry in _log_buffer:
                elapsed = entry['time'] - start_time
                f.write(f"[{entry['category']} F{entry['frame']:04d} T{elapsed:.3f}s] {entry['message']}\n")

            f.write("\n" + "=" * 80 + "\n")
            f.write(f"END OF LOG - {_total_logs} entries\n")
            f.write("=" * 80 + "\n")

        print(f"[DevLogger] Exported {_total_logs} logs to: {filepath}")
        return True

    except OSError as e:
        print(f"[DevLogger] ERROR exporting log: {e}")
        return False


def clear_log():
    """Clear the buffer. Call after export to prepare for next session."""
    _log_buffer.clear()


def get_buffer() -> List[Dict]:
    """Snapshot of buffered entries."""
    return list(_log_buffer)


def get_stats() -> Dict:
    """Get current session statistics."""
    return {
        'total_logs': _total_logs,
        'buffer_size': len(_log_buffer),
        'current_frame': _current_frame,
        'categories': dict(_logs_per_category)
    }
