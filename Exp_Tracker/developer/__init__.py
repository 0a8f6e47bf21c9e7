"""
Developer Tools Module

Buffered diagnostics logging with per-category toggles and frequency gating.
"""

from .dev_logger import log_game, export_game_log, clear_log, get_stats, start_session
from .dev_debug_gate import should_print_debug, reset_debug_timers

__all__ = [
    'log_game',
    'export_game_log',
    'clear_log',
    'get_stats',
    'start_session',
    'should_print_debug',
    'reset_debug_timers',
]
