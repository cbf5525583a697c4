"""Pure logic engines for Pet Progress.

Engines hold no state and import nothing from Home Assistant; managers own
state and call into them.
"""

from .clock_engine import ClockEngine
from .rollover_engine import RolloverEngine, RolloverSummary
from .task_engine import TaskEngine
from .xp_engine import XpConfig, XpEngine

__all__ = [
    "ClockEngine",
    "RolloverEngine",
    "RolloverSummary",
    "TaskEngine",
    "XpConfig",
    "XpEngine",
]
