"""Manager modules for Pet Progress integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .system_manager import SystemManager
from .task_manager import TaskManager
from .widget_manager import WidgetManager

__all__ = [
    "BaseManager",
    "SystemManager",
    "TaskManager",
    "WidgetManager",
]
