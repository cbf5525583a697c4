"""Test helpers for Pet Progress.

Import builders from here rather than from the submodules:

    from tests.helpers import make_state, make_task, make_template
"""

from .builders import (
    ENTRY_ID,
    TODAY,
    YESTERDAY,
    make_state,
    make_task,
    make_template,
    storage_payload,
)
from .entities import button_entity_id, get_entity_id

__all__ = [
    "ENTRY_ID",
    "TODAY",
    "YESTERDAY",
    "button_entity_id",
    "get_entity_id",
    "make_state",
    "make_task",
    "make_template",
    "storage_payload",
]
