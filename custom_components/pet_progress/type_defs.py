"""Type definitions for Pet Progress data structures.

TypedDict is used for structures whose keys are fixed at design time (tasks,
templates, pet state, settings, the stored document). Snapshot payloads built
for renderers stay plain ``dict[str, Any]``.

IMPORTANT: This file must NOT import from coordinator.py or managers to avoid
circular dependencies. Only typing machinery is imported here.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation (``.get()``
defaults, migrations) lives in the engines and the system manager.
"""

from typing import Any, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

TaskId = str  # "<day_key>-<template id or hour>"
TemplateId = str  # uuid4 hex
DayKey = str  # Local calendar date "2026-01-18"


# =============================================================================
# Stored Structures
# =============================================================================


class TaskData(TypedDict):
    """A single concrete task for one day."""

    id: TaskId
    title: str
    description: str
    due_hour: int  # 0-23, or -1 for anytime
    day_key: DayKey
    status: str  # const.TaskStatus value
    is_anytime: bool
    is_recurring: bool
    recurring_days: list[int]  # 0 = Sunday .. 6 = Saturday
    template_id: NotRequired[TemplateId | None]


class TaskTemplateData(TypedDict):
    """Recurring (or every-day) blueprint expanded into tasks at rollover."""

    id: TemplateId
    title: str
    description: str
    due_hour: int
    is_anytime: bool
    is_recurring: bool
    recurring_days: list[int]


class PetStateData(TypedDict):
    """XP counter and the stage it maps to."""

    xp: int
    stage_index: int


class SettingsData(TypedDict):
    """User-adjustable settings."""

    grace_minutes: int
    privacy_policy_url: str


class MetaData(TypedDict):
    """Bookkeeping for the stored document."""

    schema_version: int


class AppStateData(TypedDict):
    """The whole persisted document."""

    meta: MetaData
    tasks: list[TaskData]
    pet_state: PetStateData
    settings: SettingsData
    current_task_id: TaskId | None
    last_rollover_date: DayKey
    task_templates: list[TaskTemplateData]


# Renderer payloads are assembled ad hoc
WidgetSnapshot = dict[str, Any]
