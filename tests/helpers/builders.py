"""Builders for task, template and application state dicts used in tests."""

from __future__ import annotations

from typing import Any

from custom_components.pet_progress import const

ENTRY_ID = "test_entry_id"

# Wednesday; January keeps US/Pacific clear of DST changes
TODAY = "2026-01-14"
YESTERDAY = "2026-01-13"


def make_task(
    task_id: str,
    *,
    day_key: str = TODAY,
    due_hour: int = 9,
    status: const.TaskStatus = const.TaskStatus.PENDING,
    title: str | None = None,
    template_id: str | None = None,
) -> dict[str, Any]:
    """Return a normalized task dict."""
    task: dict[str, Any] = {
        const.DATA_TASK_ID: task_id,
        const.DATA_TASK_TITLE: title or f"Task {task_id}",
        const.DATA_TASK_DESCRIPTION: "",
        const.DATA_TASK_DUE_HOUR: due_hour,
        const.DATA_TASK_DAY_KEY: day_key,
        const.DATA_TASK_STATUS: status.value,
        const.DATA_TASK_IS_ANYTIME: due_hour == const.ANYTIME_HOUR,
        const.DATA_TASK_IS_RECURRING: False,
        const.DATA_TASK_RECURRING_DAYS: [],
    }
    if template_id:
        task[const.DATA_TASK_TEMPLATE_ID] = template_id
    return task


def make_template(
    template_id: str,
    *,
    title: str = "Walk the dog",
    due_hour: int = 9,
    is_recurring: bool = False,
    recurring_days: list[int] | None = None,
) -> dict[str, Any]:
    """Return a template dict."""
    return {
        const.DATA_TEMPLATE_ID: template_id,
        const.DATA_TEMPLATE_TITLE: title,
        const.DATA_TEMPLATE_DESCRIPTION: "",
        const.DATA_TEMPLATE_DUE_HOUR: due_hour,
        const.DATA_TEMPLATE_IS_ANYTIME: due_hour == const.ANYTIME_HOUR,
        const.DATA_TEMPLATE_IS_RECURRING: is_recurring,
        const.DATA_TEMPLATE_RECURRING_DAYS: (
            recurring_days if is_recurring else list(const.ALL_WEEKDAYS)
        ),
    }


def make_state(
    tasks: list[dict[str, Any]] | None = None,
    *,
    xp: int = 0,
    stage_index: int = 0,
    grace_minutes: int = const.DEFAULT_GRACE_MINUTES,
    current_task_id: str | None = None,
    last_rollover_date: str = TODAY,
    templates: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return an application state document."""
    return {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
        const.DATA_TASKS: tasks or [],
        const.DATA_PET_STATE: {
            const.DATA_PET_XP: xp,
            const.DATA_PET_STAGE_INDEX: stage_index,
        },
        const.DATA_SETTINGS: {
            const.DATA_SETTINGS_GRACE_MINUTES: grace_minutes,
            const.DATA_SETTINGS_PRIVACY_POLICY_URL: const.DEFAULT_PRIVACY_POLICY_URL,
        },
        const.DATA_CURRENT_TASK_ID: current_task_id,
        const.DATA_LAST_ROLLOVER_DATE: last_rollover_date,
        const.DATA_TASK_TEMPLATES: templates or [],
    }


def storage_payload(state: dict[str, Any]) -> dict[str, Any]:
    """Wrap a state document the way Home Assistant's Store writes it."""
    return {
        "version": const.STORAGE_VERSION,
        "minor_version": 1,
        "key": const.STORAGE_KEY,
        "data": state,
    }
