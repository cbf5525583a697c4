"""Task Engine - Pure logic for tasks, templates and current-task selection.

This engine provides stateless, pure Python functions for:
- Status access (single ``status`` field, legacy per-flag migration)
- Template creation/validation and expansion into a day's tasks
- The built-in first-run task list
- Today's task queries: nearest task, cyclic navigation, current-task repair

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data. Functions
that "change" a task return a new dict.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
import uuid

from .. import const
from ..utils.dt_utils import dt_parse_date, dt_weekday_index
from .clock_engine import ClockEngine

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from ..type_defs import TaskData, TaskTemplateData


class TaskEngine:
    """Stateless task and template operations."""

    # =========================================================================
    # Status
    # =========================================================================

    @staticmethod
    def get_status(task: dict[str, Any]) -> const.TaskStatus:
        """Return the task's status.

        Documents written before the single status field carry three booleans;
        the first set flag wins in the order done, skipped, missed.
        """
        try:
            return const.TaskStatus(task.get(const.DATA_TASK_STATUS))
        except ValueError:
            pass
        if task.get(const.DATA_TASK_IS_DONE):
            return const.TaskStatus.DONE
        if task.get(const.DATA_TASK_IS_SKIPPED):
            return const.TaskStatus.SKIPPED
        if task.get(const.DATA_TASK_IS_MISSED):
            return const.TaskStatus.MISSED
        return const.TaskStatus.PENDING

    @staticmethod
    def with_status(task: TaskData, status: const.TaskStatus) -> TaskData:
        """Return a copy of ``task`` holding exactly ``status``."""
        updated: TaskData = {**task, const.DATA_TASK_STATUS: status.value}
        for legacy_key in (
            const.DATA_TASK_IS_DONE,
            const.DATA_TASK_IS_SKIPPED,
            const.DATA_TASK_IS_MISSED,
        ):
            updated.pop(legacy_key, None)  # type: ignore[misc]
        return updated

    @staticmethod
    def status_flags(task: dict[str, Any]) -> dict[str, bool]:
        """Return the three boolean flags renderers display."""
        status = TaskEngine.get_status(task)
        return {
            const.DATA_TASK_IS_DONE: status == const.TaskStatus.DONE,
            const.DATA_TASK_IS_SKIPPED: status == const.TaskStatus.SKIPPED,
            const.DATA_TASK_IS_MISSED: status == const.TaskStatus.MISSED,
        }

    @staticmethod
    def is_pending(task: dict[str, Any]) -> bool:
        """Return True if the task is unresolved."""
        return TaskEngine.get_status(task) == const.TaskStatus.PENDING

    # =========================================================================
    # Normalization
    # =========================================================================

    @staticmethod
    def normalize_task(task: dict[str, Any]) -> TaskData:
        """Return a task with every field present and a single status."""
        is_anytime = bool(
            task.get(const.DATA_TASK_IS_ANYTIME)
            or task.get(const.DATA_TASK_DUE_HOUR) == const.ANYTIME_HOUR
        )
        normalized: TaskData = {
            const.DATA_TASK_ID: str(task.get(const.DATA_TASK_ID, "")),
            const.DATA_TASK_TITLE: str(task.get(const.DATA_TASK_TITLE, "")),
            const.DATA_TASK_DESCRIPTION: str(
                task.get(const.DATA_TASK_DESCRIPTION) or ""
            ),
            const.DATA_TASK_DUE_HOUR: (
                const.ANYTIME_HOUR
                if is_anytime
                else int(task.get(const.DATA_TASK_DUE_HOUR, const.ANYTIME_HOUR))
            ),
            const.DATA_TASK_DAY_KEY: str(task.get(const.DATA_TASK_DAY_KEY, "")),
            const.DATA_TASK_STATUS: TaskEngine.get_status(task).value,
            const.DATA_TASK_IS_ANYTIME: is_anytime,
            const.DATA_TASK_IS_RECURRING: bool(
                task.get(const.DATA_TASK_IS_RECURRING, False)
            ),
            const.DATA_TASK_RECURRING_DAYS: list(
                task.get(const.DATA_TASK_RECURRING_DAYS) or []
            ),
        }
        template_id = task.get(const.DATA_TASK_TEMPLATE_ID)
        if template_id:
            normalized[const.DATA_TASK_TEMPLATE_ID] = template_id
        return normalized

    # =========================================================================
    # Templates
    # =========================================================================

    @staticmethod
    def create_template(
        title: str,
        *,
        description: str = "",
        due_hour: int | None = None,
        is_anytime: bool = False,
        is_recurring: bool = False,
        recurring_days: Iterable[int] | None = None,
        template_id: str | None = None,
    ) -> TaskTemplateData:
        """Build a validated template.

        A non-recurring template applies every day. An anytime template (or
        one without a due hour) stores the anytime sentinel.

        Raises:
            ValueError: Empty title, or a recurring template without days.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            raise ValueError(const.ERROR_TITLE_REQUIRED)

        if is_recurring:
            days = sorted({int(day) % 7 for day in (recurring_days or [])})
            if not days:
                raise ValueError(const.ERROR_RECURRING_DAYS_REQUIRED)
        else:
            days = list(const.ALL_WEEKDAYS)

        anytime = is_anytime or due_hour is None or due_hour == const.ANYTIME_HOUR
        hour = const.ANYTIME_HOUR if anytime else int(due_hour) % 24  # type: ignore[arg-type]
        return {
            const.DATA_TEMPLATE_ID: template_id or uuid.uuid4().hex,
            const.DATA_TEMPLATE_TITLE: clean_title,
            const.DATA_TEMPLATE_DESCRIPTION: (description or "").strip(),
            const.DATA_TEMPLATE_DUE_HOUR: hour,
            const.DATA_TEMPLATE_IS_ANYTIME: anytime,
            const.DATA_TEMPLATE_IS_RECURRING: is_recurring,
            const.DATA_TEMPLATE_RECURRING_DAYS: days,
        }

    @staticmethod
    def day_of_week(day_key: str) -> int | None:
        """Return the weekday (0 = Sunday) of a day key, None if unparseable."""
        parsed = dt_parse_date(day_key)
        return dt_weekday_index(parsed) if parsed else None

    @staticmethod
    def template_applies(template: TaskTemplateData, day_key: str) -> bool:
        """Return True if ``template`` produces a task on ``day_key``."""
        if not template.get(const.DATA_TEMPLATE_IS_RECURRING):
            return True
        weekday = TaskEngine.day_of_week(day_key)
        return weekday in template.get(const.DATA_TEMPLATE_RECURRING_DAYS, [])

    @staticmethod
    def task_id_for(day_key: str, suffix: str | int) -> str:
        """Return the deterministic id of a day's task."""
        return f"{day_key}{const.TASK_ID_SEPARATOR}{suffix}"

    @staticmethod
    def task_from_template(template: TaskTemplateData, day_key: str) -> TaskData:
        """Return the pending task ``template`` produces on ``day_key``."""
        template_id = template[const.DATA_TEMPLATE_ID]
        return {
            const.DATA_TASK_ID: TaskEngine.task_id_for(day_key, template_id),
            const.DATA_TASK_TITLE: template[const.DATA_TEMPLATE_TITLE],
            const.DATA_TASK_DESCRIPTION: template.get(
                const.DATA_TEMPLATE_DESCRIPTION, ""
            ),
            const.DATA_TASK_DUE_HOUR: template[const.DATA_TEMPLATE_DUE_HOUR],
            const.DATA_TASK_DAY_KEY: day_key,
            const.DATA_TASK_STATUS: const.TaskStatus.PENDING.value,
            const.DATA_TASK_IS_ANYTIME: template[const.DATA_TEMPLATE_IS_ANYTIME],
            const.DATA_TASK_IS_RECURRING: template[const.DATA_TEMPLATE_IS_RECURRING],
            const.DATA_TASK_RECURRING_DAYS: list(
                template[const.DATA_TEMPLATE_RECURRING_DAYS]
            ),
            const.DATA_TASK_TEMPLATE_ID: template_id,
        }

    @staticmethod
    def expand_templates(
        templates: Iterable[TaskTemplateData], day_key: str
    ) -> list[TaskData]:
        """Return one pending task per template applicable on ``day_key``.

        Output follows template order and is deterministic for a given input.
        """
        return [
            TaskEngine.task_from_template(template, day_key)
            for template in templates
            if TaskEngine.template_applies(template, day_key)
        ]

    @staticmethod
    def default_tasks(day_key: str) -> list[TaskData]:
        """Return the built-in task list: one task per hour, 06:00 to 22:00."""
        return [
            {
                const.DATA_TASK_ID: TaskEngine.task_id_for(day_key, hour),
                const.DATA_TASK_TITLE: const.DEFAULT_TASK_TITLE_FMT.format(hour=hour),
                const.DATA_TASK_DESCRIPTION: "",
                const.DATA_TASK_DUE_HOUR: hour,
                const.DATA_TASK_DAY_KEY: day_key,
                const.DATA_TASK_STATUS: const.TaskStatus.PENDING.value,
                const.DATA_TASK_IS_ANYTIME: False,
                const.DATA_TASK_IS_RECURRING: False,
                const.DATA_TASK_RECURRING_DAYS: [],
            }
            for hour in range(
                const.DEFAULT_TASK_FIRST_HOUR, const.DEFAULT_TASK_LAST_HOUR + 1
            )
        ]

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def tasks_for_day(tasks: Iterable[TaskData], day_key: str) -> list[TaskData]:
        """Return the tasks of ``day_key`` in list order."""
        return [task for task in tasks if task.get(const.DATA_TASK_DAY_KEY) == day_key]

    @staticmethod
    def find_task_index(tasks: list[TaskData], task_id: str | None) -> int | None:
        """Return the list index of ``task_id``, or None."""
        if task_id is None:
            return None
        for index, task in enumerate(tasks):
            if task.get(const.DATA_TASK_ID) == task_id:
                return index
        return None

    @staticmethod
    def first_pending_task_id(tasks: Iterable[TaskData], day_key: str) -> str | None:
        """Return the first unresolved task of ``day_key``."""
        for task in TaskEngine.tasks_for_day(tasks, day_key):
            if TaskEngine.is_pending(task):
                return task[const.DATA_TASK_ID]
        return None

    @staticmethod
    def nearest_task_id(
        tasks: Iterable[TaskData],
        day_key: str,
        now: datetime,
        grace_minutes: int,
    ) -> str | None:
        """Return the task of ``day_key`` closest to the active hour.

        An exact match (the due hour is still actionable per the grace rule)
        wins; otherwise the smallest hour distance, ties resolved by list
        order. Without time-specific tasks the first task of the day is
        returned, or None for an empty day.
        """
        today = TaskEngine.tasks_for_day(tasks, day_key)
        if not today:
            return None

        timed = [task for task in today if not task.get(const.DATA_TASK_IS_ANYTIME)]
        if not timed:
            return today[0][const.DATA_TASK_ID]

        for task in timed:
            if ClockEngine.is_within_grace_period(
                now, task[const.DATA_TASK_DUE_HOUR], grace_minutes
            ):
                return task[const.DATA_TASK_ID]

        active_hour = ClockEngine.active_hour(now, grace_minutes)
        nearest = min(
            timed,
            key=lambda task: abs(task[const.DATA_TASK_DUE_HOUR] - active_hour),
        )
        return nearest[const.DATA_TASK_ID]

    @staticmethod
    def cycle_task_id(
        tasks: Iterable[TaskData], day_key: str, current_id: str | None, step: int
    ) -> str | None:
        """Return the task ``step`` positions from ``current_id``, wrapping.

        With no (or a stale) current task, navigation starts from the first
        task of the day. None for an empty day.
        """
        today = TaskEngine.tasks_for_day(tasks, day_key)
        if not today:
            return None
        index = TaskEngine.find_task_index(today, current_id)
        if index is None:
            return today[0][const.DATA_TASK_ID]
        return today[(index + step) % len(today)][const.DATA_TASK_ID]

    @staticmethod
    def resolve_current_task_id(
        tasks: Iterable[TaskData], day_key: str, current_id: str | None
    ) -> str | None:
        """Return ``current_id`` if it still names a task of ``day_key``.

        Otherwise the first pending task of the day, or None.
        """
        today = TaskEngine.tasks_for_day(tasks, day_key)
        if TaskEngine.find_task_index(today, current_id) is not None:
            return current_id
        return TaskEngine.first_pending_task_id(today, day_key)
