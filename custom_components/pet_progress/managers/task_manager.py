"""Task Manager - Task lifecycle, current-task selection and templates.

This manager applies user actions (service calls, buttons, deep links) to
individual tasks:
- Status changes (complete, skip, miss, reopen) with their XP side effects
- Current task selection (select, next, prev, nearest)
- Title/description edits
- Template add/delete (cascade) and grace minutes

ARCHITECTURE:
- TaskManager = "The Job" (workflow, one updater per operation)
- TaskEngine / XpEngine = pure logic (STATELESS)
- Coordinator.async_update_state = the only place state is replaced

Every public operation returns True when state changed and False for a
no-op (unknown id, status already held). Unknown ids are logged, never
raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.clock_engine import ClockEngine
from ..engines.task_engine import TaskEngine
from ..engines.xp_engine import XpEngine
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from ..type_defs import TaskTemplateData


__all__ = ["TaskManager"]

# Action → feedback kind relayed to renderers
_STATUS_FEEDBACK: dict[const.TaskStatus, str | None] = {
    const.TaskStatus.DONE: const.FEEDBACK_SUCCESS,
    const.TaskStatus.MISSED: const.FEEDBACK_ERROR,
    const.TaskStatus.SKIPPED: const.FEEDBACK_LIGHT,
    const.TaskStatus.PENDING: None,
}

_STATUS_ACTION: dict[const.TaskStatus, str] = {
    const.TaskStatus.DONE: const.ACTION_COMPLETE,
    const.TaskStatus.MISSED: const.ACTION_MISS,
    const.TaskStatus.SKIPPED: const.ACTION_SKIP,
    const.TaskStatus.PENDING: "reopen",
}


class TaskManager(BaseManager):
    """Manager for task state transitions and current-task selection."""

    async def async_setup(self) -> None:
        """Set up the task manager.

        Task operations are driven by services and buttons; no signals are
        consumed.
        """
        const.LOGGER.debug("TaskManager initialized for entry %s", self.entry_id)

    # =========================================================================
    # Status Transitions
    # =========================================================================

    async def async_complete_task(self, task_id: str | None = None) -> bool:
        """Mark a task done (the current task when ``task_id`` is None)."""
        return await self._async_set_status(task_id, const.TaskStatus.DONE)

    async def async_skip_task(self, task_id: str | None = None) -> bool:
        """Mark a task skipped (the current task when ``task_id`` is None)."""
        return await self._async_set_status(task_id, const.TaskStatus.SKIPPED)

    async def async_miss_task(self, task_id: str | None = None) -> bool:
        """Mark a task missed (the current task when ``task_id`` is None)."""
        return await self._async_set_status(task_id, const.TaskStatus.MISSED)

    async def async_reopen_task(self, task_id: str) -> bool:
        """Return a task to pending, undoing its XP effect."""
        return await self._async_set_status(task_id, const.TaskStatus.PENDING)

    async def _async_set_status(
        self, task_id: str | None, new_status: const.TaskStatus
    ) -> bool:
        """Move one of today's tasks to ``new_status`` and apply the XP transition.

        The previous status is undone first, then the new one applied, in a
        single committed update. A None ``task_id`` is resolved to the
        current task inside the update, so queued navigation is honored.
        Tasks of previous days are closed and cannot be changed.
        """
        today = self.coordinator.today_key()
        xp_config = self.coordinator.xp_config
        action = _STATUS_ACTION[new_status]
        transitions: list[tuple[str, str, int]] = []

        def _transition(state: dict[str, Any]) -> dict[str, Any] | None:
            target_id = (
                task_id if task_id is not None else state[const.DATA_CURRENT_TASK_ID]
            )
            if target_id is None:
                const.LOGGER.warning("WARNING: No current task to %s", action)
                return None

            tasks = state[const.DATA_TASKS]
            index = TaskEngine.find_task_index(tasks, target_id)
            if index is None:
                const.LOGGER.warning(
                    "WARNING: %s", const.ERROR_TASK_NOT_FOUND_FMT.format(target_id)
                )
                return None
            if tasks[index][const.DATA_TASK_DAY_KEY] != today:
                const.LOGGER.warning(
                    "WARNING: Cannot %s '%s': day %s is closed",
                    action,
                    target_id,
                    tasks[index][const.DATA_TASK_DAY_KEY],
                )
                return None

            old_status = TaskEngine.get_status(tasks[index])
            if old_status == new_status:
                const.LOGGER.debug(
                    "DEBUG: Task '%s' already %s", target_id, new_status.value
                )
                return None

            pet_before = state[const.DATA_PET_STATE]
            pet_after = XpEngine.apply_transition(
                pet_before, old_status, new_status, xp_config
            )
            tasks[index] = TaskEngine.with_status(tasks[index], new_status)
            state[const.DATA_PET_STATE] = pet_after
            transitions.append(
                (
                    target_id,
                    old_status.value,
                    pet_after[const.DATA_PET_XP] - pet_before[const.DATA_PET_XP],
                )
            )
            return state

        if not await self.coordinator.async_update_state(
            _transition, reason=f"{action}:{task_id or 'current'}"
        ):
            return False

        target_id, old_status, delta = transitions[0]
        const.LOGGER.info(
            "INFO: Task '%s' %s → %s (XP %+d)",
            target_id,
            old_status,
            new_status.value,
            delta,
        )
        self._request_feedback(_STATUS_FEEDBACK[new_status], action, target_id)
        return True

    async def async_perform_action(self, action: str) -> bool:
        """Run one of the five argument-less deep-link actions.

        Raises:
            ValueError: Unknown action.
        """
        handlers = {
            const.ACTION_COMPLETE: self.async_complete_task,
            const.ACTION_SKIP: self.async_skip_task,
            const.ACTION_MISS: self.async_miss_task,
            const.ACTION_NEXT: self.async_next_task,
            const.ACTION_PREV: self.async_prev_task,
        }
        if action not in handlers:
            raise ValueError(const.ERROR_INVALID_DEEP_LINK_FMT.format(action))
        const.LOGGER.debug("DEBUG: Deep-link action '%s'", action)
        return await handlers[action]()

    # =========================================================================
    # Current Task Selection
    # =========================================================================

    async def async_select_task(self, task_id: str) -> bool:
        """Put one of today's tasks in focus."""
        today = self.coordinator.today_key()

        def _select(state: dict[str, Any]) -> dict[str, Any] | None:
            today_tasks = TaskEngine.tasks_for_day(state[const.DATA_TASKS], today)
            if TaskEngine.find_task_index(today_tasks, task_id) is None:
                const.LOGGER.warning(
                    "WARNING: Cannot select '%s': not one of today's tasks", task_id
                )
                return None
            if state[const.DATA_CURRENT_TASK_ID] == task_id:
                return None
            state[const.DATA_CURRENT_TASK_ID] = task_id
            return state

        return await self.coordinator.async_update_state(
            _select, reason=f"select:{task_id}"
        )

    async def async_next_task(self) -> bool:
        """Advance the focus through today's tasks, wrapping at the end."""
        return await self._async_cycle(1, const.ACTION_NEXT)

    async def async_prev_task(self) -> bool:
        """Move the focus back through today's tasks, wrapping at the start."""
        return await self._async_cycle(-1, const.ACTION_PREV)

    async def _async_cycle(self, step: int, action: str) -> bool:
        today = self.coordinator.today_key()
        moved_to: list[str] = []

        def _cycle(state: dict[str, Any]) -> dict[str, Any] | None:
            new_id = TaskEngine.cycle_task_id(
                state[const.DATA_TASKS], today, state[const.DATA_CURRENT_TASK_ID], step
            )
            if new_id is None or new_id == state[const.DATA_CURRENT_TASK_ID]:
                return None
            state[const.DATA_CURRENT_TASK_ID] = new_id
            moved_to.append(new_id)
            return state

        if not await self.coordinator.async_update_state(_cycle, reason=action):
            const.LOGGER.debug("DEBUG: No task to move to (%s)", action)
            return False
        self._request_feedback(const.FEEDBACK_LIGHT, action, moved_to[0])
        return True

    async def async_select_nearest_task(self, now: datetime | None = None) -> bool:
        """Focus the task closest to the active hour (load time)."""
        now = now or self.coordinator.now()
        today = ClockEngine.day_key(now)

        def _nearest(state: dict[str, Any]) -> dict[str, Any] | None:
            grace = state[const.DATA_SETTINGS][const.DATA_SETTINGS_GRACE_MINUTES]
            nearest = TaskEngine.nearest_task_id(
                state[const.DATA_TASKS], today, now, grace
            )
            if nearest is None or nearest == state[const.DATA_CURRENT_TASK_ID]:
                return None
            state[const.DATA_CURRENT_TASK_ID] = nearest
            return state

        return await self.coordinator.async_update_state(_nearest, reason="nearest")

    # =========================================================================
    # Edits
    # =========================================================================

    async def async_edit_task_title(self, task_id: str, title: str) -> bool:
        """Replace a task's title."""
        return await self._async_edit_field(task_id, const.DATA_TASK_TITLE, title)

    async def async_edit_task_description(self, task_id: str, description: str) -> bool:
        """Replace a task's description."""
        return await self._async_edit_field(
            task_id, const.DATA_TASK_DESCRIPTION, description
        )

    async def _async_edit_field(self, task_id: str, field: str, value: str) -> bool:
        def _edit(state: dict[str, Any]) -> dict[str, Any] | None:
            tasks = state[const.DATA_TASKS]
            index = TaskEngine.find_task_index(tasks, task_id)
            if index is None:
                const.LOGGER.warning(
                    "WARNING: %s", const.ERROR_TASK_NOT_FOUND_FMT.format(task_id)
                )
                return None
            if tasks[index].get(field) == value:
                return None
            tasks[index] = {**tasks[index], field: value}
            return state

        return await self.coordinator.async_update_state(
            _edit, reason=f"edit_{field}:{task_id}"
        )

    # =========================================================================
    # Templates + Settings
    # =========================================================================

    async def async_add_template(
        self,
        title: str,
        *,
        description: str = "",
        due_hour: int | None = None,
        is_anytime: bool = False,
        is_recurring: bool = False,
        recurring_days: Iterable[int] | None = None,
    ) -> TaskTemplateData:
        """Create a template and, when it applies today, today's task.

        Raises:
            ValueError: Empty title, or a recurring template without days.
        """
        template = TaskEngine.create_template(
            title,
            description=description,
            due_hour=due_hour,
            is_anytime=is_anytime,
            is_recurring=is_recurring,
            recurring_days=recurring_days,
        )
        today = self.coordinator.today_key()

        def _add(state: dict[str, Any]) -> dict[str, Any]:
            state[const.DATA_TASK_TEMPLATES].append(template)
            if TaskEngine.template_applies(template, today):
                task = TaskEngine.task_from_template(template, today)
                if (
                    TaskEngine.find_task_index(
                        state[const.DATA_TASKS], task[const.DATA_TASK_ID]
                    )
                    is None
                ):
                    state[const.DATA_TASKS].append(task)
                if state[const.DATA_CURRENT_TASK_ID] is None:
                    state[const.DATA_CURRENT_TASK_ID] = task[const.DATA_TASK_ID]
            return state

        await self.coordinator.async_update_state(
            _add, reason=f"add_template:{template[const.DATA_TEMPLATE_ID]}"
        )
        const.LOGGER.info(
            "INFO: Added template '%s' (%s)",
            template[const.DATA_TEMPLATE_TITLE],
            template[const.DATA_TEMPLATE_ID],
        )
        return template

    async def async_delete_template(self, template_id: str) -> bool:
        """Delete a template and every task it produced, on any day."""
        today = self.coordinator.today_key()
        removed: list[int] = []

        def _delete(state: dict[str, Any]) -> dict[str, Any] | None:
            templates = state[const.DATA_TASK_TEMPLATES]
            kept_templates = [
                template
                for template in templates
                if template.get(const.DATA_TEMPLATE_ID) != template_id
            ]
            if len(kept_templates) == len(templates):
                const.LOGGER.warning(
                    "WARNING: %s",
                    const.ERROR_TEMPLATE_NOT_FOUND_FMT.format(template_id),
                )
                return None

            tasks = state[const.DATA_TASKS]
            kept_tasks = [
                task
                for task in tasks
                if task.get(const.DATA_TASK_TEMPLATE_ID) != template_id
            ]
            removed.append(len(tasks) - len(kept_tasks))
            state[const.DATA_TASK_TEMPLATES] = kept_templates
            state[const.DATA_TASKS] = kept_tasks
            state[const.DATA_CURRENT_TASK_ID] = TaskEngine.resolve_current_task_id(
                kept_tasks, today, state[const.DATA_CURRENT_TASK_ID]
            )
            return state

        if not await self.coordinator.async_update_state(
            _delete, reason=f"delete_template:{template_id}"
        ):
            return False
        const.LOGGER.info(
            "INFO: Deleted template %s and %s of its tasks", template_id, removed[0]
        )
        return True

    async def async_set_grace_minutes(self, minutes: Any) -> bool:
        """Store the grace minutes, clamped to [0, 30]."""
        grace = ClockEngine.clamp_grace_minutes(minutes)
        if grace != minutes:
            const.LOGGER.warning(
                "WARNING: Grace minutes %s out of range, using %s", minutes, grace
            )

        def _set(state: dict[str, Any]) -> dict[str, Any] | None:
            settings = state[const.DATA_SETTINGS]
            if settings.get(const.DATA_SETTINGS_GRACE_MINUTES) == grace:
                return None
            settings[const.DATA_SETTINGS_GRACE_MINUTES] = grace
            return state

        if not await self.coordinator.async_update_state(_set, reason="grace_minutes"):
            return False
        self.emit(const.SIGNAL_SUFFIX_SETTINGS_UPDATED, grace_minutes=grace)
        return True

    # =========================================================================
    # Feedback
    # =========================================================================

    def _request_feedback(
        self, feedback: str | None, action: str, task_id: str | None
    ) -> None:
        if feedback is None:
            return
        self.emit(
            const.SIGNAL_SUFFIX_FEEDBACK_REQUESTED,
            feedback=feedback,
            action=action,
            task_id=task_id,
        )
