"""Widget Manager - Post-commit snapshot sync and renderer notifications.

Responsible for:
- Building the renderer snapshot (today's tasks, focus, pet, settings)
- Writing it to the shared widget store after every committed change
- Asking renderers to reload (``pet_progress_widget_reload`` bus event)
- Relaying feedback requests (``pet_progress_feedback`` bus event)

Sync is best effort: failures are logged, never raised into the action
that caused them.

Signals Consumed:
- SIGNAL_SUFFIX_STATE_COMMITTED: snapshot + reload
- SIGNAL_SUFFIX_HOUR_BOUNDARY: snapshot + reload (focus moved with the clock)
- SIGNAL_SUFFIX_FEEDBACK_REQUESTED: feedback event
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from .. import const
from ..engines.clock_engine import ClockEngine
from ..engines.task_engine import TaskEngine
from ..engines.xp_engine import XpEngine
from ..utils.dt_utils import dt_now_iso
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PetProgressCoordinator
    from ..type_defs import PetStateData, WidgetSnapshot


class WidgetManager(BaseManager):
    """Manager keeping external renderers in step with committed state."""

    def __init__(
        self, hass: HomeAssistant, coordinator: PetProgressCoordinator
    ) -> None:
        """Initialize widget manager."""
        super().__init__(hass, coordinator)
        self._store: Store[dict[str, Any]] = Store(
            hass, const.WIDGET_STORAGE_VERSION, const.WIDGET_STORAGE_KEY
        )

    async def async_setup(self) -> None:
        """Subscribe to commits, hour boundaries and feedback requests."""
        self.listen(const.SIGNAL_SUFFIX_STATE_COMMITTED, self._on_state_changed)
        self.listen(const.SIGNAL_SUFFIX_HOUR_BOUNDARY, self._on_state_changed)
        self.listen(const.SIGNAL_SUFFIX_FEEDBACK_REQUESTED, self._on_feedback)
        const.LOGGER.debug("WidgetManager initialized for entry %s", self.entry_id)

    # =========================================================================
    # Snapshot
    # =========================================================================

    def build_snapshot(self) -> WidgetSnapshot:
        """Return the renderer view of the committed state."""
        today_tasks = self.coordinator.today_tasks()
        current_id = self.coordinator.current_task_id
        current_index = TaskEngine.find_task_index(today_tasks, current_id)
        now = self.coordinator.now()
        grace = self.coordinator.grace_minutes

        return {
            const.WIDGET_TODAY_TASKS: [
                {
                    const.ATTR_TASK_ID: task[const.DATA_TASK_ID],
                    const.ATTR_TITLE: task[const.DATA_TASK_TITLE],
                    const.ATTR_DESCRIPTION: task.get(const.DATA_TASK_DESCRIPTION, ""),
                    const.ATTR_DUE_HOUR: task[const.DATA_TASK_DUE_HOUR],
                    const.ATTR_IS_ANYTIME: task.get(const.DATA_TASK_IS_ANYTIME, False),
                    const.ATTR_STATUS: TaskEngine.get_status(task).value,
                    **TaskEngine.status_flags(task),
                }
                for task in today_tasks
            ],
            const.WIDGET_CURRENT_INDEX: current_index,
            const.WIDGET_CURRENT_TASK_ID: current_id if current_index is not None else None,
            const.WIDGET_PET_STATE: self.describe_pet(self.coordinator.pet_state),
            const.WIDGET_GRACE_MINUTES: grace,
            const.WIDGET_LAST_ROLLOVER_AT: self.coordinator.last_rollover_date,
            const.WIDGET_LAST_UPDATED: dt_now_iso(),
            const.WIDGET_ACTIVE_HOUR: ClockEngine.active_hour(now, grace),
        }

    def describe_pet(self, pet_state: PetStateData) -> dict[str, Any]:
        """Return XP, stage and progress details for display."""
        thresholds = self.coordinator.xp_config.thresholds
        xp = pet_state[const.DATA_PET_XP]
        stage_index = pet_state[const.DATA_PET_STAGE_INDEX]
        stage = const.PET_STAGES[min(stage_index, len(const.PET_STAGES) - 1)]
        next_index = stage_index + 1
        has_next = next_index < len(thresholds)
        next_stage = (
            const.PET_STAGES[min(next_index, len(const.PET_STAGES) - 1)]
            if has_next
            else None
        )
        return {
            const.ATTR_XP: xp,
            const.ATTR_STAGE_INDEX: stage_index,
            const.ATTR_LEVEL: stage_index + 1,
            const.ATTR_STAGE_NAME: stage[const.STAGE_NAME],
            const.ATTR_STAGE_ICON: stage[const.STAGE_ICON],
            const.ATTR_PROGRESS_PERCENT: XpEngine.progress_to_next_stage(
                xp, stage_index, thresholds
            ),
            const.ATTR_NEXT_STAGE_XP: thresholds[next_index] if has_next else None,
            const.ATTR_NEXT_STAGE_NAME: (
                next_stage[const.STAGE_NAME] if next_stage else None
            ),
        }

    # =========================================================================
    # Sync
    # =========================================================================

    @callback
    def _on_state_changed(self, payload: dict[str, Any]) -> None:
        """Push a fresh snapshot after a commit or hour change."""
        const.LOGGER.debug(
            "DEBUG: Widget sync after '%s'", payload.get("reason", "hour_boundary")
        )
        self.async_sync()

    @callback
    def async_sync(self) -> None:
        """Write the snapshot (fire and forget), then request a reload."""
        snapshot = self.build_snapshot()
        self.hass.async_create_task(
            self._async_write_snapshot(snapshot),
            f"{const.DOMAIN}_widget_snapshot",
        )
        self.request_reload()

    async def _async_write_snapshot(self, snapshot: WidgetSnapshot) -> None:
        try:
            await self._store.async_save(snapshot)
        except (HomeAssistantError, OSError, TypeError, ValueError) as err:
            const.LOGGER.warning("WARNING: Widget snapshot sync failed: %s", err)

    @callback
    def request_reload(self) -> None:
        """Tell renderers to reload the snapshot."""
        try:
            self.hass.bus.async_fire(
                const.EVENT_WIDGET_RELOAD, {const.ATTR_ENTRY_ID: self.entry_id}
            )
        except HomeAssistantError as err:
            const.LOGGER.warning("WARNING: Widget reload request failed: %s", err)

    # =========================================================================
    # Feedback
    # =========================================================================

    @callback
    def _on_feedback(self, payload: dict[str, Any]) -> None:
        """Relay a feedback request to renderers."""
        self.hass.bus.async_fire(
            const.EVENT_FEEDBACK,
            {
                const.ATTR_ENTRY_ID: self.entry_id,
                const.ATTR_FEEDBACK: payload.get(const.ATTR_FEEDBACK),
                const.ATTR_ACTION: payload.get(const.ATTR_ACTION),
                const.ATTR_TASK_ID: payload.get(const.ATTR_TASK_ID),
            },
        )
