# File: managers/system_manager.py
"""System Manager for Pet Progress integration.

Timer owner and day keeper.

Responsibilities:
- DATA INTEGRITY: repairs the loaded document (legacy status flags, missing
  fields, out-of-range settings, stale stage index, stale current task)
- ROLLOVER: runs the rollover check through the coordinator's single
  mutation entry point (the coordinator's periodic update calls it once a
  minute, so a missed midnight is caught up on the next tick or at startup)
- HOUR BOUNDARY: schedules a wake-up at each change of the active hour so
  renderers move their focus even when nothing else changes

Signals Emitted:
- SIGNAL_SUFFIX_ROLLOVER_COMPLETED: with the RolloverSummary fields
- SIGNAL_SUFFIX_HOUR_BOUNDARY: when the active hour changes

Signals Consumed:
- SIGNAL_SUFFIX_SETTINGS_UPDATED: grace minutes changed, reschedule boundary
"""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_point_in_time

from .. import const
from ..engines.clock_engine import ClockEngine
from ..engines.rollover_engine import RolloverEngine, RolloverSummary
from ..engines.task_engine import TaskEngine
from ..engines.xp_engine import XpEngine
from ..utils.dt_utils import dt_parse_date
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import PetProgressCoordinator


class SystemManager(BaseManager):
    """System Manager - timers, integrity and rollover."""

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PetProgressCoordinator,
    ) -> None:
        """Initialize system manager."""
        super().__init__(hass, coordinator)
        self._unsub_boundary: Callable[[], None] | None = None

    async def async_setup(self) -> None:
        """Set up the system manager.

        1. Timer Owner - cancels the hour boundary wake-up on unload (the
           first wake-up is armed once data is loaded)
        2. Signal Listener - reschedules when grace minutes change
        """
        self.coordinator.config_entry.async_on_unload(self._cancel_boundary_timer)

        self.listen(const.SIGNAL_SUFFIX_SETTINGS_UPDATED, self._on_settings_updated)

        const.LOGGER.debug(
            "SystemManager initialized: boundary timer registered for entry %s",
            self.entry_id,
        )

    # =========================================================================
    # Hour Boundary Timer
    # =========================================================================

    def schedule_boundary_timer(self) -> None:
        """(Re)arm the wake-up at the next active-hour change."""
        self._cancel_boundary_timer()
        now = self.coordinator.now()
        when = ClockEngine.next_boundary(now, self.coordinator.grace_minutes)
        self._unsub_boundary = async_track_point_in_time(
            self.hass, self._on_hour_boundary, when
        )
        const.LOGGER.debug("DEBUG: Next active-hour boundary at %s", when.isoformat())

    @callback
    def _cancel_boundary_timer(self) -> None:
        """Cancel the pending wake-up, if any."""
        if self._unsub_boundary is not None:
            self._unsub_boundary()
            self._unsub_boundary = None

    @callback
    def _on_hour_boundary(self, _: datetime) -> None:
        """Handle the active hour changing."""
        self._unsub_boundary = None
        const.LOGGER.debug("SystemManager: Active hour boundary reached")
        self.emit(const.SIGNAL_SUFFIX_HOUR_BOUNDARY)
        self.coordinator.async_update_listeners()
        self.schedule_boundary_timer()

    @callback
    def _on_settings_updated(self, _payload: dict[str, Any]) -> None:
        """Grace minutes moved the boundary; reschedule."""
        self.schedule_boundary_timer()

    # =========================================================================
    # Rollover
    # =========================================================================

    async def async_check_rollover(self, now: datetime | None = None) -> bool:
        """Roll the day over if due.

        The trigger test runs inside the serialized update, against the
        latest state, so it never races a user action.

        Returns:
            True if a rollover was committed.
        """
        now = now or self.coordinator.now()
        xp_config = self.coordinator.xp_config
        retention_days = self.coordinator.history_retention_days
        summaries: list[RolloverSummary] = []

        def _rollover(state: dict[str, Any]) -> dict[str, Any] | None:
            grace = state[const.DATA_SETTINGS][const.DATA_SETTINGS_GRACE_MINUTES]
            if not RolloverEngine.should_rollover(
                state[const.DATA_LAST_ROLLOVER_DATE], now, grace
            ):
                return None

            new_state, summary = RolloverEngine.perform_rollover(
                state,  # type: ignore[arg-type]
                ClockEngine.day_key(now),
                xp_config,
                retention_days=retention_days,
            )
            nearest = TaskEngine.nearest_task_id(
                new_state[const.DATA_TASKS], summary.today, now, grace
            )
            if nearest is not None:
                new_state[const.DATA_CURRENT_TASK_ID] = nearest
            summaries.append(summary)
            return dict(new_state)

        if not await self.coordinator.async_update_state(_rollover, reason="rollover"):
            return False

        summary = summaries[0]
        const.LOGGER.info(
            "INFO: Rolled over %s → %s: %s missed, XP %s → %s, %s new tasks",
            summary.previous_day,
            summary.today,
            summary.missed_count,
            summary.xp_before,
            summary.xp_after,
            summary.created_count,
        )
        if summary.pruned_count:
            const.LOGGER.info(
                "INFO: Pruned %s tasks older than %s days",
                summary.pruned_count,
                retention_days,
            )
        self.emit(const.SIGNAL_SUFFIX_ROLLOVER_COMPLETED, **asdict(summary))
        return True

    # =========================================================================
    # Data Integrity (called BLOCKING by the coordinator before first refresh)
    # =========================================================================

    def ensure_data_integrity(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Return a repaired copy of a loaded document.

        - Tasks: every field present, one ``status`` (legacy flags migrated);
          tasks that cannot be read are dropped
        - Templates: re-validated; invalid ones dropped and their tasks
          detached (kept as ad-hoc tasks)
        - Pet state: non-negative XP, stage recomputed from XP
        - Settings: grace minutes clamped to [0, 30]
        - Last rollover date: today when missing or unreadable
        - Current task: kept if it is one of today's tasks, else first
          pending task of today, else None
        """
        today = self.coordinator.today_key()

        tasks = []
        for task in raw.get(const.DATA_TASKS) or []:
            try:
                tasks.append(TaskEngine.normalize_task(task))
            except (AttributeError, TypeError, ValueError) as err:
                const.LOGGER.warning(
                    "WARNING: Dropping unreadable task %s: %s", task, err
                )

        templates = []
        for template in raw.get(const.DATA_TASK_TEMPLATES) or []:
            try:
                templates.append(
                    TaskEngine.create_template(
                        template.get(const.DATA_TEMPLATE_TITLE, ""),
                        description=template.get(const.DATA_TEMPLATE_DESCRIPTION, ""),
                        due_hour=template.get(const.DATA_TEMPLATE_DUE_HOUR),
                        is_anytime=bool(template.get(const.DATA_TEMPLATE_IS_ANYTIME)),
                        is_recurring=bool(
                            template.get(const.DATA_TEMPLATE_IS_RECURRING)
                        ),
                        recurring_days=template.get(
                            const.DATA_TEMPLATE_RECURRING_DAYS
                        ),
                        template_id=template.get(const.DATA_TEMPLATE_ID),
                    )
                )
            except (AttributeError, TypeError, ValueError) as err:
                const.LOGGER.warning(
                    "WARNING: Dropping invalid template %s: %s", template, err
                )

        template_ids = {template[const.DATA_TEMPLATE_ID] for template in templates}
        for task in tasks:
            template_id = task.get(const.DATA_TASK_TEMPLATE_ID)
            if template_id is not None and template_id not in template_ids:
                const.LOGGER.debug(
                    "DEBUG: Task '%s' detached from missing template '%s'",
                    task[const.DATA_TASK_ID],
                    template_id,
                )
                del task[const.DATA_TASK_TEMPLATE_ID]

        settings = dict(raw.get(const.DATA_SETTINGS) or {})
        settings[const.DATA_SETTINGS_GRACE_MINUTES] = ClockEngine.clamp_grace_minutes(
            settings.get(
                const.DATA_SETTINGS_GRACE_MINUTES, const.DEFAULT_GRACE_MINUTES
            )
        )
        settings.setdefault(
            const.DATA_SETTINGS_PRIVACY_POLICY_URL, const.DEFAULT_PRIVACY_POLICY_URL
        )

        last_rollover_date = raw.get(const.DATA_LAST_ROLLOVER_DATE)
        if dt_parse_date(last_rollover_date) is None:
            const.LOGGER.warning(
                "WARNING: Invalid last rollover date %s, assuming %s",
                last_rollover_date,
                today,
            )
            last_rollover_date = today

        current_task_id = TaskEngine.resolve_current_task_id(
            tasks, today, raw.get(const.DATA_CURRENT_TASK_ID)
        )

        meta = dict(raw.get(const.DATA_META) or {})
        meta[const.DATA_META_SCHEMA_VERSION] = const.SCHEMA_VERSION

        return {
            const.DATA_META: meta,
            const.DATA_TASKS: tasks,
            const.DATA_PET_STATE: XpEngine.normalize(
                raw.get(const.DATA_PET_STATE) or {},
                self.coordinator.xp_config.thresholds,
            ),
            const.DATA_SETTINGS: settings,
            const.DATA_CURRENT_TASK_ID: current_task_id,
            const.DATA_LAST_ROLLOVER_DATE: last_rollover_date,
            const.DATA_TASK_TEMPLATES: templates,
        }
