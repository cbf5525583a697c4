# File: coordinator.py
"""Coordinator for the Pet Progress integration.

Owns the single in-memory application document and the one entry point that
mutates it. Every change (service calls, buttons, the periodic rollover
check) is routed through ``async_update_state`` which:

1. takes the update lock, so no two read-modify-write cycles interleave
2. hands the updater a private copy of the latest state
3. on a change, swaps the copy in, persists it, and refreshes entities
4. emits ``state_committed`` for the widget sync manager

Domain workflows live in the managers; pure calculations in the engines.
"""

from __future__ import annotations

import asyncio
import copy
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .engines.task_engine import TaskEngine
from .engines.xp_engine import XpConfig
from .helpers.entity_helpers import get_event_signal
from .managers import SystemManager, TaskManager, WidgetManager
from .utils.dt_utils import dt_now_local, dt_today_iso

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import PetProgressStore
    from .type_defs import PetStateData, TaskData, TaskTemplateData


class PetProgressCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for Pet Progress integration.

    The periodic update runs the rollover check; entity state is refreshed
    after every committed mutation.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: PetProgressStore,
    ) -> None:
        """Initialize the PetProgressCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=const.ROLLOVER_CHECK_INTERVAL,
        )
        self.store = store
        self._data: dict[str, Any] = {}
        self._update_lock = asyncio.Lock()

        self.system_manager = SystemManager(hass, self)
        self.task_manager = TaskManager(hass, self)
        self.widget_manager = WidgetManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Setup + Periodic Refresh
    # -------------------------------------------------------------------------------------

    async def async_setup_managers(self) -> None:
        """Set up managers (listeners and timers) before the first refresh."""
        await self.widget_manager.async_setup()
        await self.task_manager.async_setup()
        await self.system_manager.async_setup()

    async def async_config_entry_first_refresh(self) -> None:
        """Load from storage, repair, run the first update, pick the nearest task."""
        loaded = await self.store.async_load(dt_today_iso())
        self._data = self.system_manager.ensure_data_integrity(loaded)
        self.store.set_data(self._data)

        await super().async_config_entry_first_refresh()

        await self.task_manager.async_select_nearest_task()
        self.system_manager.schedule_boundary_timer()

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update: close out the day when due."""
        try:
            await self.system_manager.async_check_rollover()
        except HomeAssistantError as err:
            raise UpdateFailed(f"Error updating Pet Progress data: {err}") from err
        return self._data

    # -------------------------------------------------------------------------------------
    # Single Mutation Entry Point
    # -------------------------------------------------------------------------------------

    async def async_update_state(
        self,
        updater: Callable[[dict[str, Any]], dict[str, Any] | None],
        *,
        reason: str,
    ) -> bool:
        """Apply ``updater`` to the latest state, atomically.

        ``updater`` receives a deep copy of the current state and returns the
        new state, or None when nothing changed. A failing updater leaves the
        state untouched.

        Returns:
            True if a new state was committed.
        """
        async with self._update_lock:
            candidate = copy.deepcopy(self._data)
            try:
                result = updater(candidate)
            except (KeyError, TypeError, ValueError) as err:
                const.LOGGER.error(
                    "ERROR: State update '%s' failed, state unchanged: %s", reason, err
                )
                return False

            if result is None:
                const.LOGGER.debug("DEBUG: State update '%s' made no change", reason)
                return False

            self._data = result
            await self._persist()
            self.async_set_updated_data(self._data)

        self._emit(const.SIGNAL_SUFFIX_STATE_COMMITTED, reason=reason)
        return True

    async def _persist(self) -> None:
        """Save to persistent storage (errors are logged by the store)."""
        self.store.set_data(self._data)
        await self.store.async_save()

    def _emit(self, suffix: str, **payload: Any) -> None:
        """Send an instance-scoped dispatcher signal."""
        async_dispatcher_send(
            self.hass, get_event_signal(self.config_entry.entry_id, suffix), payload
        )

    # -------------------------------------------------------------------------------------
    # Read Access
    # -------------------------------------------------------------------------------------

    @property
    def state_data(self) -> dict[str, Any]:
        """Return the committed state (read only by convention)."""
        return self._data

    @property
    def tasks(self) -> list[TaskData]:
        """Return all tasks, every day, in list order."""
        return self._data.get(const.DATA_TASKS, [])

    @property
    def task_templates(self) -> list[TaskTemplateData]:
        """Return the task templates."""
        return self._data.get(const.DATA_TASK_TEMPLATES, [])

    @property
    def pet_state(self) -> PetStateData:
        """Return the pet's XP and stage."""
        return self._data.get(
            const.DATA_PET_STATE,
            {const.DATA_PET_XP: 0, const.DATA_PET_STAGE_INDEX: 0},
        )

    @property
    def grace_minutes(self) -> int:
        """Return the configured grace minutes."""
        return self._data.get(const.DATA_SETTINGS, {}).get(
            const.DATA_SETTINGS_GRACE_MINUTES, const.DEFAULT_GRACE_MINUTES
        )

    @property
    def current_task_id(self) -> str | None:
        """Return the id of the task in focus."""
        return self._data.get(const.DATA_CURRENT_TASK_ID)

    @property
    def last_rollover_date(self) -> str | None:
        """Return the day key of the last rollover."""
        return self._data.get(const.DATA_LAST_ROLLOVER_DATE)

    @property
    def xp_config(self) -> XpConfig:
        """Return the scoring parameters from the entry options."""
        return XpConfig(
            thresholds=const.STAGE_THRESHOLDS,
            xp_per_task=int(
                self.config_entry.options.get(
                    const.CONF_XP_PER_TASK, const.DEFAULT_XP_PER_TASK
                )
            ),
        )

    @property
    def history_retention_days(self) -> int:
        """Return how many days of task history a rollover keeps (0 = all)."""
        return int(
            self.config_entry.options.get(
                const.CONF_HISTORY_RETENTION_DAYS,
                const.DEFAULT_HISTORY_RETENTION_DAYS,
            )
        )

    def now(self) -> datetime:
        """Return the current local wall-clock time."""
        return dt_now_local()

    def today_key(self) -> str:
        """Return today's local day key."""
        return dt_today_iso()

    def today_tasks(self) -> list[TaskData]:
        """Return today's tasks in list order."""
        return TaskEngine.tasks_for_day(self.tasks, self.today_key())

    def current_task(self) -> TaskData | None:
        """Return the task in focus, if it is one of today's tasks."""
        today = self.today_tasks()
        index = TaskEngine.find_task_index(today, self.current_task_id)
        return today[index] if index is not None else None
