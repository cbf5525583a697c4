# File: store.py
"""Handles persistent data storage for the Pet Progress integration.

Uses Home Assistant's Storage helper to save and load the single application
document (tasks, pet state, settings, templates) so state survives restarts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const
from .engines.task_engine import TaskEngine

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import AppStateData


class PetProgressStore:
    """Handles persistent storage operations for Pet Progress data.

    Thin wrapper around Home Assistant's Store API. Loading never fails: a
    missing or unreadable document is replaced by a fresh default state.
    Saving never raises: errors are logged and the in-memory state stays the
    source of truth.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store[dict[str, Any]] = Store(
            hass, const.STORAGE_VERSION, storage_key
        )
        self._data: dict[str, Any] = {}

    @staticmethod
    def get_default_structure(day_key: str) -> AppStateData:
        """Return the document for a fresh installation.

        Seeds today's built-in task list and no templates. The current task
        is left unset; the coordinator selects the nearest task after load.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
            },
            const.DATA_TASKS: TaskEngine.default_tasks(day_key),
            const.DATA_PET_STATE: {
                const.DATA_PET_XP: 0,
                const.DATA_PET_STAGE_INDEX: 0,
            },
            const.DATA_SETTINGS: {
                const.DATA_SETTINGS_GRACE_MINUTES: const.DEFAULT_GRACE_MINUTES,
                const.DATA_SETTINGS_PRIVACY_POLICY_URL: const.DEFAULT_PRIVACY_POLICY_URL,
            },
            const.DATA_CURRENT_TASK_ID: None,
            const.DATA_LAST_ROLLOVER_DATE: day_key,
            const.DATA_TASK_TEMPLATES: [],
        }

    async def async_load(self, day_key: str) -> dict[str, Any]:
        """Load the document, falling back to the default structure.

        Args:
            day_key: Today's local day key, used to seed a fresh document.
        """
        const.LOGGER.debug("DEBUG: PetProgressStore: Loading data from storage")
        try:
            existing_data = await self._store.async_load()
        except (HomeAssistantError, OSError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to load storage %s: %s. Starting from a fresh state",
                self._storage_key,
                err,
            )
            existing_data = None

        if not isinstance(existing_data, dict) or not existing_data:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = dict(PetProgressStore.get_default_structure(day_key))
        else:
            self._data = existing_data
            const.LOGGER.debug(
                "DEBUG: Loaded existing data from storage: %s",
                {
                    "tasks": len(self._data.get(const.DATA_TASKS, [])),
                    "templates": len(self._data.get(const.DATA_TASK_TEMPLATES, [])),
                    "last_rollover_date": self._data.get(
                        const.DATA_LAST_ROLLOVER_DATE
                    ),
                },
            )
        return self._data

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s",
                err,
            )

    async def async_delete_storage(self) -> None:
        """Delete the storage file when the config entry is removed."""
        self._data = {}
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s", self._store.path
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
