# File: __init__.py
"""Initialization file for the Pet Progress integration.

Handles setting up the integration, including loading the stored state,
preparing the coordinator and its managers, and registering services and
platforms.

Key Features:
- Config entry setup, unload and removal.
- Coordinator initialization (load, repair, catch-up rollover).
- Storage cleanup when the entry is removed.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers.storage import Store
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import PetProgressCoordinator
from .services import async_setup_services, async_unload_services
from .store import PetProgressStore
from .utils.dt_utils import set_default_timezone


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Pet Progress entry: %s", entry.entry_id)

    # Day keys and the active hour follow the Home Assistant timezone
    set_default_timezone(dt_util.get_time_zone(hass.config.time_zone) or dt_util.UTC)

    store = PetProgressStore(hass, const.STORAGE_KEY)
    coordinator = PetProgressCoordinator(hass, entry, store)
    await coordinator.async_setup_managers()

    try:
        # Load, repair, and run the catch-up rollover check.
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    # Renderers get a snapshot as soon as the entry is up
    coordinator.widget_manager.async_sync()

    const.LOGGER.info("INFO: Pet Progress setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Pet Progress entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry: delete the state and the snapshot."""
    const.LOGGER.info("INFO: Removing Pet Progress entry: %s", entry.entry_id)

    await PetProgressStore(hass, const.STORAGE_KEY).async_delete_storage()

    widget_store: Store[dict] = Store(
        hass, const.WIDGET_STORAGE_VERSION, const.WIDGET_STORAGE_KEY
    )
    try:
        await widget_store.async_remove()
    except OSError as err:
        const.LOGGER.error("ERROR: Failed to remove widget snapshot: %s", err)

    const.LOGGER.info("INFO: Pet Progress entry data cleared: %s", entry.entry_id)
