"""Diagnostics support for Pet Progress integration.

The diagnostics JSON returns the raw stored document (identical to the
pet_progress_data file) plus the snapshot renderers currently see.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import PetProgressCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: PetProgressCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    return {
        "options": dict(entry.options),
        "storage": coordinator.store.data,
        "widget_snapshot": coordinator.widget_manager.build_snapshot(),
    }
