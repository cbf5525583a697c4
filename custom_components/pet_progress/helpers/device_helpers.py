# File: helpers/device_helpers.py
"""Device registry helper functions for Pet Progress."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_pet_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info for the pet; every entity of an entry hangs off it."""
    return DeviceInfo(
        identifiers={(const.DOMAIN, config_entry.entry_id)},
        name=config_entry.title,
        manufacturer=const.PET_PROGRESS_TITLE,
        model="Pet",
        entry_type=DeviceEntryType.SERVICE,
    )
