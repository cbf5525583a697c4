# File: button.py
"""Buttons for the Pet Progress integration.

One button per deep-link action, each acting on the current task:
complete, skip, miss, next, prev.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.button import ButtonEntity
from homeassistant.exceptions import HomeAssistantError

from . import const
from .entity import PetProgressCoordinatorEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import PetProgressCoordinator

# Set to 1 (serialized) for action buttons that modify state
PARALLEL_UPDATES = 1

BUTTON_ICONS = {
    const.ACTION_COMPLETE: "mdi:check-circle-outline",
    const.ACTION_SKIP: "mdi:debug-step-over",
    const.ACTION_MISS: "mdi:close-circle-outline",
    const.ACTION_NEXT: "mdi:chevron-right",
    const.ACTION_PREV: "mdi:chevron-left",
}


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up the action buttons."""
    coordinator: PetProgressCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        TaskActionButton(coordinator, entry, action)
        for action in const.DEEP_LINK_ACTIONS
    )


class TaskActionButton(PetProgressCoordinatorEntity, ButtonEntity):
    """Button running one deep-link action on the current task."""

    def __init__(
        self,
        coordinator: PetProgressCoordinator,
        entry: ConfigEntry,
        action: str,
    ) -> None:
        """Initialize the button.

        Args:
            coordinator: PetProgressCoordinator instance for data access and updates.
            entry: ConfigEntry for this integration instance.
            action: One of const.DEEP_LINK_ACTIONS.
        """
        super().__init__(coordinator, entry)
        self._action = action
        self._attr_unique_id = (
            f"{entry.entry_id}{const.BUTTON_UID_SUFFIX_FMT.format(action=action)}"
        )
        self._attr_translation_key = const.TRANS_KEY_BUTTON_FMT.format(action=action)
        self._attr_icon = BUTTON_ICONS[action]

    async def async_press(self) -> None:
        """Handle the button press event."""
        try:
            changed = await self.coordinator.task_manager.async_perform_action(
                self._action
            )
            const.LOGGER.debug(
                "DEBUG: Button '%s' pressed (changed=%s)", self._action, changed
            )
        except HomeAssistantError as e:
            const.LOGGER.error(
                "ERROR: Failed to run '%s' from button: %s", self._action, e
            )
        except (KeyError, ValueError, AttributeError) as e:
            const.LOGGER.error(
                "ERROR: Failed to run '%s' from button: %s", self._action, e
            )
