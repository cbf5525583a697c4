# File: sensor.py
"""Sensors for the Pet Progress integration.

Available Sensors:
1. PetStageSensor - Stage name of the pet; XP progress details as attributes
2. PetXpSensor - Accumulated XP (measurement)
3. CurrentTaskSensor - Title of the task in focus; the full widget snapshot
   (today's tasks, focus index, pet, settings) as attributes
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass

from . import const
from .entity import PetProgressCoordinatorEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import PetProgressCoordinator

# Sensors only read coordinator data
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Pet Progress integration."""
    coordinator: PetProgressCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        [
            PetStageSensor(coordinator, entry),
            PetXpSensor(coordinator, entry),
            CurrentTaskSensor(coordinator, entry),
        ]
    )


class PetStageSensor(PetProgressCoordinatorEntity, SensorEntity):
    """Sensor showing the pet's current evolution stage."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_PET_STAGE

    def __init__(self, coordinator: PetProgressCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_PET_STAGE}"

    def _pet(self) -> dict[str, Any]:
        return self.coordinator.widget_manager.describe_pet(
            self.coordinator.pet_state
        )

    @property
    def native_value(self) -> str:
        """Return the stage name."""
        return self._pet()[const.ATTR_STAGE_NAME]

    @property
    def icon(self) -> str:
        """Return the stage icon."""
        return self._pet()[const.ATTR_STAGE_ICON]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return XP, level and progress towards the next stage."""
        pet = self._pet()
        pet.pop(const.ATTR_STAGE_ICON)
        return pet


class PetXpSensor(PetProgressCoordinatorEntity, SensorEntity):
    """Sensor tracking the pet's accumulated XP."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_PET_XP
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = "XP"
    _attr_icon = "mdi:star-four-points"

    def __init__(self, coordinator: PetProgressCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_PET_XP}"

    @property
    def native_value(self) -> int:
        """Return the XP total."""
        return self.coordinator.pet_state[const.DATA_PET_XP]


class CurrentTaskSensor(PetProgressCoordinatorEntity, SensorEntity):
    """Sensor showing the task in focus, with today's list as attributes."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_CURRENT_TASK
    _attr_icon = "mdi:clipboard-check-outline"

    def __init__(self, coordinator: PetProgressCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_UID_SUFFIX_CURRENT_TASK}"

    @property
    def native_value(self) -> str | None:
        """Return the current task's title, None when nothing is in focus."""
        task = self.coordinator.current_task()
        return task[const.DATA_TASK_TITLE] if task else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the renderer snapshot plus today's completion count."""
        snapshot = self.coordinator.widget_manager.build_snapshot()
        today_tasks = snapshot[const.WIDGET_TODAY_TASKS]
        snapshot[const.ATTR_DONE_COUNT] = sum(
            1
            for task in today_tasks
            if task[const.ATTR_STATUS] == const.TaskStatus.DONE
        )
        snapshot[const.ATTR_TOTAL_COUNT] = len(today_tasks)
        snapshot.pop(const.WIDGET_LAST_UPDATED, None)
        return snapshot
