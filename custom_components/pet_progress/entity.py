"""Base entity classes for Pet Progress integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import PetProgressCoordinator
from .helpers.device_helpers import create_pet_device_info

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


class PetProgressCoordinatorEntity(CoordinatorEntity[PetProgressCoordinator]):
    """Base entity class for Pet Progress entities with typed coordinator access.

    Every entity of an entry belongs to the single pet device.
    """

    _attr_has_entity_name = True

    def __init__(
        self, coordinator: PetProgressCoordinator, entry: ConfigEntry
    ) -> None:
        """Initialize the entity and attach it to the pet device."""
        super().__init__(coordinator)
        self._entry = entry
        self._attr_device_info = create_pet_device_info(entry)

    @property
    def coordinator(self) -> PetProgressCoordinator:
        """Return typed coordinator.

        Uses object.__getattribute__ to access the private _coordinator attribute
        set by the parent CoordinatorEntity class.
        """
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: PetProgressCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
