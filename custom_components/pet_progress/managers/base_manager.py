# File: managers/base_manager.py
"""Shared plumbing for the Pet Progress managers.

Managers talk to each other through dispatcher signals scoped to one config
entry, ``f"{DOMAIN}_{entry_id}_{suffix}"``. Signals in use:

=====================  ==================  ================================
Suffix                 Sent by             Payload
=====================  ==================  ================================
``state_committed``    coordinator         ``reason``
``rollover_completed`` SystemManager       RolloverSummary fields
``hour_boundary``      SystemManager       (empty)
``settings_updated``   TaskManager         ``grace_minutes``
``feedback_requested`` TaskManager         ``feedback``, ``action``, ``task_id``
=====================  ==================  ================================

Managers never replace state themselves: every change goes through
``coordinator.async_update_state()``, which serializes it, persists it and
only then sends ``state_committed``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..helpers.entity_helpers import get_event_signal

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import PetProgressCoordinator


class BaseManager(ABC):
    """A manager bound to one Pet Progress entry and its coordinator."""

    def __init__(
        self, hass: HomeAssistant, coordinator: PetProgressCoordinator
    ) -> None:
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    def emit(self, suffix: str, **payload: Any) -> None:
        """Send ``payload`` on this entry's ``suffix`` signal.

        Listeners get the payload as one dict; keep it JSON-friendly, the
        widget manager copies parts of it onto the event bus.
        """
        const.LOGGER.debug(
            "DEBUG: %s → '%s' %s",
            self.__class__.__name__,
            suffix,
            sorted(payload),
        )
        async_dispatcher_send(
            self.hass, get_event_signal(self.entry_id, suffix), payload
        )

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to this entry's ``suffix`` signal until the entry unloads."""
        self.coordinator.config_entry.async_on_unload(
            async_dispatcher_connect(
                self.hass, get_event_signal(self.entry_id, suffix), callback
            )
        )
        const.LOGGER.debug(
            "DEBUG: %s listening to '%s'", self.__class__.__name__, suffix
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Subscribe to signals and arm timers.

        Called once per entry, before the stored document is loaded.
        """
