# File: helpers/entity_helpers.py
"""Entry and signal helper functions for Pet Progress.

Functions that resolve the active config entry/coordinator and build
instance-scoped dispatcher signal names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import PetProgressCoordinator


# ==============================================================================
# Event Signal Helpers (Manager Communication)
# ==============================================================================


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'pet_progress_{entry_id}_{suffix}'

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_STATE_COMMITTED)
        'pet_progress_abc123_state_committed'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# ==============================================================================
# Entry Lookup
# ==============================================================================


def get_first_pet_progress_entry(hass: HomeAssistant) -> str | None:
    """Retrieve the first loaded Pet Progress config entry ID."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def get_coordinator(hass: HomeAssistant) -> PetProgressCoordinator | None:
    """Return the coordinator of the first loaded entry, or None."""
    entry_id = get_first_pet_progress_entry(hass)
    if not entry_id:
        return None
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]
