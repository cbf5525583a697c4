"""Entity lookup helpers for integration tests."""

from __future__ import annotations

from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er

from custom_components.pet_progress import const

from .builders import ENTRY_ID


def get_entity_id(hass: HomeAssistant, platform: str, uid_suffix: str) -> str:
    """Return the entity id registered for ``ENTRY_ID + uid_suffix``."""
    entity_reg = er.async_get(hass)
    entity_id = entity_reg.async_get_entity_id(
        platform, const.DOMAIN, f"{ENTRY_ID}{uid_suffix}"
    )
    assert entity_id is not None, f"No {platform} entity for {uid_suffix}"
    return entity_id


def button_entity_id(hass: HomeAssistant, action: str) -> str:
    """Return the entity id of the button running ``action``."""
    return get_entity_id(
        hass, "button", const.BUTTON_UID_SUFFIX_FMT.format(action=action)
    )
