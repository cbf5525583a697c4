"""Tests for PetProgressStore load/save behaviour."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.pet_progress import const
from custom_components.pet_progress.store import PetProgressStore
from tests.helpers import TODAY, make_state, make_task, storage_payload


async def test_fresh_install_uses_default_structure(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """Missing storage seeds today's built-in tasks."""
    store = PetProgressStore(hass)
    data = await store.async_load(TODAY)

    assert len(data[const.DATA_TASKS]) == 17
    assert data[const.DATA_LAST_ROLLOVER_DATE] == TODAY
    assert data[const.DATA_PET_STATE] == {
        const.DATA_PET_XP: 0,
        const.DATA_PET_STAGE_INDEX: 0,
    }
    assert data[const.DATA_CURRENT_TASK_ID] is None
    assert store.data is data


async def test_existing_document_is_loaded(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """A stored document is returned as is."""
    state = make_state([make_task("a")], xp=42, stage_index=3)
    hass_storage[const.STORAGE_KEY] = storage_payload(state)

    data = await PetProgressStore(hass).async_load(TODAY)

    assert data[const.DATA_PET_STATE][const.DATA_PET_XP] == 42
    assert [task[const.DATA_TASK_ID] for task in data[const.DATA_TASKS]] == ["a"]


async def test_load_error_falls_back_to_default(hass: HomeAssistant) -> None:
    """An unreadable file does not fail setup."""
    with patch(
        "custom_components.pet_progress.store.Store.async_load",
        side_effect=HomeAssistantError("corrupt"),
    ):
        data = await PetProgressStore(hass).async_load(TODAY)

    assert data[const.DATA_LAST_ROLLOVER_DATE] == TODAY
    assert len(data[const.DATA_TASKS]) == 17


async def test_save_writes_document(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """async_save persists the in-memory document."""
    store = PetProgressStore(hass)
    store.set_data(make_state(xp=7))
    await store.async_save()

    assert hass_storage[const.STORAGE_KEY]["data"][const.DATA_PET_STATE] == {
        const.DATA_PET_XP: 7,
        const.DATA_PET_STAGE_INDEX: 0,
    }


async def test_save_error_is_logged_not_raised(hass: HomeAssistant) -> None:
    """A file system error while saving is swallowed and logged."""
    store = PetProgressStore(hass)
    store.set_data(make_state())
    with patch(
        "custom_components.pet_progress.store.Store.async_save",
        side_effect=OSError("disk full"),
    ):
        await store.async_save()


async def test_delete_storage(
    hass: HomeAssistant, hass_storage: dict[str, Any]
) -> None:
    """Removing the entry deletes the document."""
    store = PetProgressStore(hass)
    store.set_data(make_state())
    await store.async_save()
    assert const.STORAGE_KEY in hass_storage

    await store.async_delete_storage()

    assert const.STORAGE_KEY not in hass_storage
    assert store.data == {}
