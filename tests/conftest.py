"""Shared fixtures for Pet Progress tests."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.pet_progress import const
from custom_components.pet_progress.coordinator import PetProgressCoordinator
from tests.helpers import ENTRY_ID, TODAY, storage_payload

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

# 09:05 local: inside the grace window of the 08:00 task
FROZEN_NOW = f"{TODAY} 09:05:00-08:00"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.PET_PROGRESS_TITLE,
        data={},
        options={
            const.CONF_XP_PER_TASK: const.DEFAULT_XP_PER_TASK,
            const.CONF_HISTORY_RETENTION_DAYS: const.DEFAULT_HISTORY_RETENTION_DAYS,
        },
        entry_id=ENTRY_ID,
    )


@pytest.fixture
def stored_state() -> dict[str, Any] | None:
    """Return the document seeded into storage (None = fresh install).

    Override in a test module to start from a specific state.
    """
    return None


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    freezer: Any,
    mock_config_entry: MockConfigEntry,
    stored_state: dict[str, Any] | None,
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the integration at FROZEN_NOW and unload it afterwards."""
    freezer.move_to(FROZEN_NOW)
    if stored_state is not None:
        hass_storage[const.STORAGE_KEY] = storage_payload(stored_state)

    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()

    yield mock_config_entry

    await hass.config_entries.async_unload(mock_config_entry.entry_id)
    await hass.async_block_till_done()


@pytest.fixture
def coordinator(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> PetProgressCoordinator:
    """Return the coordinator of the set-up entry."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]

