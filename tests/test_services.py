"""Tests for Pet Progress services, buttons and renderer events."""

from __future__ import annotations

import copy
from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from pytest_homeassistant_custom_component.common import async_capture_events

from custom_components.pet_progress import const
from custom_components.pet_progress.coordinator import PetProgressCoordinator
from custom_components.pet_progress.engines.task_engine import TaskEngine
from custom_components.pet_progress.services import async_setup_services
from tests.helpers import TODAY, YESTERDAY, button_entity_id, make_state, make_task


async def _call(hass: HomeAssistant, service: str, data: dict | None = None) -> None:
    await hass.services.async_call(const.DOMAIN, service, data or {}, blocking=True)
    await hass.async_block_till_done()


def _status(coordinator: PetProgressCoordinator, task_id: str) -> str:
    tasks = coordinator.tasks
    return tasks[TaskEngine.find_task_index(tasks, task_id)][const.DATA_TASK_STATUS]


# ============================================================================
# Status services
# ============================================================================


async def test_complete_current_task(
    hass: HomeAssistant,
    hass_storage: dict[str, Any],
    coordinator: PetProgressCoordinator,
) -> None:
    """Completing the current task evolves the egg and notifies renderers."""
    feedback = async_capture_events(hass, const.EVENT_FEEDBACK)
    reloads = async_capture_events(hass, const.EVENT_WIDGET_RELOAD)

    await _call(hass, const.SERVICE_COMPLETE_TASK)

    assert _status(coordinator, f"{TODAY}-8") == const.TaskStatus.DONE
    assert coordinator.pet_state == {
        const.DATA_PET_XP: 10,
        const.DATA_PET_STAGE_INDEX: 1,
    }
    assert [event.data for event in feedback] == [
        {
            const.ATTR_ENTRY_ID: coordinator.config_entry.entry_id,
            const.ATTR_FEEDBACK: const.FEEDBACK_SUCCESS,
            const.ATTR_ACTION: const.ACTION_COMPLETE,
            const.ATTR_TASK_ID: f"{TODAY}-8",
        }
    ]
    assert reloads

    snapshot = hass_storage[const.WIDGET_STORAGE_KEY]["data"]
    assert snapshot[const.WIDGET_PET_STATE][const.ATTR_STAGE_NAME] == "Chicken"
    assert hass_storage[const.STORAGE_KEY]["data"][const.DATA_PET_STATE] == {
        const.DATA_PET_XP: 10,
        const.DATA_PET_STAGE_INDEX: 1,
    }


async def test_miss_then_reopen(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """Reopening a missed task gives the penalty back."""
    task_id = f"{TODAY}-12"
    await _call(hass, const.SERVICE_COMPLETE_TASK, {const.FIELD_TASK_ID: task_id})
    await _call(hass, const.SERVICE_MISS_TASK, {const.FIELD_TASK_ID: task_id})
    # 10 earned, then undo (level 2: 11) and miss (level 1: 10), floored at 0
    assert coordinator.pet_state[const.DATA_PET_XP] == 0

    await _call(hass, const.SERVICE_REOPEN_TASK, {const.FIELD_TASK_ID: task_id})
    assert _status(coordinator, task_id) == const.TaskStatus.PENDING
    assert coordinator.pet_state[const.DATA_PET_XP] == 10


async def test_skip_unknown_task_is_noop(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """An unknown id is logged, not raised."""
    before = copy.deepcopy(coordinator.state_data)
    await _call(hass, const.SERVICE_SKIP_TASK, {const.FIELD_TASK_ID: "missing"})
    assert coordinator.state_data is before


# ============================================================================
# Navigation and deep links
# ============================================================================


async def test_next_prev_and_select(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """Focus moves through today's tasks and wraps."""
    await _call(hass, const.SERVICE_NEXT_TASK)
    assert coordinator.current_task_id == f"{TODAY}-9"

    await _call(hass, const.SERVICE_SELECT_TASK, {const.FIELD_TASK_ID: f"{TODAY}-6"})
    await _call(hass, const.SERVICE_PREV_TASK)
    assert coordinator.current_task_id == f"{TODAY}-22"


async def test_deep_link_next(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """petprogress://next advances the focus with light feedback."""
    feedback = async_capture_events(hass, const.EVENT_FEEDBACK)

    await _call(
        hass, const.SERVICE_HANDLE_DEEP_LINK, {const.FIELD_URL: "petprogress://next"}
    )

    assert coordinator.current_task_id == f"{TODAY}-9"
    assert feedback[0].data[const.ATTR_FEEDBACK] == const.FEEDBACK_LIGHT


async def test_deep_link_invalid(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """Unknown deep links are rejected."""
    with pytest.raises(ServiceValidationError):
        await _call(
            hass,
            const.SERVICE_HANDLE_DEEP_LINK,
            {const.FIELD_URL: "petprogress://feed"},
        )
    assert coordinator.current_task_id == f"{TODAY}-8"


async def test_complete_button(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """The complete button acts on the current task."""
    await hass.services.async_call(
        "button",
        "press",
        {"entity_id": button_entity_id(hass, const.ACTION_COMPLETE)},
        blocking=True,
    )
    await hass.async_block_till_done()

    assert _status(coordinator, f"{TODAY}-8") == const.TaskStatus.DONE


# ============================================================================
# Edits, templates and settings
# ============================================================================


async def test_edit_task(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """Title and description can be edited together."""
    task_id = f"{TODAY}-9"
    await _call(
        hass,
        const.SERVICE_EDIT_TASK,
        {
            const.FIELD_TASK_ID: task_id,
            const.FIELD_TITLE: "Walk the dog",
            const.FIELD_DESCRIPTION: "Around the block",
        },
    )
    task = coordinator.tasks[TaskEngine.find_task_index(coordinator.tasks, task_id)]
    assert task[const.DATA_TASK_TITLE] == "Walk the dog"
    assert task[const.DATA_TASK_DESCRIPTION] == "Around the block"


async def test_add_and_delete_template(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """A template adds today's task; deleting it removes the task again."""
    await _call(
        hass,
        const.SERVICE_ADD_TEMPLATE,
        {
            const.FIELD_TITLE: "Gym",
            const.FIELD_DUE_HOUR: 18,
            const.FIELD_IS_RECURRING: True,
            const.FIELD_RECURRING_DAYS: ["monday", "wednesday", 5],
        },
    )
    template = coordinator.task_templates[0]
    assert template[const.DATA_TEMPLATE_RECURRING_DAYS] == [1, 3, 5]
    task_id = f"{TODAY}-{template[const.DATA_TEMPLATE_ID]}"
    assert TaskEngine.find_task_index(coordinator.tasks, task_id) is not None

    await _call(
        hass,
        const.SERVICE_DELETE_TEMPLATE,
        {const.FIELD_TEMPLATE_ID: template[const.DATA_TEMPLATE_ID]},
    )
    assert coordinator.task_templates == []
    assert TaskEngine.find_task_index(coordinator.tasks, task_id) is None


async def test_add_template_invalid(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """A recurring template without days is rejected."""
    with pytest.raises(ServiceValidationError):
        await _call(
            hass,
            const.SERVICE_ADD_TEMPLATE,
            {const.FIELD_TITLE: "Gym", const.FIELD_IS_RECURRING: True},
        )
    assert coordinator.task_templates == []


async def test_set_grace_minutes_clamped(
    hass: HomeAssistant, coordinator: PetProgressCoordinator
) -> None:
    """45 is stored as 30."""
    await _call(hass, const.SERVICE_SET_GRACE_MINUTES, {const.FIELD_GRACE_MINUTES: 45})
    assert coordinator.grace_minutes == const.MAX_GRACE_MINUTES


# ============================================================================
# Rollover on demand
# ============================================================================


class TestCheckRolloverService:
    """check_rollover after the app comes back to the foreground."""

    @pytest.fixture
    def stored_state(self) -> dict[str, Any]:
        """Yesterday still open."""
        return make_state(
            [make_task("y9", day_key=YESTERDAY)],
            last_rollover_date=YESTERDAY,
        )

    async def test_idempotent(
        self, hass: HomeAssistant, coordinator: PetProgressCoordinator
    ) -> None:
        """Setup already rolled over; the service changes nothing more."""
        before = coordinator.state_data
        await _call(hass, const.SERVICE_CHECK_ROLLOVER)
        assert coordinator.state_data is before
        assert coordinator.last_rollover_date == TODAY
        assert _status(coordinator, "y9") == const.TaskStatus.MISSED


async def test_services_without_entry(hass: HomeAssistant) -> None:
    """Calling a service with no loaded entry raises."""
    async_setup_services(hass)
    with pytest.raises(HomeAssistantError):
        await _call(hass, const.SERVICE_NEXT_TASK)


# ============================================================================
# Coordinator commit
# ============================================================================


async def test_failing_updater_leaves_state_untouched(
    hass: HomeAssistant,
    coordinator: PetProgressCoordinator,
) -> None:
    """An updater that raises commits nothing."""
    before = copy.deepcopy(coordinator.state_data)

    def _broken(state: dict[str, Any]) -> dict[str, Any]:
        state[const.DATA_PET_STATE][const.DATA_PET_XP] = 999
        raise ValueError("boom")

    assert await coordinator.async_update_state(_broken, reason="test") is False
    assert coordinator.state_data == before
    assert coordinator.pet_state[const.DATA_PET_XP] == 0
