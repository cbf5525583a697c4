# File: services.py
"""Defines custom services for the Pet Progress integration.

These services allow direct actions through scripts, automations and
deep-link shortcuts. ``complete_task``, ``skip_task`` and ``miss_task``
act on the current task when no ``task_id`` is given.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from .helpers.deeplink_helpers import parse_deep_link
from .helpers.entity_helpers import get_coordinator

if TYPE_CHECKING:
    from .coordinator import PetProgressCoordinator


def _weekday(value: Any) -> int:
    """Accept a weekday index (0 = Sunday) or an English weekday name."""
    if isinstance(value, str) and value.strip().lower() in const.WEEKDAY_NAMES:
        return const.WEEKDAY_NAMES.index(value.strip().lower())
    return vol.All(vol.Coerce(int), vol.Range(min=0, max=6))(value)


# --- Service Schemas ---
OPTIONAL_TASK_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_TASK_ID): cv.string,
    }
)

TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TASK_ID): cv.string,
    }
)

NO_FIELDS_SCHEMA = vol.Schema({})

EDIT_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TASK_ID): cv.string,
        vol.Optional(const.FIELD_TITLE): vol.All(cv.string, vol.Length(min=1)),
        vol.Optional(const.FIELD_DESCRIPTION): cv.string,
    }
)

ADD_TEMPLATE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TITLE): cv.string,
        vol.Optional(const.FIELD_DESCRIPTION, default=""): cv.string,
        vol.Optional(const.FIELD_DUE_HOUR): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=23)
        ),
        vol.Optional(const.FIELD_IS_ANYTIME, default=False): cv.boolean,
        vol.Optional(const.FIELD_IS_RECURRING, default=False): cv.boolean,
        vol.Optional(const.FIELD_RECURRING_DAYS, default=[]): vol.All(
            cv.ensure_list, [_weekday]
        ),
    }
)

DELETE_TEMPLATE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TEMPLATE_ID): cv.string,
    }
)

SET_GRACE_MINUTES_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_GRACE_MINUTES): vol.Coerce(int),
    }
)

HANDLE_DEEP_LINK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_URL): cv.string,
    }
)

SERVICES = [
    const.SERVICE_COMPLETE_TASK,
    const.SERVICE_SKIP_TASK,
    const.SERVICE_MISS_TASK,
    const.SERVICE_REOPEN_TASK,
    const.SERVICE_SELECT_TASK,
    const.SERVICE_NEXT_TASK,
    const.SERVICE_PREV_TASK,
    const.SERVICE_EDIT_TASK,
    const.SERVICE_ADD_TEMPLATE,
    const.SERVICE_DELETE_TEMPLATE,
    const.SERVICE_SET_GRACE_MINUTES,
    const.SERVICE_HANDLE_DEEP_LINK,
    const.SERVICE_CHECK_ROLLOVER,
]


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Pet Progress services."""
    if hass.services.has_service(const.DOMAIN, const.SERVICE_COMPLETE_TASK):
        return

    def _get_coordinator(service: str) -> PetProgressCoordinator:
        coordinator = get_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning("WARNING: %s: %s", service, const.MSG_NO_ENTRY_FOUND)
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NO_ENTRY,
            )
        return coordinator

    async def handle_complete_task(call: ServiceCall) -> None:
        """Handle completing a task (the current task by default)."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_complete_task(
            call.data.get(const.FIELD_TASK_ID)
        )

    async def handle_skip_task(call: ServiceCall) -> None:
        """Handle skipping a task (the current task by default)."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_skip_task(
            call.data.get(const.FIELD_TASK_ID)
        )

    async def handle_miss_task(call: ServiceCall) -> None:
        """Handle marking a task missed (the current task by default)."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_miss_task(
            call.data.get(const.FIELD_TASK_ID)
        )

    async def handle_reopen_task(call: ServiceCall) -> None:
        """Handle returning a task to pending."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_reopen_task(call.data[const.FIELD_TASK_ID])

    async def handle_select_task(call: ServiceCall) -> None:
        """Handle focusing one of today's tasks."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_select_task(call.data[const.FIELD_TASK_ID])

    async def handle_next_task(call: ServiceCall) -> None:
        """Handle moving the focus forward."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_next_task()

    async def handle_prev_task(call: ServiceCall) -> None:
        """Handle moving the focus back."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_prev_task()

    async def handle_edit_task(call: ServiceCall) -> None:
        """Handle editing a task's title and/or description."""
        coordinator = _get_coordinator(call.service)
        task_id = call.data[const.FIELD_TASK_ID]
        if const.FIELD_TITLE in call.data:
            await coordinator.task_manager.async_edit_task_title(
                task_id, call.data[const.FIELD_TITLE]
            )
        if const.FIELD_DESCRIPTION in call.data:
            await coordinator.task_manager.async_edit_task_description(
                task_id, call.data[const.FIELD_DESCRIPTION]
            )

    async def handle_add_template(call: ServiceCall) -> None:
        """Handle creating a task template."""
        coordinator = _get_coordinator(call.service)
        try:
            await coordinator.task_manager.async_add_template(
                call.data[const.FIELD_TITLE],
                description=call.data[const.FIELD_DESCRIPTION],
                due_hour=call.data.get(const.FIELD_DUE_HOUR),
                is_anytime=call.data[const.FIELD_IS_ANYTIME],
                is_recurring=call.data[const.FIELD_IS_RECURRING],
                recurring_days=call.data[const.FIELD_RECURRING_DAYS],
            )
        except ValueError as err:
            const.LOGGER.warning("WARNING: Add Template: %s", err)
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_TEMPLATE,
                translation_placeholders={"error": str(err)},
            ) from err

    async def handle_delete_template(call: ServiceCall) -> None:
        """Handle deleting a template and its tasks."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_delete_template(
            call.data[const.FIELD_TEMPLATE_ID]
        )

    async def handle_set_grace_minutes(call: ServiceCall) -> None:
        """Handle changing the grace minutes (clamped to 0-30)."""
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_set_grace_minutes(
            call.data[const.FIELD_GRACE_MINUTES]
        )

    async def handle_deep_link(call: ServiceCall) -> None:
        """Handle a ``petprogress://<action>`` URL."""
        url = call.data[const.FIELD_URL]
        action = parse_deep_link(url)
        if action is None:
            const.LOGGER.warning(
                "WARNING: %s", const.ERROR_INVALID_DEEP_LINK_FMT.format(url)
            )
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_DEEP_LINK,
                translation_placeholders={"url": url},
            )
        coordinator = _get_coordinator(call.service)
        await coordinator.task_manager.async_perform_action(action)

    async def handle_check_rollover(call: ServiceCall) -> None:
        """Handle an on-demand rollover check (e.g. app brought to foreground)."""
        coordinator = _get_coordinator(call.service)
        await coordinator.system_manager.async_check_rollover()

    # --- Register Services ---
    handlers = {
        const.SERVICE_COMPLETE_TASK: (handle_complete_task, OPTIONAL_TASK_SCHEMA),
        const.SERVICE_SKIP_TASK: (handle_skip_task, OPTIONAL_TASK_SCHEMA),
        const.SERVICE_MISS_TASK: (handle_miss_task, OPTIONAL_TASK_SCHEMA),
        const.SERVICE_REOPEN_TASK: (handle_reopen_task, TASK_SCHEMA),
        const.SERVICE_SELECT_TASK: (handle_select_task, TASK_SCHEMA),
        const.SERVICE_NEXT_TASK: (handle_next_task, NO_FIELDS_SCHEMA),
        const.SERVICE_PREV_TASK: (handle_prev_task, NO_FIELDS_SCHEMA),
        const.SERVICE_EDIT_TASK: (handle_edit_task, EDIT_TASK_SCHEMA),
        const.SERVICE_ADD_TEMPLATE: (handle_add_template, ADD_TEMPLATE_SCHEMA),
        const.SERVICE_DELETE_TEMPLATE: (handle_delete_template, DELETE_TEMPLATE_SCHEMA),
        const.SERVICE_SET_GRACE_MINUTES: (
            handle_set_grace_minutes,
            SET_GRACE_MINUTES_SCHEMA,
        ),
        const.SERVICE_HANDLE_DEEP_LINK: (handle_deep_link, HANDLE_DEEP_LINK_SCHEMA),
        const.SERVICE_CHECK_ROLLOVER: (handle_check_rollover, NO_FIELDS_SCHEMA),
    }
    for service, (handler, schema) in handlers.items():
        hass.services.async_register(const.DOMAIN, service, handler, schema=schema)

    const.LOGGER.info("INFO: Pet Progress services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Pet Progress services when unloading the integration."""
    for service in SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Pet Progress services have been unregistered")
