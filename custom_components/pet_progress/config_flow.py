# File: config_flow.py
"""Config flow for the Pet Progress integration.

A single instance, no fields: the pet, its tasks and its settings live in
storage and are managed through services.
"""

from __future__ import annotations

from typing import Any

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from .options_flow import PetProgressOptionsFlowHandler


class PetProgressConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Pet Progress."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Confirm creation of the (only) Pet Progress entry."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            return self.async_create_entry(
                title=const.PET_PROGRESS_TITLE,
                data={},
                options={
                    const.CONF_XP_PER_TASK: const.DEFAULT_XP_PER_TASK,
                    const.CONF_HISTORY_RETENTION_DAYS: const.DEFAULT_HISTORY_RETENTION_DAYS,
                },
            )

        return self.async_show_form(step_id="user")

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return PetProgressOptionsFlowHandler(config_entry)
