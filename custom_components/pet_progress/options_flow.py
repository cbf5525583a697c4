# File: options_flow.py
"""Options Flow for the Pet Progress integration.

Scoring and history settings. Changes apply from the next action or
rollover; no reload is needed.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import selector

from . import const


class PetProgressOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for XP per task and history retention."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Show and store the options."""
        if user_input is not None:
            const.LOGGER.debug("DEBUG: Updating options: %s", user_input)
            return self.async_create_entry(
                data={
                    const.CONF_XP_PER_TASK: int(user_input[const.CONF_XP_PER_TASK]),
                    const.CONF_HISTORY_RETENTION_DAYS: int(
                        user_input[const.CONF_HISTORY_RETENTION_DAYS]
                    ),
                }
            )

        options = self.config_entry.options
        schema = vol.Schema(
            {
                vol.Required(
                    const.CONF_XP_PER_TASK,
                    default=options.get(
                        const.CONF_XP_PER_TASK, const.DEFAULT_XP_PER_TASK
                    ),
                ): selector.NumberSelector(
                    selector.NumberSelectorConfig(
                        min=const.MIN_XP_PER_TASK,
                        max=const.MAX_XP_PER_TASK,
                        step=1,
                        mode=selector.NumberSelectorMode.BOX,
                    )
                ),
                vol.Required(
                    const.CONF_HISTORY_RETENTION_DAYS,
                    default=options.get(
                        const.CONF_HISTORY_RETENTION_DAYS,
                        const.DEFAULT_HISTORY_RETENTION_DAYS,
                    ),
                ): selector.NumberSelector(
                    selector.NumberSelectorConfig(
                        min=0,
                        max=const.MAX_HISTORY_RETENTION_DAYS,
                        step=1,
                        mode=selector.NumberSelectorMode.BOX,
                    )
                ),
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
