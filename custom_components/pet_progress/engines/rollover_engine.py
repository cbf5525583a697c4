"""Rollover Engine - Pure logic for closing out a day and starting the next.

This engine provides stateless, pure Python functions for:
- Deciding when a rollover is due (new local day, past the midnight grace)
- Marking the finished day's unresolved tasks as missed
- Applying one batched, level-scaled miss penalty
- Generating the new day's tasks from templates (or the built-in list)
- Optional pruning of old history

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
``perform_rollover`` never mutates its input; it returns a new state together
with a ``RolloverSummary`` describing what happened. Idempotence comes from
the trigger: after a rollover ``last_rollover_date == today`` so
``should_rollover`` is false until the next day.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_shift_day_key
from .clock_engine import ClockEngine
from .task_engine import TaskEngine
from .xp_engine import XpConfig, XpEngine

if TYPE_CHECKING:
    from datetime import datetime

    from ..type_defs import AppStateData, TaskData


# =============================================================================
# ROLLOVER SUMMARY DATA STRUCTURE
# =============================================================================


@dataclass
class RolloverSummary:
    """Outcome of a rollover, for logging and signalling.

    Attributes:
        previous_day: Day key that was closed out
        today: Day key that was opened
        missed_count: Tasks of ``previous_day`` turned into missed
        xp_before: XP before the batched penalty
        xp_after: XP after the batched penalty
        stage_before: Stage index before the penalty (penalty level - 1)
        stage_after: Stage index after the penalty
        created_count: Tasks generated for ``today``
        pruned_count: Historical tasks dropped by the retention window
    """

    previous_day: str
    today: str
    missed_count: int
    xp_before: int
    xp_after: int
    stage_before: int
    stage_after: int
    created_count: int
    pruned_count: int = 0


class RolloverEngine:
    """Stateless day rollover."""

    @staticmethod
    def should_rollover(
        last_rollover_date: str | None, now: datetime, grace_minutes: int
    ) -> bool:
        """Return True if the day should be closed out at ``now``.

        False on the same day, and during the first ``grace_minutes`` after
        local midnight so late tasks can still be completed.
        """
        if last_rollover_date == ClockEngine.day_key(now):
            return False
        return not (now.hour == 0 and now.minute < grace_minutes)

    @staticmethod
    def prune_history(
        tasks: list[TaskData], today: str, retention_days: int
    ) -> list[TaskData]:
        """Drop tasks older than ``retention_days`` before ``today``.

        ``retention_days <= 0`` keeps everything. Day keys compare
        lexicographically because they are ISO dates.
        """
        if retention_days <= 0:
            return tasks
        cutoff = dt_shift_day_key(today, -retention_days)
        if cutoff is None:
            return tasks
        return [task for task in tasks if task[const.DATA_TASK_DAY_KEY] >= cutoff]

    @staticmethod
    def perform_rollover(
        state: AppStateData,
        today: str,
        config: XpConfig,
        *,
        retention_days: int = const.DEFAULT_HISTORY_RETENTION_DAYS,
    ) -> tuple[AppStateData, RolloverSummary]:
        """Close out ``state[last_rollover_date]`` and open ``today``.

        Steps:
        1. Every pending task of the previous rollover day becomes missed
        2. One penalty for the whole batch, at the pre-rollover level
        3. Today's tasks are expanded from templates, or the built-in list
           when no templates exist; ids already present are not duplicated
        4. Current task = first pending task of today
        5. ``last_rollover_date`` = today

        Only the previous rollover day is closed out; days skipped entirely
        (device off for several days) were never opened and own no tasks.
        """
        new_state: AppStateData = copy.deepcopy(state)
        previous_day = new_state[const.DATA_LAST_ROLLOVER_DATE]

        tasks: list[TaskData] = []
        missed_count = 0
        for task in new_state[const.DATA_TASKS]:
            if task[const.DATA_TASK_DAY_KEY] == previous_day and TaskEngine.is_pending(
                task
            ):
                task = TaskEngine.with_status(task, const.TaskStatus.MISSED)
                missed_count += 1
            tasks.append(task)

        pet_before = new_state[const.DATA_PET_STATE]
        pet_after = (
            XpEngine.apply_miss(
                pet_before, missed_count, config.xp_per_task, config.thresholds
            )
            if missed_count
            else pet_before
        )

        templates = new_state[const.DATA_TASK_TEMPLATES]
        generated = (
            TaskEngine.expand_templates(templates, today)
            if templates
            else TaskEngine.default_tasks(today)
        )
        existing_ids = {task[const.DATA_TASK_ID] for task in tasks}
        created = [
            task for task in generated if task[const.DATA_TASK_ID] not in existing_ids
        ]
        tasks.extend(created)

        kept = RolloverEngine.prune_history(tasks, today, retention_days)

        new_state[const.DATA_TASKS] = kept
        new_state[const.DATA_PET_STATE] = pet_after
        new_state[const.DATA_CURRENT_TASK_ID] = TaskEngine.first_pending_task_id(
            kept, today
        )
        new_state[const.DATA_LAST_ROLLOVER_DATE] = today

        summary = RolloverSummary(
            previous_day=previous_day,
            today=today,
            missed_count=missed_count,
            xp_before=pet_before[const.DATA_PET_XP],
            xp_after=pet_after[const.DATA_PET_XP],
            stage_before=pet_before[const.DATA_PET_STAGE_INDEX],
            stage_after=pet_after[const.DATA_PET_STAGE_INDEX],
            created_count=len(created),
            pruned_count=len(tasks) - len(kept),
        )
        return new_state, summary
