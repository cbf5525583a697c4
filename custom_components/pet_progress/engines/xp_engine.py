"""XP Engine - Pure logic for pet experience, stages and miss penalties.

This engine provides stateless, pure Python functions for:
- Mapping XP to a pet stage (binary search over ascending thresholds)
- Applying completion rewards and level-scaled miss penalties
- Planning and applying the XP side of a task status change

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data and return
new pet state dicts; inputs are never mutated.

Reversal is asymmetric: undoing a completion applies a one-task miss penalty
at the *current* level, and undoing a miss grants a plain completion reward.
At levels above 1 the two do not cancel.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import const
from ..utils.math_utils import calculate_percentage, clamp, round_half_up

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..type_defs import PetStateData


# =============================================================================
# XP CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class XpConfig:
    """Injectable scoring parameters.

    Attributes:
        thresholds: Minimum XP per stage, ascending, first entry 0
        xp_per_task: XP granted per completed task (and the penalty base)
    """

    thresholds: tuple[int, ...] = const.STAGE_THRESHOLDS
    xp_per_task: int = const.DEFAULT_XP_PER_TASK

    @property
    def max_stage_index(self) -> int:
        """Index of the final stage."""
        return len(self.thresholds) - 1


# Status → XP operation when a status is applied / undone
_APPLY_OPS: dict[str, str | None] = {
    const.TaskStatus.DONE: const.XP_OP_REWARD,
    const.TaskStatus.MISSED: const.XP_OP_PENALTY,
    const.TaskStatus.SKIPPED: None,
    const.TaskStatus.PENDING: None,
}

_UNDO_OPS: dict[str, str | None] = {
    const.TaskStatus.DONE: const.XP_OP_PENALTY,
    const.TaskStatus.MISSED: const.XP_OP_REWARD,
    const.TaskStatus.SKIPPED: None,
    const.TaskStatus.PENDING: None,
}


class XpEngine:
    """Stateless XP and stage calculations."""

    # =========================================================================
    # Stage Lookup
    # =========================================================================

    @staticmethod
    def stage_for_xp(xp: int, thresholds: Sequence[int]) -> int:
        """Return the largest stage index whose threshold is <= ``xp``.

        Negative XP maps to stage 0.
        """
        if xp <= 0:
            return 0
        return max(bisect_right(thresholds, xp) - 1, 0)

    @staticmethod
    def progress_to_next_stage(
        xp: int, stage_index: int, thresholds: Sequence[int]
    ) -> float:
        """Return percent progress from the current stage to the next.

        100.0 at the final stage.
        """
        if stage_index >= len(thresholds) - 1:
            return 100.0
        current = thresholds[stage_index]
        span = thresholds[stage_index + 1] - current
        return calculate_percentage(max(xp - current, 0), span)

    @staticmethod
    def miss_penalty_multiplier(level: int) -> float:
        """Return the penalty multiplier for a 1-based pet level.

        Scales linearly from 1.0 at level 1 to 3.0 at level 30; levels
        outside that range are clamped.
        """
        clamped = clamp(level, const.MIN_PENALTY_LEVEL, const.MAX_PENALTY_LEVEL)
        span = const.MAX_PENALTY_LEVEL - const.MIN_PENALTY_LEVEL
        return 1 + 2 * (clamped - const.MIN_PENALTY_LEVEL) / span

    @staticmethod
    def miss_penalty(level: int, missed_count: int, xp_per_task: int) -> int:
        """Return the XP removed for ``missed_count`` misses at ``level``."""
        return round_half_up(
            xp_per_task * XpEngine.miss_penalty_multiplier(level) * missed_count
        )

    # =========================================================================
    # XP Mutations (return new pet state)
    # =========================================================================

    @staticmethod
    def apply_completion(
        pet_state: PetStateData, xp_gain: int, thresholds: Sequence[int]
    ) -> PetStateData:
        """Add ``xp_gain`` and recompute the stage."""
        new_xp = pet_state[const.DATA_PET_XP] + xp_gain
        return {
            const.DATA_PET_XP: new_xp,
            const.DATA_PET_STAGE_INDEX: XpEngine.stage_for_xp(new_xp, thresholds),
        }

    @staticmethod
    def apply_miss(
        pet_state: PetStateData,
        missed_count: int,
        xp_per_task: int,
        thresholds: Sequence[int],
    ) -> PetStateData:
        """Remove the level-scaled penalty for ``missed_count`` misses.

        The level is the stage held *before* the penalty. XP never drops
        below zero.
        """
        level = pet_state[const.DATA_PET_STAGE_INDEX] + 1
        penalty = XpEngine.miss_penalty(level, missed_count, xp_per_task)
        new_xp = max(0, pet_state[const.DATA_PET_XP] - penalty)
        return {
            const.DATA_PET_XP: new_xp,
            const.DATA_PET_STAGE_INDEX: XpEngine.stage_for_xp(new_xp, thresholds),
        }

    # =========================================================================
    # Status Transitions
    # =========================================================================

    @staticmethod
    def plan_transition(old_status: str, new_status: str) -> list[str]:
        """Return the ordered XP operations for ``old_status`` → ``new_status``.

        The previous status is undone first, then the new one applied. An
        unchanged status plans nothing.

        Examples:
            plan_transition(PENDING, DONE) → [reward]
            plan_transition(DONE, MISSED) → [penalty, penalty]
            plan_transition(MISSED, PENDING) → [reward]
        """
        if old_status == new_status:
            return []
        ops = [_UNDO_OPS.get(old_status), _APPLY_OPS.get(new_status)]
        return [op for op in ops if op is not None]

    @staticmethod
    def apply_transition(
        pet_state: PetStateData,
        old_status: str,
        new_status: str,
        config: XpConfig,
    ) -> PetStateData:
        """Apply the planned operations in order.

        Each step sees the stage produced by the previous step, so a reward
        that crosses a threshold raises the level used by a following penalty.
        """
        state: PetStateData = {
            const.DATA_PET_XP: pet_state[const.DATA_PET_XP],
            const.DATA_PET_STAGE_INDEX: pet_state[const.DATA_PET_STAGE_INDEX],
        }
        for op in XpEngine.plan_transition(old_status, new_status):
            if op == const.XP_OP_REWARD:
                state = XpEngine.apply_completion(
                    state, config.xp_per_task, config.thresholds
                )
            else:
                state = XpEngine.apply_miss(
                    state, 1, config.xp_per_task, config.thresholds
                )
        return state

    @staticmethod
    def transition_delta(
        pet_state: PetStateData,
        old_status: str,
        new_status: str,
        config: XpConfig,
    ) -> int:
        """Return the net XP change of a status transition."""
        after = XpEngine.apply_transition(pet_state, old_status, new_status, config)
        return after[const.DATA_PET_XP] - pet_state[const.DATA_PET_XP]

    @staticmethod
    def normalize(pet_state: dict, thresholds: Sequence[int]) -> PetStateData:
        """Return a pet state with non-negative integer XP and matching stage."""
        try:
            xp = max(0, int(pet_state.get(const.DATA_PET_XP, 0)))
        except (TypeError, ValueError):
            xp = 0
        return {
            const.DATA_PET_XP: xp,
            const.DATA_PET_STAGE_INDEX: XpEngine.stage_for_xp(xp, thresholds),
        }
