"""Tests for XpEngine - pure logic, no HA fixtures needed.

Covers stage lookup, the level-scaled miss penalty, the XP floor and the
undo/apply composition of status transitions (including the asymmetric
reversal of a completion at higher levels).
"""

from __future__ import annotations

import pytest

from custom_components.pet_progress import const
from custom_components.pet_progress.engines.xp_engine import XpConfig, XpEngine

SMALL = (0, 10, 28)
DONE = const.TaskStatus.DONE
SKIPPED = const.TaskStatus.SKIPPED
MISSED = const.TaskStatus.MISSED
PENDING = const.TaskStatus.PENDING


def _pet(xp: int, stage_index: int) -> dict[str, int]:
    return {const.DATA_PET_XP: xp, const.DATA_PET_STAGE_INDEX: stage_index}


# =============================================================================
# TEST: STAGE LOOKUP
# =============================================================================


class TestStageForXp:
    """Test XP → stage mapping."""

    @pytest.mark.parametrize(
        ("xp", "expected"),
        [(0, 0), (9, 0), (10, 1), (27, 1), (28, 2), (5000, 2), (-5, 0)],
    )
    def test_small_table(self, xp: int, expected: int) -> None:
        """Largest index whose threshold is <= xp."""
        assert XpEngine.stage_for_xp(xp, SMALL) == expected

    def test_default_table_tops_out_at_last_stage(self) -> None:
        """Huge XP maps to the final stage."""
        assert XpEngine.stage_for_xp(10**12, const.STAGE_THRESHOLDS) == len(
            const.PET_STAGES
        ) - 1

    def test_default_table_has_thirty_ascending_stages(self) -> None:
        """Thirty stages, starting at zero, strictly ascending."""
        thresholds = const.STAGE_THRESHOLDS
        assert len(thresholds) == 30
        assert thresholds[0] == 0
        assert all(a < b for a, b in zip(thresholds, thresholds[1:]))

    def test_progress_to_next_stage(self) -> None:
        """Halfway from 10 to 28 is 50%."""
        assert XpEngine.progress_to_next_stage(19, 1, SMALL) == 50.0

    def test_progress_at_final_stage(self) -> None:
        """The final stage is always complete."""
        assert XpEngine.progress_to_next_stage(5000, 2, SMALL) == 100.0


# =============================================================================
# TEST: MISS PENALTY
# =============================================================================


class TestMissPenalty:
    """Test the level-scaled miss penalty."""

    def test_multiplier_level_1(self) -> None:
        """1.0x at level 1."""
        assert XpEngine.miss_penalty_multiplier(1) == 1.0

    def test_multiplier_level_30(self) -> None:
        """3.0x at level 30."""
        assert XpEngine.miss_penalty_multiplier(30) == 3.0

    @pytest.mark.parametrize(("level", "expected"), [(0, 1.0), (-3, 1.0), (45, 3.0)])
    def test_multiplier_clamps_level(self, level: int, expected: float) -> None:
        """Levels outside 1-30 are clamped."""
        assert XpEngine.miss_penalty_multiplier(level) == expected

    def test_level_1_penalty(self) -> None:
        """One miss at level 1 costs xp_per_task."""
        result = XpEngine.apply_miss(_pet(25, 0), 1, 10, (0, 100))
        assert result == _pet(15, 0)

    def test_level_30_penalty(self) -> None:
        """One miss at level 30 costs 3 x xp_per_task."""
        assert XpEngine.miss_penalty(30, 1, 10) == 30

    def test_penalty_rounds_half_up(self) -> None:
        """Level 2: 10 x 1.069 = 10.69 → 11."""
        assert XpEngine.miss_penalty(2, 1, 10) == 11

    def test_batched_penalty_is_one_calculation(self) -> None:
        """Three misses at level 4: round(10 x 1.2069 x 3) = 36."""
        assert XpEngine.miss_penalty(4, 3, 10) == 36

    def test_xp_never_negative(self) -> None:
        """The penalty is floored at zero XP."""
        result = XpEngine.apply_miss(_pet(5, 0), 1, 10, SMALL)
        assert result == _pet(0, 0)

    def test_stage_recomputed_after_miss(self) -> None:
        """Level 3 penalty (11) drops 30 XP to 19, stage 1."""
        result = XpEngine.apply_miss(_pet(30, 2), 1, 10, SMALL)
        assert result == _pet(19, 1)


# =============================================================================
# TEST: COMPLETION
# =============================================================================


class TestCompletion:
    """Test completion rewards."""

    def test_first_completion_evolves(self) -> None:
        """0 XP + 10 reaches the second stage."""
        assert XpEngine.apply_completion(_pet(0, 0), 10, SMALL) == _pet(10, 1)

    def test_input_not_mutated(self) -> None:
        """A new dict is returned."""
        pet = _pet(0, 0)
        XpEngine.apply_completion(pet, 10, SMALL)
        assert pet == _pet(0, 0)


# =============================================================================
# TEST: STATUS TRANSITIONS
# =============================================================================


class TestTransitions:
    """Test undo/apply planning and application."""

    @pytest.mark.parametrize(
        ("old", "new", "expected"),
        [
            (PENDING, DONE, [const.XP_OP_REWARD]),
            (PENDING, MISSED, [const.XP_OP_PENALTY]),
            (PENDING, SKIPPED, []),
            (DONE, MISSED, [const.XP_OP_PENALTY, const.XP_OP_PENALTY]),
            (MISSED, DONE, [const.XP_OP_REWARD, const.XP_OP_REWARD]),
            (DONE, SKIPPED, [const.XP_OP_PENALTY]),
            (MISSED, PENDING, [const.XP_OP_REWARD]),
            (SKIPPED, PENDING, []),
            (DONE, DONE, []),
        ],
    )
    def test_plan_transition(
        self, old: const.TaskStatus, new: const.TaskStatus, expected: list[str]
    ) -> None:
        """The old status is undone, then the new one applied."""
        assert XpEngine.plan_transition(old, new) == expected

    def test_missed_to_done_is_two_operations(self) -> None:
        """Undo the miss (+10) then reward (+10)."""
        config = XpConfig(thresholds=SMALL, xp_per_task=10)
        result = XpEngine.apply_transition(_pet(5, 0), MISSED, DONE, config)
        assert result == _pet(25, 1)

    def test_complete_then_reopen_round_trips(self) -> None:
        """Without a stage change, reopen exactly undoes complete."""
        config = XpConfig(thresholds=(0, 100, 200), xp_per_task=10)
        start = _pet(20, 0)
        done = XpEngine.apply_transition(start, PENDING, DONE, config)
        reopened = XpEngine.apply_transition(done, DONE, PENDING, config)
        assert done == _pet(30, 0)
        assert reopened == start

    def test_miss_then_reopen_round_trips(self) -> None:
        """Without a stage change, reopen exactly undoes miss."""
        config = XpConfig(thresholds=(0, 100, 200), xp_per_task=10)
        start = _pet(20, 0)
        missed = XpEngine.apply_transition(start, PENDING, MISSED, config)
        reopened = XpEngine.apply_transition(missed, MISSED, PENDING, config)
        assert missed == _pet(10, 0)
        assert reopened == start

    def test_complete_skip_complete_does_not_round_trip(self) -> None:
        """At level 4 undoing a completion costs 12, redoing it earns 10."""
        config = XpConfig(xp_per_task=10)
        start = _pet(100, 3)
        done = XpEngine.apply_transition(start, PENDING, DONE, config)
        skipped = XpEngine.apply_transition(done, DONE, SKIPPED, config)
        redone = XpEngine.apply_transition(skipped, SKIPPED, DONE, config)
        assert done[const.DATA_PET_XP] == 110
        assert skipped[const.DATA_PET_XP] == 98
        assert redone[const.DATA_PET_XP] == 108
        assert redone != done

    def test_transition_delta(self) -> None:
        """Net XP change of a transition."""
        config = XpConfig(thresholds=SMALL, xp_per_task=10)
        assert XpEngine.transition_delta(_pet(0, 0), PENDING, DONE, config) == 10

    def test_custom_xp_per_task(self) -> None:
        """Injected xp_per_task drives both reward and penalty."""
        config = XpConfig(thresholds=(0, 1000), xp_per_task=25)
        done = XpEngine.apply_transition(_pet(0, 0), PENDING, DONE, config)
        missed = XpEngine.apply_transition(done, DONE, MISSED, config)
        assert done == _pet(25, 0)
        assert missed == _pet(0, 0)


# =============================================================================
# TEST: NORMALIZATION
# =============================================================================


class TestNormalize:
    """Test repair of stored pet state."""

    def test_stage_recomputed_from_xp(self) -> None:
        """A stale stage index is replaced."""
        assert XpEngine.normalize(_pet(12, 7), SMALL) == _pet(12, 1)

    def test_negative_xp_floored(self) -> None:
        """Negative XP becomes zero."""
        assert XpEngine.normalize(_pet(-3, 0), SMALL) == _pet(0, 0)

    def test_unreadable_xp_reset(self) -> None:
        """Non-numeric XP becomes zero."""
        assert XpEngine.normalize({const.DATA_PET_XP: "lots"}, SMALL) == _pet(0, 0)
