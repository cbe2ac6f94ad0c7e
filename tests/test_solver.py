"""Tests for the keys strain solver."""

from __future__ import annotations

import json
import math
import time

import pytest

from src.strain_engine.lookup_tables import GameMode, Hand
from src.strain_engine.solver import (
    average_note_density,
    compute_overall_difficulty,
    solve,
    solve_for_hand,
)

from tests.conftest import ConstantEvaluator, make_events


@pytest.fixture
def seven_key_stream():
    lanes = [1, 4, 7, 2, 6, 3, 5, 4, 4, 1, 7, 2, 6, 3, 5, 4]
    return make_events(*[(lane, i * 90.0) for i, lane in enumerate(lanes * 4)])


class TestUnratableMaps:
    @pytest.mark.parametrize("mode", [GameMode.KEYS4, GameMode.KEYS7])
    @pytest.mark.parametrize("count", [0, 1])
    def test_fewer_than_two_events(self, mode, count):
        events = make_events((1, 0))[:count]
        result = solve(events, mode)
        assert result.overall_difficulty == 0.0
        assert result.passes == []

    @pytest.mark.parametrize("assume_hand", [Hand.LEFT, Hand.RIGHT])
    def test_lone_middle_lane_note(self, constants, evaluator, assume_hand):
        events = make_events((4, 0))
        assert solve(events, GameMode.KEYS7, constants=constants, evaluator=evaluator).overall_difficulty == 0.0

        solved = solve_for_hand(events, GameMode.KEYS7, assume_hand, 1.0, constants, evaluator)
        (cluster,) = solved.clusters.all
        assert cluster.hand is assume_hand
        assert solved.clusters.for_hand(assume_hand) == [cluster]
        assert solved.difficulty == 0.0

    def test_short_maps_skip_rate_validation(self):
        # Rate is only checked when events are adapted
        assert solve(make_events((1, 0)), 4, rate=0.0).overall_difficulty == 0.0

    def test_two_notes_on_one_hand_have_no_steps(self, constants, evaluator):
        events = make_events((1, 0), (2, 600))
        assert compute_overall_difficulty(events, 4, constants=constants, evaluator=evaluator) == 0.0


class TestModes:
    def test_unsupported_mode_raises(self):
        with pytest.raises(ValueError, match="Unsupported game mode"):
            solve([], 5)
        with pytest.raises(ValueError):
            solve(make_events((1, 0), (2, 100)), 6)

    def test_non_positive_rate_raises(self):
        with pytest.raises(ValueError, match="rate"):
            solve(make_events((1, 0), (2, 100)), 4, rate=0.0)

    def test_4k_runs_one_pass(self, stream_map):
        result = solve(stream_map, GameMode.KEYS4)
        assert [p.assume_hand for p in result.passes] == [Hand.RIGHT]
        assert result.overall_difficulty == result.passes[0].difficulty

    def test_7k_averages_both_assumptions(self, seven_key_stream):
        result = solve(seven_key_stream, GameMode.KEYS7)
        left, right = result.passes
        assert (left.assume_hand, right.assume_hand) == (Hand.LEFT, Hand.RIGHT)
        assert result.overall_difficulty == pytest.approx(
            (left.difficulty + right.difficulty) / 2
        )


class TestScenarios:
    def test_single_step_map(self, constants, evaluator):
        events = make_events((1, 0), (2, 600), (1, 1200))
        result = solve(events, 4, constants=constants, evaluator=evaluator)
        # one step of 2.0 * sqrt(30000 / 1200), stamina factor 0.9
        assert result.overall_difficulty == pytest.approx(9.0)

    def test_rate_shrinks_gaps(self, constants, evaluator):
        events = make_events((1, 0), (2, 600), (1, 1200))
        difficulty = compute_overall_difficulty(
            events, 4, rate=2.0, constants=constants, evaluator=evaluator
        )
        assert difficulty == pytest.approx(0.9 * 2.0 * math.sqrt(50.0))

    def test_middle_lane_resolved_per_pass(self, constants, evaluator):
        events = make_events((1, 0), (4, 300), (2, 600), (4, 900), (3, 1200))
        result = solve(events, GameMode.KEYS7, constants=constants, evaluator=evaluator)
        left_pass, right_pass = result.passes

        def middle_hands(solve_pass):
            return {
                c.hand
                for c in solve_pass.clusters.all
                for m in c.members
                if m.lane == 4
            }

        assert middle_hands(left_pass) == {Hand.LEFT}
        assert middle_hands(right_pass) == {Hand.RIGHT}

        # Left pass: five left clusters, three 600 ms steps
        left_expected = (math.log10(3) / 25 + 0.9) * 2.0 * math.sqrt(50.0)
        # Right pass: three left clusters, one 1200 ms step
        right_expected = 9.0
        assert left_pass.difficulty == pytest.approx(left_expected)
        assert right_pass.difficulty == pytest.approx(right_expected)
        assert result.overall_difficulty == pytest.approx((left_expected + right_expected) / 2)


class TestProperties:
    def test_deterministic(self, stream_map):
        first = solve(stream_map, 4).overall_difficulty
        second = solve(stream_map, 4).overall_difficulty
        assert first == second

    @pytest.mark.parametrize("rate", [0.5, 1.0, 1.5])
    def test_finite_and_non_negative(self, stream_map, seven_key_stream, rate):
        for events, mode in ((stream_map, 4), (seven_key_stream, 7)):
            difficulty = compute_overall_difficulty(events, mode, rate=rate)
            assert math.isfinite(difficulty)
            assert difficulty > 0

    def test_faster_rate_is_harder(self, stream_map):
        assert compute_overall_difficulty(stream_map, 4, rate=1.5) > compute_overall_difficulty(
            stream_map, 4, rate=1.0
        )

    def test_placeholder_confidences(self, stream_map):
        result = solve(stream_map, 4)
        assert result.vibro_inaccuracy_confidence == 0.0
        assert result.roll_inaccuracy_confidence == 0.0


class TestDetailedSolve:
    def test_average_note_density(self):
        events = make_events((1, 0), (2, 600), (1, 1200))
        assert average_note_density(events) == pytest.approx(2.5)
        assert average_note_density(events, rate=2.0) == pytest.approx(5.0)

    def test_density_only_when_detailed(self, stream_map):
        assert solve(stream_map, 4).average_note_density == 0.0
        assert solve(stream_map, 4, detailed=True).average_note_density > 0

    def test_to_dict_is_json_serialisable(self, stream_map):
        result = solve(stream_map, 4, detailed=True, evaluator=ConstantEvaluator(1.5))
        payload = json.loads(json.dumps(result.to_dict()))

        assert payload["mode"] == "KEYS4"
        assert payload["overall_difficulty"] == pytest.approx(result.overall_difficulty)
        hands = payload["passes"][0]["hands"]
        assert set(hands) == {"left", "right"}
        assert hands["left"]["steps"] > 0


class TestScaling:
    @staticmethod
    def _best_time(events, repeats=3):
        best = float("inf")
        for _ in range(repeats):
            start = time.perf_counter()
            solve(events, 4, evaluator=ConstantEvaluator(1.0))
            best = min(best, time.perf_counter() - start)
        return best

    def test_long_jack_map_scales_linearly(self):
        # Lift spans and pairing windows end after one step on a jack,
        # so four times the notes should cost about four times as much.
        small = make_events(*[(1, i * 50.0) for i in range(5000)])
        large = make_events(*[(1, i * 50.0) for i in range(20000)])

        ratio = self._best_time(large) / self._best_time(small)
        assert ratio < 8.0
