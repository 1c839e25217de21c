from datetime import datetime, timedelta, timezone

import pytest

from acca_prep.sm2 import SM2Algorithm, ReviewState, MIN_EASE_FACTOR


def test_quality_mapping_is_binary():
    assert SM2Algorithm.quality_from_outcome(True) == 4
    assert SM2Algorithm.quality_from_outcome(False) == 1


def test_default_state():
    assert ReviewState() == ReviewState(ease_factor=2.5, interval_days=1, repetitions=0)


def test_good_answer_keeps_default_ease():
    assert SM2Algorithm.update_ease_factor(2.5, 4) == pytest.approx(2.5)


def test_perfect_answer_raises_ease():
    assert SM2Algorithm.update_ease_factor(2.5, 5) == pytest.approx(2.6)


def test_failed_answer_lowers_ease():
    assert SM2Algorithm.update_ease_factor(2.6, 1) == pytest.approx(2.06)


def test_ease_is_floored():
    assert SM2Algorithm.update_ease_factor(1.4, 0) == MIN_EASE_FACTOR
    assert SM2Algorithm.update_ease_factor(MIN_EASE_FACTOR, 1) == MIN_EASE_FACTOR


def test_bootstrap_intervals():
    first = SM2Algorithm.next_state(ReviewState(), 4)
    assert (first.repetitions, first.interval_days) == (1, 1)

    second = SM2Algorithm.next_state(first, 4)
    assert (second.repetitions, second.interval_days) == (2, 6)

    third = SM2Algorithm.next_state(second, 4)
    assert third.repetitions == 3
    assert third.interval_days == 15


def test_growth_uses_new_ease():
    state = ReviewState(ease_factor=2.5, interval_days=10, repetitions=3)
    result = SM2Algorithm.next_state(state, 5)
    # 10 * 2.6
    assert result.interval_days == 26


def test_half_interval_rounds_up():
    # 5 * 2.5 = 12.5
    state = ReviewState(ease_factor=2.5, interval_days=5, repetitions=2)
    assert SM2Algorithm.next_state(state, 4).interval_days == 13


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_failure_resets_progress(quality):
    state = ReviewState(ease_factor=2.8, interval_days=40, repetitions=7)
    result = SM2Algorithm.next_state(state, quality)
    assert result.repetitions == 0
    assert result.interval_days == 1
    assert result.ease_factor < 2.8


@pytest.mark.parametrize("quality", [-1, 6])
def test_quality_out_of_range(quality):
    with pytest.raises(ValueError):
        SM2Algorithm.next_state(ReviewState(), quality)


def test_next_review_at_adds_whole_days():
    reviewed_at = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)
    assert SM2Algorithm.next_review_at(reviewed_at, 6) == reviewed_at + timedelta(days=6)


def test_due_boundary_is_inclusive():
    t = datetime(2026, 3, 2, tzinfo=timezone.utc)
    assert SM2Algorithm.is_due_for_review(t, t)
    assert not SM2Algorithm.is_due_for_review(t + timedelta(seconds=1), t)


def test_repeated_sequence_is_deterministic():
    outcomes = [True, True, False, True, True, True, False, True]

    def run():
        state = ReviewState()
        for outcome in outcomes:
            state = SM2Algorithm.next_state(state, SM2Algorithm.quality_from_outcome(outcome))
        return state

    assert run() == run()
