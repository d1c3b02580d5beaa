"""
Unit tests for the Problem Selector.

Tests:
- Weight formula (mastery base + tally adjustment)
- Weighted pool floor and repetition counts
- Bootstrap and weighted draws
- Choice collisions (characterised, not prevented)

Run: pytest tests/unit/test_selector.py -v
"""

import random
from collections import Counter

import pytest

from src.multiplay.mastery import FINISHED, UNKNOWN, InProgress, MasteryMatrix
from src.multiplay.selector import ProblemSelector
from src.multiplay.tally import TallyLedger


@pytest.fixture
def selector(config):
    return ProblemSelector(config, random.Random(42))


@pytest.fixture
def mastery(config):
    return MasteryMatrix(config)


@pytest.fixture
def tally(config):
    return TallyLedger(config)


def finish_all(mastery):
    for row in mastery.rows:
        for b in range(len(row)):
            row[b] = FINISHED


class TestWeights:
    """weight() = mastery base adjusted by tally."""

    @pytest.mark.parametrize(
        "status, tally, expected",
        [
            (UNKNOWN, 0, 2),
            (InProgress(1), 0, 1),
            (InProgress(-4), 0, 0),
            (FINISHED, 0, 0),
            (UNKNOWN, -3, 5),
            (FINISHED, -2, 2),
            (UNKNOWN, 4, 1),
            (InProgress(1), 3, 1),
            (FINISHED, 5, 0),
        ],
    )
    def test_weight_table(self, selector, status, tally, expected):
        assert selector.weight(status, tally) == expected


class TestPool:
    """build_pool() repeats each flat index weight + 1 times."""

    def test_fresh_pool_size(self, selector, mastery, tally, config):
        pool = selector.build_pool(mastery, tally)
        assert len(pool) == config.dimension ** 2 * 3

    def test_finished_and_zero_tally_is_floor_only(self, selector, mastery, tally, config):
        finish_all(mastery)
        counts = Counter(selector.build_pool(mastery, tally))

        assert len(counts) == config.dimension ** 2
        assert set(counts.values()) == {1}

    def test_struggling_pair_gets_boost(self, selector, mastery, tally):
        for _ in range(3):
            tally.update((5, 5), False)
        counts = Counter(selector.build_pool(mastery, tally))

        assert counts[5 * 13 + 5] == 6
        assert counts[5 * 13 + 6] == 3

    def test_every_pair_present_even_when_mastered(self, selector, mastery, tally, config):
        finish_all(mastery)
        for a in range(config.dimension):
            for b in range(config.dimension):
                tally.update((a, b), True)
        pool = selector.build_pool(mastery, tally)
        assert set(pool) == set(range(config.dimension ** 2))

    def test_pair_at_inverts_flat_index(self, selector):
        assert selector.pair_at(0) == (0, 0)
        assert selector.pair_at(5 * 13 + 7) == (5, 7)
        assert selector.pair_at(168) == (12, 12)


class TestChooseChoices:
    """Drawing candidate pairs."""

    def test_bootstrap_draws_in_range(self, selector, config):
        for _ in range(200):
            chosen = selector.choose_choices()
            assert len(chosen) == config.n_choices
            for a, b in chosen:
                assert 0 <= a <= config.max_factor
                assert 0 <= b <= config.max_factor

    def test_weighted_draw_never_fails(self, selector, mastery, tally, config):
        finish_all(mastery)
        for _ in range(100):
            assert len(selector.choose_choices(mastery, tally)) == config.n_choices

    def test_weighted_draw_prefers_struggling_pair(self, selector, mastery, tally):
        finish_all(mastery)
        mastery[(7, 8)] = UNKNOWN
        for _ in range(40):
            tally.update((7, 8), False)

        drawn = Counter()
        for _ in range(500):
            drawn.update(selector.choose_choices(mastery, tally))

        # (7, 8) holds 43 of 211 pool entries; any other pair holds 1
        assert drawn[(7, 8)] > 300
        assert drawn.most_common(1)[0][0] == (7, 8)

    def test_seeded_draws_repeat(self, config, mastery, tally):
        first = ProblemSelector(config, random.Random(7)).choose_choices(mastery, tally)
        second = ProblemSelector(config, random.Random(7)).choose_choices(mastery, tally)
        assert first == second


class TestNewProblem:
    """new_problem() returns a posed pair and its choices."""

    def test_answer_is_among_choices(self, selector, mastery, tally):
        for use_state in (False, True):
            for _ in range(200):
                if use_state:
                    (a, b), answers = selector.new_problem(mastery, tally)
                else:
                    (a, b), answers = selector.new_problem()
                assert a * b in answers

    def test_choice_count(self, selector, config):
        _, answers = selector.new_problem()
        assert len(answers) == config.n_choices

    def test_duplicate_choices_happen_but_are_uncommon(self, selector, mastery, tally):
        """With four independent draws some problems repeat a product."""
        trials = 2000
        with_duplicates = 0
        for _ in range(trials):
            _, answers = selector.new_problem(mastery, tally)
            if len(set(answers)) < len(answers):
                with_duplicates += 1

        rate = with_duplicates / trials
        assert 0.05 < rate < 0.45
