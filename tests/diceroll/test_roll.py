# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Tests for dice rolling and statistics in diceroll.roll
"""
import numpy.random
import pytest

import diceroll.roll
from diceroll.notation import (Advantage, Basic, Disadvantage, Exploding,
                               KeepHighest, KeepLowest, parse)
from diceroll.roll import (RollResult, Statistics, UNBOUNDED,
                           calculate_statistics, roll)

ROLLS = 200


@pytest.fixture
def f_result():
    yield RollResult(rolls=[5, 2, 6, 1], kept_indices=[2, 0], total=13, modifier=2, die_size=6)


def test_roll_result__repr__(f_result):
    expect = "RollResult(rolls=(5, 2, 6, 1), kept_indices=(2, 0), total=13, modifier=2, die_size=6)"
    assert repr(f_result) == expect


def test_roll_result_kept_values(f_result):
    assert f_result.kept_values == [6, 5]


def test_roll_result_to_dict(f_result):
    assert f_result.to_dict() == {
        'rolls': [5, 2, 6, 1],
        'kept_indices': [2, 0],
        'total': 13,
        'modifier': 2,
        'die_size': 6,
    }


def test_roll_result__eq__(f_result):
    assert f_result == RollResult(rolls=(5, 2, 6, 1), kept_indices=(2, 0), total=13, modifier=2, die_size=6)
    assert f_result != RollResult(rolls=(5, 2, 6, 1), total=13, modifier=2, die_size=6)


def test_statistics_unbounded():
    stats = Statistics(min=2, max=UNBOUNDED, average=8.4)
    assert stats.is_unbounded
    assert stats.to_dict() == {'min': 2, 'max': None, 'average': 8.4}
    assert not Statistics(min=2, max=12, average=7).is_unbounded


def test_statistics__repr__():
    assert repr(Statistics(min=5, max=15, average=10)) == "Statistics(min=5, max=15, average=10.0)"


def test_roll_die(f_fake_rng):
    rng = f_fake_rng([4])
    assert diceroll.roll.roll_die(rng, 6) == 4
    assert rng.calls == [(1, 7)]
    assert isinstance(diceroll.roll.roll_die(f_fake_rng([3]), 6), int)


def test_roll_dice_range(f_rng):
    rolls = diceroll.roll.roll_dice(f_rng, 1000, 6)
    assert len(rolls) == 1000
    assert set(rolls) == {1, 2, 3, 4, 5, 6}


def test_roll_exploding_chains(f_fake_rng):
    rng = f_fake_rng([6, 6, 2, 3, 6, 1])
    assert diceroll.roll.roll_exploding(rng, 3, 6) == [6, 6, 2, 3, 6, 1]
    assert not rng.values


def test_keep_highest_indices():
    rolls = [3, 1, 5, 2, 4]
    assert diceroll.roll.keep_highest_indices(rolls, 3) == [2, 4, 0]


def test_keep_lowest_indices():
    rolls = [3, 1, 5, 2, 4]
    assert diceroll.roll.keep_lowest_indices(rolls, 2) == [1, 3]


def test_keep_indices_ties_follow_roll_order():
    rolls = [4, 6, 4, 6, 4]
    assert diceroll.roll.keep_highest_indices(rolls, 3) == [1, 3, 0]
    assert diceroll.roll.keep_lowest_indices(rolls, 2) == [0, 2]


def test_roll_basic_scripted(f_fake_rng):
    result = roll(Basic(count=3, sides=6, modifier=2), f_fake_rng([1, 4, 6]))
    assert result == RollResult(rolls=[1, 4, 6], total=13, modifier=2, die_size=6)


def test_roll_basic_range(f_rng):
    expr = parse("2d6+3")
    for _ in range(ROLLS):
        result = roll(expr, f_rng)
        assert len(result.rolls) == 2
        assert 5 <= result.total <= 15
        assert result.modifier == 3
        assert result.die_size == 6
        assert result.kept_indices == ()


def test_roll_without_rng():
    result = roll(parse("1d20+5"))
    assert 6 <= result.total <= 25
    assert result.modifier == 5


def test_roll_keep_highest_scripted(f_fake_rng):
    result = roll(KeepHighest(count=4, sides=6, keep=3, modifier=1), f_fake_rng([2, 5, 1, 5]))
    assert result.rolls == (2, 5, 1, 5)
    assert result.kept_indices == (1, 3, 0)
    assert result.total == 13


def test_roll_keep_lowest_scripted(f_fake_rng):
    result = roll(KeepLowest(count=4, sides=6, keep=1, modifier=0), f_fake_rng([2, 5, 1, 5]))
    assert result.kept_indices == (2,)
    assert result.total == 1


@pytest.mark.parametrize("text", ["4d6k3", "4d6kl3", "5d20k1-2", "3d8kl3+4"])
def test_roll_keep_counts(f_rng, text):
    expr = parse(text)
    for _ in range(ROLLS):
        result = roll(expr, f_rng)
        assert len(result.rolls) == expr.count
        assert len(result.kept_indices) == expr.keep
        assert len(set(result.kept_indices)) == expr.keep
        assert result.total == sum(result.kept_values) + expr.modifier
        assert expr.keep + expr.modifier <= result.total <= expr.keep * expr.sides + expr.modifier


def test_roll_keep_highest_keeps_best(f_rng):
    expr = parse("4d6k3")
    for _ in range(ROLLS):
        result = roll(expr, f_rng)
        assert sorted(result.kept_values) == sorted(result.rolls)[1:]


def test_roll_keep_lowest_keeps_worst(f_rng):
    expr = parse("4d6kl2")
    for _ in range(ROLLS):
        result = roll(expr, f_rng)
        assert sorted(result.kept_values) == sorted(result.rolls)[:2]


def test_roll_advantage(f_rng):
    expr = Advantage(sides=20, modifier=2)
    for _ in range(ROLLS):
        result = roll(expr, f_rng)
        assert len(result.rolls) == 2
        assert result.kept_indices == ()
        assert result.total == max(result.rolls) + 2
        assert min(result.rolls) + 2 <= result.total <= max(result.rolls) + 2


def test_roll_disadvantage(f_rng):
    expr = Disadvantage(sides=20, modifier=-1)
    for _ in range(ROLLS):
        result = roll(expr, f_rng)
        assert len(result.rolls) == 2
        assert result.kept_indices == ()
        assert result.total == min(result.rolls) - 1


def test_roll_advantage_custom_sides(f_fake_rng):
    rng = f_fake_rng([3, 11])
    result = roll(parse("adv(d12)"), rng)
    assert rng.calls == [(1, 13), (1, 13)]
    assert result.total == 11
    assert result.die_size == 12


def test_roll_exploding_scripted(f_fake_rng):
    result = roll(Exploding(count=2, sides=6, modifier=1), f_fake_rng([6, 6, 3, 2]))
    assert result.rolls == (6, 6, 3, 2)
    assert result.kept_indices == ()
    assert result.total == 18


def test_roll_exploding_chains_follow_max(f_rng):
    expr = parse("3d4!")
    for _ in range(ROLLS):
        result = roll(expr, f_rng)
        assert len(result.rolls) >= expr.count
        assert result.rolls[-1] != expr.sides
        for ind, val in enumerate(result.rolls[:-1]):
            if val == expr.sides:
                assert ind + 1 < len(result.rolls)
        assert len([val for val in result.rolls if val != expr.sides]) == expr.count
        assert result.total == sum(result.rolls)


def test_roll_unknown_expression():
    with pytest.raises(TypeError) as exc_info:
        roll("2d6", numpy.random.default_rng(1))
    assert exc_info.value.__suppress_context__
    assert exc_info.value.__cause__ is None


def test_roll_is_reproducible():
    expr = parse("10d20k4")
    first = [roll(expr, numpy.random.default_rng(42)) for _ in range(3)]
    second = [roll(expr, numpy.random.default_rng(42)) for _ in range(3)]
    assert first == second


def test_calculate_statistics_basic():
    assert calculate_statistics(Basic(count=2, sides=6, modifier=3)) == Statistics(min=5, max=15, average=10.0)
    assert calculate_statistics(Basic(count=2, sides=6, modifier=3)).average == 10.0


def test_calculate_statistics_keep():
    expect = Statistics(min=3, max=18, average=10.5)
    assert calculate_statistics(KeepHighest(count=4, sides=6, keep=3)) == expect
    assert calculate_statistics(KeepLowest(count=4, sides=6, keep=3)) == expect
    assert calculate_statistics(KeepLowest(count=4, sides=6, keep=1, modifier=-1)) == \
        Statistics(min=0, max=5, average=2.5)


def test_calculate_statistics_advantage():
    stats = calculate_statistics(Advantage(sides=20, modifier=0))
    assert stats.min == 1
    assert stats.max == 20
    assert stats.average == pytest.approx(13.0)
    assert stats.average > 10.0


def test_calculate_statistics_disadvantage():
    stats = calculate_statistics(Disadvantage(sides=20, modifier=2))
    assert stats.min == 3
    assert stats.max == 22
    assert stats.average == pytest.approx(9.0)


def test_calculate_statistics_exploding():
    stats = calculate_statistics(Exploding(count=2, sides=6, modifier=1))
    assert stats.min == 3
    assert stats.max == UNBOUNDED
    assert stats.is_unbounded
    assert stats.average == pytest.approx(9.4)


def test_calculate_statistics_unknown_expression():
    with pytest.raises(TypeError) as exc_info:
        calculate_statistics(object())
    assert exc_info.value.__suppress_context__


def test_every_expression_has_roller_and_stats():
    kinds = {Basic, KeepHighest, KeepLowest, Advantage, Disadvantage, Exploding}
    assert set(diceroll.roll.ROLLERS) == kinds
    assert set(diceroll.roll.CALCULATORS) == kinds


def test_results_are_immutable(f_result):
    with pytest.raises(AttributeError):
        f_result.total = 3
    stats = Statistics(min=1, max=6, average=3.5)
    with pytest.raises(AttributeError):
        stats.max = 7
