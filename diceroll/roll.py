"""
Dice module for throwing dice and describing what a throw can produce.

Every roll takes an rng, any object with the numpy.random.Generator
integers(low, high) contract where high is exclusive. A die of N sides
is therefore rng.integers(1, N + 1).

Statistics are closed form and do not roll anything. Several of them are
approximations on purpose:
    Keep highest/lowest: computed as if only the kept dice were rolled,
                         not the real order statistics.
    Advantage:           0.65 * sides, close to the mean of the max of two dice.
    Disadvantage:        0.35 * sides, close to the mean of the min of two dice.
    Exploding:           the plain average inflated by 1.2, max is unbounded.
"""
import sys

import numpy.random

from diceroll.notation import (Advantage, Basic, Disadvantage, Exploding,
                               KeepHighest, KeepLowest)
from diceroll.util import ImmutableMixin, ReprMixin

UNBOUNDED = sys.maxsize
ADVANTAGE_FACTOR = 0.65
DISADVANTAGE_FACTOR = 0.35
EXPLODING_FACTOR = 1.2


class RollResult(ReprMixin, ImmutableMixin):
    """
    The outcome of a single roll of an expression.

    Attributes:
        rolls: Every die value in the order it was rolled, explosions included.
        kept_indices: Indices into rolls that counted, empty when all of them did.
        total: The final value of the roll, modifier included.
        modifier: The flat modifier applied.
        die_size: The number of sides on the dice rolled.
    """
    _repr_keys = ['rolls', 'kept_indices', 'total', 'modifier', 'die_size']

    def __init__(self, *, rolls, kept_indices=None, total, modifier=0, die_size):
        self._freeze(rolls=tuple(rolls), kept_indices=tuple(kept_indices) if kept_indices else (),
                     total=total, modifier=modifier, die_size=die_size)

    def __eq__(self, other):
        return isinstance(other, RollResult) and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.rolls, self.kept_indices, self.total, self.modifier, self.die_size))

    @property
    def kept_values(self):
        """ The values of the kept dice, in kept order. """
        return [self.rolls[ind] for ind in self.kept_indices]

    def to_dict(self):
        """ A plain dict of this result. """
        return {
            'rolls': list(self.rolls),
            'kept_indices': list(self.kept_indices),
            'total': self.total,
            'modifier': self.modifier,
            'die_size': self.die_size,
        }


class Statistics(ReprMixin, ImmutableMixin):
    """
    The range and expected value of an expression.

    Attributes:
        min: The lowest possible total.
        max: The highest possible total, UNBOUNDED if there is none.
        average: The (possibly approximate) expected total.
    """
    _repr_keys = ['min', 'max', 'average']

    def __init__(self, *, min, max, average):  # pylint: disable=redefined-builtin
        self._freeze(min=min, max=max, average=float(average))

    def __eq__(self, other):
        return isinstance(other, Statistics) and self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.min, self.max, self.average))

    @property
    def is_unbounded(self):
        """ True if there is no highest possible total. """
        return self.max == UNBOUNDED

    def to_dict(self):
        """ A plain dict of these statistics, an unbounded max is None. """
        return {
            'min': self.min,
            'max': None if self.is_unbounded else self.max,
            'average': self.average,
        }


def roll_die(rng, sides):
    """ Roll a single die, uniform over [1, sides]. """
    return int(rng.integers(1, sides + 1))


def roll_dice(rng, count, sides):
    """ Roll count dice of sides. """
    return [roll_die(rng, sides) for _ in range(count)]


def roll_exploding(rng, count, sides):
    """
    Roll count dice, each time a die shows sides roll another and append it.

    Returns:
        All values rolled in order, every chain follows the die that started it.
    """
    results = []
    for _ in range(count):
        value = roll_die(rng, sides)
        results += [value]
        while value == sides:
            value = roll_die(rng, sides)
            results += [value]

    return results


def keep_highest_indices(rolls, keep):
    """
    Select the keep highest rolls. Ties favour the earlier roll.

    Returns:
        The indices of the kept rolls, highest value first.
    """
    ordered = sorted(enumerate(rolls), key=lambda pair: pair[1], reverse=True)
    # sorted is stable even with reverse=True, ties stay in roll order
    return [ind for ind, _ in ordered[:keep]]


def keep_lowest_indices(rolls, keep):
    """
    Select the keep lowest rolls. Ties favour the earlier roll.

    Returns:
        The indices of the kept rolls, lowest value first.
    """
    ordered = sorted(enumerate(rolls), key=lambda pair: pair[1])
    return [ind for ind, _ in ordered[:keep]]


def _roll_basic(expr, rng):
    rolls = roll_dice(rng, expr.count, expr.sides)
    return RollResult(rolls=rolls, total=sum(rolls) + expr.modifier,
                      modifier=expr.modifier, die_size=expr.sides)


def _roll_keep(select):
    def inner(expr, rng):
        rolls = roll_dice(rng, expr.count, expr.sides)
        kept = select(rolls, expr.keep)
        return RollResult(rolls=rolls, kept_indices=kept,
                          total=sum(rolls[ind] for ind in kept) + expr.modifier,
                          modifier=expr.modifier, die_size=expr.sides)

    return inner


def _roll_two(select):
    def inner(expr, rng):
        rolls = roll_dice(rng, 2, expr.sides)
        return RollResult(rolls=rolls, total=select(rolls) + expr.modifier,
                          modifier=expr.modifier, die_size=expr.sides)

    return inner


def _roll_exploding(expr, rng):
    rolls = roll_exploding(rng, expr.count, expr.sides)
    return RollResult(rolls=rolls, total=sum(rolls) + expr.modifier,
                      modifier=expr.modifier, die_size=expr.sides)


ROLLERS = {
    Basic: _roll_basic,
    KeepHighest: _roll_keep(keep_highest_indices),
    KeepLowest: _roll_keep(keep_lowest_indices),
    Advantage: _roll_two(max),
    Disadvantage: _roll_two(min),
    Exploding: _roll_exploding,
}


def roll(expr, rng=None):
    """
    Roll the expression once.

    Args:
        expr: A DiceExpression, usually from diceroll.notation.parse.
        rng: The source of randomness, a fresh numpy Generator if not given.

    Raises:
        TypeError: expr is not a known DiceExpression.

    Returns:
        A RollResult.
    """
    try:
        func = ROLLERS[type(expr)]
    except KeyError:
        raise TypeError(f"Cannot roll {expr!r}") from None

    if rng is None:
        rng = numpy.random.default_rng()

    return func(expr, rng)


def _stats_basic(expr):
    return Statistics(min=expr.count + expr.modifier,
                      max=expr.count * expr.sides + expr.modifier,
                      average=expr.count * (expr.sides + 1) / 2 + expr.modifier)


def _stats_keep(expr):
    return Statistics(min=expr.keep + expr.modifier,
                      max=expr.keep * expr.sides + expr.modifier,
                      average=expr.keep * (expr.sides + 1) / 2 + expr.modifier)


def _stats_two(factor):
    def inner(expr):
        return Statistics(min=1 + expr.modifier,
                          max=expr.sides + expr.modifier,
                          average=expr.sides * factor + expr.modifier)

    return inner


def _stats_exploding(expr):
    return Statistics(min=expr.count + expr.modifier,
                      max=UNBOUNDED,
                      average=expr.count * (expr.sides + 1) / 2 * EXPLODING_FACTOR + expr.modifier)


CALCULATORS = {
    Basic: _stats_basic,
    KeepHighest: _stats_keep,
    KeepLowest: _stats_keep,
    Advantage: _stats_two(ADVANTAGE_FACTOR),
    Disadvantage: _stats_two(DISADVANTAGE_FACTOR),
    Exploding: _stats_exploding,
}


def calculate_statistics(expr):
    """
    Compute min, max and average of the expression without rolling.

    Raises:
        TypeError: expr is not a known DiceExpression.

    Returns:
        A Statistics.
    """
    try:
        func = CALCULATORS[type(expr)]
    except KeyError:
        raise TypeError(f"No statistics for {expr!r}") from None

    return func(expr)
