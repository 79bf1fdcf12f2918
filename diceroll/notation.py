"""
Dice notation parser.

Turns a line of text into exactly one of the supported dice expressions.
There is no general grammar, the line is classified by prefix and by the
markers it contains.

Supported notation:
    2d6 + 3           Roll 2d6 and add 3.
    3d8-2             Roll 3d8 and subtract 2.
    4d6k3             Roll 4d6, keep the 3 highest.
    4d6kl1            Roll 4d6, keep the lowest.
    2d6!              Roll 2d6, any 6 explodes into another die.
    adv, adv(d12)+2   Roll two dice (d20 by default) and keep the highest.
    dis, dis(d8)-1    Roll two dice (d20 by default) and keep the lowest.

The modifier is always the last thing in the line.
"""
import logging
import re

from diceroll.exc import ParseError
from diceroll.util import ImmutableMixin, ReprMixin

DEFAULT_ADV_SIDES = 20
IS_INTEGER = re.compile(r'[-+]?[0-9]+', re.ASCII)
IS_DIGITS = re.compile(r'[0-9]+', re.ASCII)
NOTATION_HELP = """Quick Reference

    2d6+3             Roll 2d6 and add 3
    4d6k3             Roll 4d6 and keep the 3 highest results
    4d6kl1            Roll 4d6 and keep the lowest result
    2d6!              Roll 2d6, every 6 explodes into another d6
    adv               Roll 2d20 and keep the highest (advantage)
    dis(d12)-1        Roll 2d12, keep the lowest and subtract 1 (disadvantage)
"""


class DiceExpression(ReprMixin, ImmutableMixin):
    """
    Base of the closed set of dice expressions.
    Expressions are immutable and compare equal only to the same kind of
    expression with the same values.

    Subclasses list their fields in _repr_keys and their notation in _fmt.
    """
    _fmt = ''

    def __init__(self, **kwargs):
        self._freeze(**{key: kwargs[key] for key in self._repr_keys})

    def __str__(self):
        return self._fmt.format(**self.asdict())

    def __eq__(self, other):
        return type(self) is type(other) and self.values() == other.values()

    def __hash__(self):
        return hash((self.__class__.__name__,) + self.values())

    def values(self):
        """ The field values in declaration order. """
        return tuple(getattr(self, key) for key in self._repr_keys)

    def asdict(self):
        """ The fields of this expression as a dict. """
        return dict(zip(self._repr_keys, self.values()))


class Basic(DiceExpression):
    """ Roll count dice, sum them all. """
    _repr_keys = ['count', 'sides', 'modifier']
    _fmt = '{count}d{sides}{modifier:+}'

    def __init__(self, *, count, sides, modifier=0):
        super().__init__(count=count, sides=sides, modifier=modifier)


class KeepHighest(DiceExpression):
    """ Roll count dice, sum the keep highest. """
    _repr_keys = ['count', 'sides', 'keep', 'modifier']
    _fmt = '{count}d{sides}k{keep}{modifier:+}'

    def __init__(self, *, count, sides, keep, modifier=0):
        super().__init__(count=count, sides=sides, keep=keep, modifier=modifier)


class KeepLowest(DiceExpression):
    """ Roll count dice, sum the keep lowest. """
    _repr_keys = ['count', 'sides', 'keep', 'modifier']
    _fmt = '{count}d{sides}kl{keep}{modifier:+}'

    def __init__(self, *, count, sides, keep, modifier=0):
        super().__init__(count=count, sides=sides, keep=keep, modifier=modifier)


class Advantage(DiceExpression):
    """ Roll two dice, take the highest. """
    _repr_keys = ['sides', 'modifier']
    _fmt = 'adv(d{sides}){modifier:+}'

    def __init__(self, *, sides=DEFAULT_ADV_SIDES, modifier=0):
        super().__init__(sides=sides, modifier=modifier)


class Disadvantage(DiceExpression):
    """ Roll two dice, take the lowest. """
    _repr_keys = ['sides', 'modifier']
    _fmt = 'dis(d{sides}){modifier:+}'

    def __init__(self, *, sides=DEFAULT_ADV_SIDES, modifier=0):
        super().__init__(sides=sides, modifier=modifier)


class Exploding(DiceExpression):
    """ Roll count dice, every maximum roll adds another die. """
    _repr_keys = ['count', 'sides', 'modifier']
    _fmt = '{count}d{sides}!{modifier:+}'

    def __init__(self, *, count, sides, modifier=0):
        super().__init__(count=count, sides=sides, modifier=modifier)


def parse_int(text, msg):
    """
    Parse a plain decimal integer with an optional sign.

    Raises:
        ParseError: text is not an integer, msg is the reason given.
    """
    if not IS_INTEGER.fullmatch(text):
        raise ParseError(msg)

    return int(text)


def extract_modifier(line):
    """
    Split the trailing modifier from line.
    The last '+' or '-' starts the modifier, an unreadable modifier counts as 0.

    Returns:
        (dice_part, modifier)
            dice_part: The line before the modifier.
            modifier: The signed integer modifier.
    """
    pos = max(line.rfind('+'), line.rfind('-'))
    if pos == -1:
        return line, 0

    tail = line[pos + 1:]
    modifier = int(tail) if IS_DIGITS.fullmatch(tail) else 0
    if line[pos] == '-':
        modifier = -modifier

    return line[:pos], modifier


def parse_dice(dice_part):
    """
    Parse the XdY part of the notation.

    Raises:
        ParseError: Not exactly one 'd' or either side is not an integer.

    Returns:
        (count, sides)
    """
    parts = dice_part.split('d')
    if len(parts) != 2:
        raise ParseError("Invalid dice notation. Use format: XdY")

    count = parse_int(parts[0], "Invalid dice count")
    sides = parse_int(parts[1], "Invalid die size")

    return count, sides


def parse_basic(dice_part, modifier):
    """ Parse XdY. """
    count, sides = parse_dice(dice_part)
    if count < 1 or sides < 1:
        raise ParseError("Dice count and sides must be positive")

    return Basic(count=count, sides=sides, modifier=modifier)


def _parse_keep(dice_part, modifier, *, marker, cls, name):
    """
    Parse XdYkZ or XdYklZ.

    Args:
        marker: The separator between the dice and the keep count.
        cls: The expression class to build.
        name: Used in error messages, i.e. 'keep highest'.
    """
    parts = dice_part.split(marker)
    if len(parts) != 2:
        raise ParseError(f"Invalid {name} notation")

    count, sides = parse_dice(parts[0])
    keep = parse_int(parts[1], "Invalid keep count")
    if count < 1 or sides < 1 or keep < 1 or keep > count:
        raise ParseError(f"Invalid {name} parameters")

    return cls(count=count, sides=sides, keep=keep, modifier=modifier)


def parse_keep_highest(dice_part, modifier):
    """ Parse XdYkZ. """
    return _parse_keep(dice_part, modifier, marker='k', cls=KeepHighest, name='keep highest')


def parse_keep_lowest(dice_part, modifier):
    """ Parse XdYklZ. """
    return _parse_keep(dice_part, modifier, marker='kl', cls=KeepLowest, name='keep lowest')


def parse_exploding(dice_part, modifier):
    """ Parse XdY!, the '!' must end the dice part. """
    parts = dice_part.split('!')
    if len(parts) != 2 or parts[1]:
        raise ParseError("Invalid exploding dice notation")

    count, sides = parse_dice(parts[0])
    if count < 1 or sides < 1:
        raise ParseError("Dice count and sides must be positive")
    if sides < 2:
        raise ParseError("Exploding dice need at least 2 sides")

    return Exploding(count=count, sides=sides, modifier=modifier)


def _parse_two_dice(line, *, prefix, cls, name):
    """
    Parse adv or dis with an optional die size and modifier.
        adv, adv+2, adv(d12), adv(d12)-1

    The die size defaults to DEFAULT_ADV_SIDES.
    """
    fragment, modifier = extract_modifier(line[len(prefix):])
    sides = DEFAULT_ADV_SIDES

    if fragment:
        msg = f"Invalid die size for {name}"
        if not fragment.startswith('(d') or not fragment.endswith(')'):
            raise ParseError(msg)

        sides = parse_int(fragment[2:-1], msg)
        if sides < 1:
            raise ParseError("Dice count and sides must be positive")

    return cls(sides=sides, modifier=modifier)


def parse_advantage(line):
    """ Parse a line starting with adv. """
    return _parse_two_dice(line, prefix='adv', cls=Advantage, name='advantage')


def parse_disadvantage(line):
    """ Parse a line starting with dis. """
    return _parse_two_dice(line, prefix='dis', cls=Disadvantage, name='disadvantage')


PREFIXES = (
    ('adv', parse_advantage),
    ('dis', parse_disadvantage),
)
# Order matters, 'kl' must be tried before 'k'
MARKERS = (
    ('!', parse_exploding),
    ('kl', parse_keep_lowest),
    ('k', parse_keep_highest),
)


def parse(text):
    """
    Parse a dice notation into a DiceExpression.

    Examples valid:
        2d6, 1d20+5, 4d6k3, 4d6kl1, 2d6!, adv, dis+2, adv(d12)-1
    Examples invalid:
        d20, 2d, 0d6, 2d-6, 4d6k5

    Raises:
        ParseError: The first problem found with the notation.

    Returns:
        The DiceExpression the text describes.
    """
    line = text.strip().lower()
    if not line:
        raise ParseError("Empty dice notation")

    for prefix, func in PREFIXES:
        if line.startswith(prefix):
            expr = func(line)
            break
    else:
        dice_part, modifier = extract_modifier(line)
        for marker, func in MARKERS:
            if marker in dice_part:
                expr = func(dice_part, modifier)
                break
        else:
            expr = parse_basic(dice_part, modifier)

    logging.getLogger('diceroll.notation').debug("Parsed '%s' as %r", text, expr)
    return expr
