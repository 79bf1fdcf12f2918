"""
Everything related to parsing arguements from the command line.
"""
import argparse
from argparse import RawDescriptionHelpFormatter as RawHelp

import diceroll.exc
from diceroll.notation import NOTATION_HELP


class ThrowArggumentParser(argparse.ArgumentParser):
    """
    ArgumentParser subclass that does NOT terminate the program.
    """
    def print_help(self, file=None):  # pylint: disable=redefined-builtin
        raise diceroll.exc.ArgumentHelpError(self.format_help())

    def error(self, message):
        raise diceroll.exc.ArgumentParseError(message)

    def exit(self, status=0, message=None):
        """
        Suppress default exit behaviour.
        """
        raise diceroll.exc.ArgumentParseError(message)


def positive_int(text):
    """ argparse type for integers >= 1. """
    try:
        val = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{text}'")

    if val < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {val}")

    return val


def make_parser(prog='diceroll'):
    """
    Returns the command line parser.
    """
    desc = """Roll dice for tabletop RPGs and show simple statistics.

{prog} 2d6+3
        Roll 2d6 and add 3.
{prog} 4d6k3 --count 6 --verbose
        Roll 4d6 six times keeping the 3 highest, show every die.
{prog} adv+5 --stats
        Show min, max and average then roll with advantage.

{ref}""".format(prog=prog, ref=NOTATION_HELP)
    parser = ThrowArggumentParser(prog=prog, description=desc, formatter_class=RawHelp)
    parser.add_argument('expression', help='Dice notation (e.g., 2d6+3, 4d20k3, adv).')
    parser.add_argument('-c', '--count', type=positive_int, default=1,
                        help='Number of times to roll.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show every die and the kept dice.')
    parser.add_argument('-s', '--stats', action='store_true',
                        help='Show min, max and average before rolling.')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed the dice for a reproducible session.')
    parser.add_argument('--json', action='store_true',
                        help='Print one JSON object per line instead of text.')
    parser.add_argument('--no-color', dest='color', action='store_false',
                        help='Never color the output.')

    return parser
