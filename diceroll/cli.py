"""
The command line dice roller. Everything is started upon main() execution. To invoke from root:
    python -m diceroll.cli 2d6+3

Flow of a single invocation:
    argv -> diceroll.parse -> diceroll.notation.parse -> diceroll.roll -> output here

Some useful docs on libraries
-----------------------------
numpy random Generator: The source of every die rolled.
    https://numpy.org/doc/stable/reference/random/generator.html

PyYAML: Reads diceroll/data/config.yml and diceroll/data/log.yml.
    https://pyyaml.org/wiki/PyYAMLDocumentation
"""
import json
import logging
import sys

import diceroll.exc
import diceroll.notation
import diceroll.parse
import diceroll.roll
import diceroll.util

ANSI = {
    'bold': '\033[1m',
    'red': '\033[91m',
    'green': '\033[32m',
    'bright_green': '\033[92m',
    'cyan': '\033[36m',
    'yellow': '\033[33m',
    'reset': '\033[0m',
}


def paint(text, *styles, color=True):
    """ Wrap text in the ANSI codes of styles, if color is enabled. """
    if not color or not styles:
        return text

    return ''.join(ANSI[style] for style in styles) + text + ANSI['reset']


def format_die(value, die_size, *, color=True):
    """ A max roll is highlighted green, a 1 red. """
    if value == die_size:
        return paint(str(value), 'bright_green', 'bold', color=color)
    if value == 1:
        return paint(str(value), 'red', color=color)

    return str(value)


def result_output(result, *, verbose=False, color=True):
    """
    Format a single RollResult for the user.

    Args:
        result: The RollResult to show.
        verbose: When True every die gets a line and kept dice are listed.
        color: Use ANSI colors.

    Returns:
        A string formatted to present the roll.
    """
    lines = []
    if verbose:
        lines += [paint('Dice rolls', 'cyan', color=color) + ':']
        lines += [f'  d{result.die_size}: ' + format_die(val, result.die_size, color=color)
                  for val in result.rolls]

        if result.kept_indices:
            lines += [paint('Kept dice', 'cyan', color=color) + ':']
            lines += [f'  {val}' for val in result.kept_values]

        if result.modifier:
            lines += [paint('Modifier', 'cyan', color=color) + f': {result.modifier:+}']
    else:
        dice = ', '.join(format_die(val, result.die_size, color=color) for val in result.rolls)
        lines += [f'Rolls: [{dice}]']

    lines += [paint(f'Total: {result.total}', 'green', 'bold', color=color)]
    return '\n'.join(lines)


def stats_output(stats, *, color=True):
    """ Format the Statistics of an expression. """
    max_roll = 'unbounded' if stats.is_unbounded else stats.max
    return '\n'.join([
        paint('Statistics', 'yellow', 'bold', color=color) + ':',
        f'  Min: {stats.min}',
        f'  Max: {max_roll}',
        f'  Average: {stats.average:.2f}',
        '',
    ])


def summary_output(history, *, color=True):
    """ Format the total and average of the rolls in history. """
    return '\n'.join([
        '\n' + paint('Summary', 'yellow', 'bold', color=color) + ':',
        f'  Total: {history.sum()}',
        f'  Average: {history.average():.2f}',
    ])


def roll_text(expr, args, *, rng, history, color):
    """ Roll expr as requested by args, print as text. """
    if args.stats:
        print(stats_output(diceroll.roll.calculate_statistics(expr), color=color))

    for num in range(1, args.count + 1):
        if args.count > 1:
            print('\n' + paint('Roll', 'bold', color=color) + f' {num}:')

        result = diceroll.roll.roll(expr, rng)
        print(result_output(result, verbose=args.verbose, color=color))
        history.add(args.expression, result.total)

    if args.count > 1:
        print(summary_output(history, color=color))


def roll_json(expr, args, *, rng, history):
    """ Roll expr as requested by args, print one json object per line. """
    if args.stats:
        stats = diceroll.roll.calculate_statistics(expr)
        print(json.dumps({'expression': str(expr), 'statistics': stats.to_dict()}))

    for num in range(1, args.count + 1):
        result = diceroll.roll.roll(expr, rng)
        print(json.dumps(dict(roll=num, expression=str(expr), **result.to_dict())))
        history.add(args.expression, result.total)

    if args.count > 1:
        print(json.dumps({'summary': {'total': history.sum(), 'average': history.average()}}))


def run(argv):
    """
    Handle one invocation of the roller.

    Args:
        argv: The command line arguments, without the program name.

    Returns:
        The exit code, 0 on success and 1 if the arguments or notation were bad.
    """
    log = logging.getLogger('diceroll.cli')
    err_color = sys.stderr.isatty()
    try:
        args = diceroll.parse.make_parser().parse_args(argv)
    except diceroll.exc.ArgumentHelpError as exc:
        print(str(exc))
        return 0
    except diceroll.exc.ArgumentParseError as exc:
        print(paint('Error:', 'red', 'bold', color=err_color), exc, file=sys.stderr)
        return 1

    try:
        expr = diceroll.notation.parse(args.expression)
    except diceroll.exc.ParseError as exc:
        diceroll.exc.write_log(exc, log, content=args.expression, argv=argv)
        print(paint('Error:', 'red', 'bold', color=err_color), exc, file=sys.stderr)
        return 1

    seed, rng = diceroll.util.make_rng(args.seed)
    log.info("Rolling %s %d time(s), seed: %d", expr, args.count, seed)
    history = diceroll.util.RollHistory(
        diceroll.util.get_config('history', 'size', default=diceroll.util.HISTORY_SIZE))

    if args.json:
        roll_json(expr, args, rng=rng, history=history)
    else:
        color = args.color and diceroll.util.get_config('output', 'color', default=True) \
            and sys.stdout.isatty()
        roll_text(expr, args, rng=rng, history=history, color=color)

    return 0


def main(argv=None):
    """ Entry here! """
    diceroll.util.init_logging()
    sys.exit(run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":  # pragma: no cover
    main()
