"""
Test the command line parser
"""
import pytest

import diceroll.exc
import diceroll.parse


def test_throw_argument_parser():
    parser = diceroll.parse.ThrowArggumentParser()
    with pytest.raises(diceroll.exc.ArgumentHelpError):
        parser.print_help()
    with pytest.raises(diceroll.exc.ArgumentParseError):
        parser.error('blank')
    with pytest.raises(diceroll.exc.ArgumentParseError):
        parser.exit()


def test_make_parser_throws():
    parser = diceroll.parse.make_parser()
    with pytest.raises(diceroll.exc.ArgumentParseError):
        parser.parse_args([])
    with pytest.raises(diceroll.exc.ArgumentHelpError):
        parser.parse_args(['--help'])
    with pytest.raises(diceroll.exc.ArgumentParseError):
        parser.parse_args('2d6 --invalidflag'.split())
    with pytest.raises(diceroll.exc.ArgumentParseError):
        parser.parse_args('2d6 --count 0'.split())
    with pytest.raises(diceroll.exc.ArgumentParseError):
        parser.parse_args('2d6 --count many'.split())


def test_make_parser_help_has_reference():
    parser = diceroll.parse.make_parser()
    with pytest.raises(diceroll.exc.ArgumentHelpError) as exc_info:
        parser.parse_args(['-h'])
    assert '4d6kl1' in str(exc_info.value)
    assert '--count' in str(exc_info.value)


def test_make_parser_defaults():
    args = diceroll.parse.make_parser().parse_args(['2d6+3'])
    assert args.expression == '2d6+3'
    assert args.count == 1
    assert not args.verbose
    assert not args.stats
    assert not args.json
    assert args.seed is None
    assert args.color


def test_make_parser():
    args = diceroll.parse.make_parser().parse_args('4d6k3 -c 5 -v -s --seed 7 --json --no-color'.split())
    assert args.expression == '4d6k3'
    assert args.count == 5
    assert args.verbose
    assert args.stats
    assert args.seed == 7
    assert args.json
    assert not args.color


def test_positive_int():
    assert diceroll.parse.positive_int('3') == 3
