# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Tests for diceroll.exc
"""
import mock

import diceroll.exc


def test_dice_exception_reply():
    error = diceroll.exc.DiceException("An exception happened :(", lvl='info')
    assert str(error) == "An exception happened :("
    assert error.log_level == 'info'


def test_parse_error_hierarchy():
    error = diceroll.exc.ParseError("Invalid dice count")
    assert isinstance(error, diceroll.exc.UserException)
    assert isinstance(error, diceroll.exc.DiceException)
    assert error.log_level == 'info'


def test_dice_exception_level():
    error = diceroll.exc.DiceException("Very bad", lvl='exception')
    assert error.log_level == 'exception'


def test_dice_exception_write_log():
    error = diceroll.exc.ParseError("Invalid die size")

    log = mock.Mock()
    log.info.return_value = None
    diceroll.exc.write_log(error, log, content='2d', argv=['2d', '-v'])
    expect = """
ParseError: Invalid die size
====================
User sent 2d
    Arguments: 2d -v"""
    log.info.assert_called_with(expect)


def test_write_log_uses_exception_level():
    error = diceroll.exc.DiceException("Very bad", lvl='exception')

    log = mock.Mock()
    diceroll.exc.write_log(error, log, content='2d6')
    assert log.exception.called
    assert not log.info.called


def test_log_format():
    assert diceroll.exc.log_format(content='4d6k3') == "User sent 4d6k3"
    expect = """User sent 4d6k3
    Arguments: 4d6k3 --count 2"""
    assert diceroll.exc.log_format(content='4d6k3', argv=['4d6k3', '--count', '2']) == expect
