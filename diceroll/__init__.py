"""
For main documentation consult diceroll/cli.py
"""
import sys

__version__ = '0.1.0'

try:
    assert sys.version_info[0:2] >= (3, 6)
except AssertionError:
    print('This entire program must be run with python >= 3.6')
    print('If unavailable on platform, see https://github.com/pyenv/pyenv')
    sys.exit(1)
