"""
Common exceptions.
"""


class DiceException(Exception):
    """
    All project exceptions subclass this.
    """
    def __init__(self, msg=None, lvl='info'):
        super().__init__(msg)
        self.log_level = lvl


class UserException(DiceException):
    """
    Exception occurred usually due to user error.

    Not unexpected but can indicate a problem.
    """


class ParseError(UserException):
    """ The dice notation could not be understood. """


class ArgumentParseError(UserException):
    """ Error raised on failure to parse arguments. """


class ArgumentHelpError(UserException):
    """ Error raised on request to print help for command. """


def log_format(*, content, argv=None):
    """ Log useful information about the invocation that failed. """
    msg = "User sent {}".format(content)
    if argv:
        msg += "\n    Arguments: " + " ".join(argv)

    return msg


def write_log(exc, log, *, lvl='info', content, argv=None):
    """
    Log all relevant message about this invocation.
    """
    log_func = getattr(log, getattr(exc, 'log_level', lvl))
    header = '\n{}\n{}\n'.format(exc.__class__.__name__ + ': ' + str(exc), '=' * 20)
    log_func(header + log_format(content=content, argv=argv))
