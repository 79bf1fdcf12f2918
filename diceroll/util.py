"""
Utility functions: configuration, logging, seeding and small helpers.
"""
import collections
import logging
import logging.config
import math
import os

import numpy.random
import yaml
try:
    from yaml import CLoader as Loader
except ImportError:  # pragma: no cover
    from yaml import Loader

MAX_SEED = int(math.pow(2, 32) - 1)
HISTORY_SIZE = 10
FALLBACK_LOG_FORMAT = "%(levelname)s: %(message)s"


class ReprMixin():
    """
    Generate a repr from the attributes listed in _repr_keys.
    """
    _repr_keys = []

    def __repr__(self):
        kwargs = [f'{key}={getattr(self, key)!r}' for key in self._repr_keys]
        return f'{self.__class__.__name__}({", ".join(kwargs)})'


class ImmutableMixin():
    """
    Attributes can only be set once, through _freeze during __init__.
    """
    def _freeze(self, **kwargs):
        for key, value in kwargs.items():
            object.__setattr__(self, key, value)

    def __setattr__(self, key, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable.")

    def __delattr__(self, key):
        raise AttributeError(f"{self.__class__.__name__} is immutable.")


class ModFormatter(logging.Formatter):
    """
    Add a relmod key to record dict.
    This key tracks a module relative this project' root.
    """
    def format(self, record):
        relmod = record.__dict__['pathname'].replace(ROOT_DIR + os.path.sep, '')
        record.__dict__['relmod'] = relmod[:-3]
        return super().format(record)


class RollHistory(ReprMixin):
    """
    Fixed capacity record of the most recent roll totals.
    Once full, every new entry pushes out the oldest one.

    Attributes:
        entries: A deque of (spec, total) pairs, oldest first.
    """
    _repr_keys = ['size', 'entries']

    def __init__(self, size=HISTORY_SIZE):
        if size < 1:
            raise ValueError("History must hold at least one roll.")
        self.entries = collections.deque(maxlen=size)

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def size(self):
        """ The capacity of the history. """
        return self.entries.maxlen

    @property
    def totals(self):
        """ The totals retained, oldest first. """
        return [total for _, total in self.entries]

    def add(self, spec, total):
        """ Remember the total of a roll of spec. """
        self.entries.append((spec, total))

    def sum(self):
        """ Sum of all retained totals. """
        return sum(self.totals)

    def average(self):
        """ Mean of the retained totals, 0.0 when nothing was rolled. """
        if not self.entries:
            return 0.0

        return self.sum() / len(self.entries)


def rel_to_abs(*path_parts):
    """
    Convert a path relative to the diceroll package to an absolute one.
    """
    return os.path.join(PACKAGE_DIR, *path_parts)


def load_yaml(fname):
    """
    Load a yaml file and return the dict. If not found, return an empty {}.
    Does not raise any possible exception.

    Returns: A dict object.
    """
    try:
        with open(fname) as fin:
            obj = yaml.load(fin, Loader=Loader)
    except FileNotFoundError:
        obj = {}

    return obj if obj else {}


def get_config(*keys, default=None):
    """
    Return keys straight from yaml config.

    Kwargs
        Default if provided, will be returned if config entry not found.

    Raises
        KeyError: No such key in the config.
    """
    conf = load_yaml(YAML_FILE)

    try:
        for key in keys:
            conf = conf[key]
    except (KeyError, TypeError):
        if default is not None:
            return default
        raise KeyError(".".join(keys))

    return conf


def init_logging(log_file=None):
    """
    Initialize project wide logging. See config file for details and reference on module.

     - Relative handler filenames are resolved against the package directory.
     - Without a logging config only warnings and errors go to stderr.
     - This must be the first invocation on startup to set up logging.
    """
    if not log_file:
        log_file = rel_to_abs(get_config('paths', 'log_conf', default=os.path.join('data', 'log.yml')))
    lconf = load_yaml(log_file)
    if not lconf:
        logging.basicConfig(level=logging.WARNING, format=FALLBACK_LOG_FORMAT)
        logging.getLogger('diceroll.util').warning("No logging config at %s, using stderr only.", log_file)
        return

    for handler in lconf.get('handlers', {}).values():
        if 'filename' not in handler:
            continue

        if not os.path.isabs(handler['filename']):
            handler['filename'] = rel_to_abs(handler['filename'])
        os.makedirs(os.path.dirname(handler['filename']), exist_ok=True)

    logging.config.dictConfig(lconf)


def generate_seed():
    """
    Generate a random seed number from OS entropy.
    Returns an integer in [0, MAX_SEED).
    """
    return int(numpy.random.SeedSequence().entropy % MAX_SEED)


def make_rng(seed=None):
    """
    Create a numpy random Generator with a known seed.

    Args:
        seed: The seed to used, if not passed derive one from OS entropy.

    Returns:
        (seed, rng)
            seed: The seed actually used, log it to replay a session.
            rng: A numpy.random.Generator seeded with seed.
    """
    if seed is None:
        seed = generate_seed()

    seed = int(seed % MAX_SEED)
    return seed, numpy.random.default_rng(seed)


PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.dirname(PACKAGE_DIR)
YAML_FILE = rel_to_abs('data', 'config.yml')
