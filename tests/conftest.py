# pylint: disable=redefined-outer-name,missing-function-docstring,unused-argument
"""
Used for pytest fixtures and anything else test setup/teardown related.
"""
import numpy.random
import pytest


class FakeRNG():
    """
    Impersonate numpy.random.Generator, integers returns scripted values in order.

    Attributes:
        values: The values still to be returned.
        calls: Every (low, high) requested so far.
    """
    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def integers(self, low, high):
        self.calls += [(low, high)]
        value = self.values.pop(0)
        assert low <= value < high, f"Scripted {value} outside [{low}, {high})"
        return numpy.int64(value)


@pytest.fixture
def f_rng():
    """ A seeded numpy generator, deterministic across runs. """
    yield numpy.random.default_rng(1234)


@pytest.fixture
def f_fake_rng():
    """ Factory for a FakeRNG with scripted values. """
    yield FakeRNG
