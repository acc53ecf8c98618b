"""Shared fixtures: RSA generation is slow, so key pairs are made once."""

import pytest

from zypher import algo


@pytest.fixture(scope="session")
def key_pair():
    return algo.generate_key_pair()


@pytest.fixture(scope="session")
def other_key_pair():
    return algo.generate_key_pair()
