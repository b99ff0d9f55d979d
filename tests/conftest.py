"""Pytest configuration ensuring the `src` directory is on sys.path.

Allows `import saferoute...` without installing the package.
"""
import sys
import os

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from saferoute.domain.models import Shelter  # noqa: E402
from fakes import BOUNDARY, SQUARE_A, SQUARE_B  # noqa: E402


@pytest.fixture
def square_a():
    return list(SQUARE_A)


@pytest.fixture
def square_b():
    return list(SQUARE_B)


@pytest.fixture
def boundary():
    return [list(BOUNDARY)]


@pytest.fixture
def shelters():
    return [
        Shelter("Inside A", 37.755, 126.775),
        Shelter("South school", 37.735, 126.775),
        Shelter("East hall", 37.755, 126.80),
        Shelter("North gym", 37.78, 126.775),
    ]
