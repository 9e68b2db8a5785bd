"""
Pytest fixtures for simulator tests.
"""

import pytest

from turing2d.core import Program

SCENARIO_RULES = [
    {"currentState": 0, "currentSymbol": 0, "newState": 1, "newSymbol": 1, "action": "RIGHT"},
    {"currentState": 0, "currentSymbol": 1, "newState": 0, "newSymbol": 0, "action": "DOWN"},
    {"currentState": 1, "currentSymbol": 0, "newState": 1, "newSymbol": 0, "action": "LEFT"},
    {"currentState": 1, "currentSymbol": 1, "newState": 0, "newSymbol": 0, "action": "UP"},
]


@pytest.fixture(params=[True, False], ids=["numba", "python"])
def use_numba(request) -> bool:
    """Run a test against both stepper implementations."""
    return request.param


@pytest.fixture
def scenario_rules() -> list:
    """Four-rule table on 2 states x 2 symbols."""
    return [dict(rule) for rule in SCENARIO_RULES]


@pytest.fixture
def small_program(use_numba) -> Program:
    """Procedurally generated program on a 64x64 grid."""
    return Program(
        num_states=4,
        num_symbols=3,
        width=64,
        height=64,
        num_heads=8,
        head_radius=0.25,
        seed=1234,
        use_numba=use_numba,
    )
