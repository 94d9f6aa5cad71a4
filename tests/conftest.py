"""
Pytest configuration and fixtures for the simulator tests.

Provides the example machines and a small partial machine for implicit-reject tests.
"""

import pytest


@pytest.fixture
def binary_increment_spec():
    """Binary +1 machine: scans right, then carries leftward."""
    from simulator.examples import binary_increment
    return binary_increment()


@pytest.fixture
def infinite_loop_spec():
    """Two-transition machine that bounces forever on input '0'."""
    from simulator.examples import infinite_loop
    return infinite_loop()


@pytest.fixture
def partial_spec():
    """
    Machine with no rule for (q0, '1').

    Skips zeros to the right and accepts on the first blank.
    """
    from simulator.spec import build

    return build(
        states=["q0", "qAccept", "qReject"],
        input_alphabet=["0", "1"],
        tape_alphabet=["0", "1", "_"],
        transitions=[
            ("q0", "0", "q0", "0", "R"),
            ("q0", "_", "qAccept", "_", "S"),
        ],
        start_state="q0",
        accept_state="qAccept",
        reject_state="qReject",
        blank_symbol="_",
    )


@pytest.fixture
def spec_fields():
    """Keyword arguments for a valid build() call; tests override single fields."""
    return dict(
        states=["q0", "q1", "qAccept", "qReject"],
        input_alphabet=["a", "b"],
        tape_alphabet=["a", "b", "_"],
        transitions=[
            ("q0", "a", "q1", "b", "R"),
            ("q1", "_", "qAccept", "_", "S"),
        ],
        start_state="q0",
        accept_state="qAccept",
        reject_state="qReject",
        blank_symbol="_",
    )
