from numba import njit
import numpy as np

OUTCOME_CONTINUING = 0
OUTCOME_ACCEPTED = 1
OUTCOME_REJECTED = 2
OUTCOME_NO_RULE = 3

# Blank cells allocated on each side of the input before the first regrow
INITIAL_PADDING = 1024


@njit
def _blank_tape(size, blank):
    tape = np.empty(size, dtype=np.int32)
    for i in range(size):
        tape[i] = blank
    return tape


@njit
def _grow(tape, blank):
    """Triple the buffer with the old cells in the middle; returns (tape, shift)."""
    size = tape.shape[0]
    grown = _blank_tape(3 * size, blank)
    for i in range(size):
        grown[size + i] = tape[i]
    return grown, size


@njit
def simulate_encoded(next_states, write_symbols, moves, tape_input, start, accept, reject, blank, max_steps):
    """
    Compiled kernel for one input on an integer-encoded machine.
    next_states[state, symbol] is -1 where the table has no entry.
    The buffer starts with a small blank margin around the input and is
    regrown when the head steps off either end, so memory follows the
    cells actually visited rather than the step budget.
    Returns (outcome, steps, state, head, tape) with tape trimmed to the
    cells the engine would have materialized.
    """
    n = tape_input.shape[0]
    offset = min(max_steps, INITIAL_PADDING) + 1

    tape = _blank_tape(n + 2 * offset, blank)
    for i in range(n):
        tape[offset + i] = tape_input[i]

    head = offset
    lo = offset
    hi = offset + max(n, 1) - 1
    state = start
    steps = 0
    outcome = OUTCOME_CONTINUING

    if state == accept:
        outcome = OUTCOME_ACCEPTED
    elif state == reject:
        outcome = OUTCOME_REJECTED

    while outcome == OUTCOME_CONTINUING and steps < max_steps:
        symbol = tape[head]
        new_state = next_states[state, symbol]

        if new_state == -1:
            state = reject
            steps += 1
            outcome = OUTCOME_NO_RULE
            break

        # Apply transition
        tape[head] = write_symbols[state, symbol]
        head += moves[state, symbol]

        if head < 0 or head >= tape.shape[0]:
            tape, shift = _grow(tape, blank)
            head += shift
            lo += shift
            hi += shift

        if head < lo:
            lo = head
        elif head > hi:
            hi = head

        state = new_state
        steps += 1

        if state == accept:
            outcome = OUTCOME_ACCEPTED
        elif state == reject:
            outcome = OUTCOME_REJECTED

    return outcome, steps, state, head - lo, tape[lo:hi + 1].copy()
