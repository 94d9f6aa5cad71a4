import numpy as np

from simulator.simulator_jit import (
    OUTCOME_ACCEPTED,
    OUTCOME_CONTINUING,
    OUTCOME_NO_RULE,
    OUTCOME_REJECTED,
    simulate_encoded,
)
from simulator.spec import Direction
from simulator.turing_machine import StepOutcome, tape_to_string, validate_input

OUTCOME_CODES = {
    OUTCOME_CONTINUING: StepOutcome.CONTINUING,
    OUTCOME_ACCEPTED: StepOutcome.ACCEPTED,
    OUTCOME_REJECTED: StepOutcome.REJECTED,
    OUTCOME_NO_RULE: StepOutcome.NO_RULE,
}

MOVE_OFFSETS = {Direction.LEFT: -1, Direction.RIGHT: 1, Direction.STAY: 0}


def _ordered(values):
    return sorted(values, key=lambda v: (type(v).__name__, str(v)))


class EncodedMachine:
    """Dense integer tables for a Specification, indexed by [state, symbol]."""

    def __init__(self, spec):
        self.spec = spec
        self.states = _ordered(spec.states)
        self.symbols = _ordered(spec.tape_alphabet)
        self.state_index = {state: i for i, state in enumerate(self.states)}
        self.symbol_index = {symbol: i for i, symbol in enumerate(self.symbols)}

        shape = (len(self.states), len(self.symbols))
        self.next_states = np.full(shape, -1, dtype=np.int32)
        self.write_symbols = np.zeros(shape, dtype=np.int32)
        self.moves = np.zeros(shape, dtype=np.int32)

        for state, symbol, next_state, write_symbol, direction in spec.transition_rows():
            s = self.state_index[state]
            k = self.symbol_index[symbol]
            self.next_states[s, k] = self.state_index[next_state]
            self.write_symbols[s, k] = self.symbol_index[write_symbol]
            self.moves[s, k] = MOVE_OFFSETS[direction]

    def encode_input(self, input_string):
        return np.array([self.symbol_index[char] for char in input_string], dtype=np.int32)

    def decode_tape(self, tape):
        return tuple(self.symbols[i] for i in tape)


class BatchResult:
    def __init__(self, inputs, outcome_codes, steps, heads, final_states, tapes):
        self.inputs = inputs
        self.outcome_codes = outcome_codes
        self.steps = steps
        self.heads = heads
        self.final_states = final_states
        self.tapes = tapes

    def __len__(self):
        return len(self.inputs)

    def outcome(self, idx):
        return OUTCOME_CODES[int(self.outcome_codes[idx])]

    def halted(self):
        """Boolean mask of inputs that halted within the step budget."""
        return self.outcome_codes != OUTCOME_CONTINUING

    def entries(self, blank):
        for idx, input_string in enumerate(self.inputs):
            yield {
                "input": input_string,
                "outcome": self.outcome(idx).value,
                "steps_taken": int(self.steps[idx]),
                "final_state": self.final_states[idx],
                "tape": tape_to_string(self.tapes[idx], blank),
            }


def evaluate_batch(spec, inputs, max_steps=10000):
    """
    Host-side function to run many inputs through one machine.
    Every input is checked against the input alphabet before anything runs.
    """
    inputs = list(inputs)
    for input_string in inputs:
        validate_input(spec, input_string)

    machine = EncodedMachine(spec)
    start = machine.state_index[spec.start_state]
    accept = machine.state_index[spec.accept_state]
    reject = machine.state_index[spec.reject_state]
    blank = machine.symbol_index[spec.blank_symbol]

    num_inputs = len(inputs)
    outcome_codes = np.zeros((num_inputs,), dtype=np.int8)
    steps = np.zeros((num_inputs,), dtype=np.int64)
    heads = np.zeros((num_inputs,), dtype=np.int64)
    final_states = []
    tapes = []

    for idx, input_string in enumerate(inputs):
        outcome, taken, state, head, tape = simulate_encoded(
            machine.next_states,
            machine.write_symbols,
            machine.moves,
            machine.encode_input(input_string),
            start,
            accept,
            reject,
            blank,
            max_steps,
        )
        outcome_codes[idx] = outcome
        steps[idx] = taken
        heads[idx] = head
        final_states.append(machine.states[state])
        tapes.append(machine.decode_tape(tape))

    return BatchResult(inputs, outcome_codes, steps, heads, final_states, tapes)
