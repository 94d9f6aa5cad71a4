from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from rich import print
from rich.markup import escape

from simulator.spec import Direction, Invariant, Specification, ValidationError


class StepOutcome(Enum):
    CONTINUING = "continuing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NO_RULE = "no_rule"  # implicit reject: no transition for (state, symbol)

    @property
    def halted(self) -> bool:
        return self is not StepOutcome.CONTINUING

    @property
    def status(self) -> "StepOutcome":
        """Halt status as shown to the user; a missing rule counts as a reject."""
        return StepOutcome.REJECTED if self is StepOutcome.NO_RULE else self


class Snapshot(NamedTuple):
    tape: tuple
    head: int
    current_state: object
    step_count: int
    halt_status: StepOutcome


class Runtime:
    """Tape, head, state and step count of one simulation session.

    A Runtime is never reset in place; start a new session with
    ``create_runtime``.
    """

    def __init__(self, spec: Specification, tape: list):
        self.spec = spec
        self.tape = tape
        self.head = 0
        self.current_state = spec.start_state
        self.step_count = 0
        self.outcome = StepOutcome.CONTINUING
        if spec.is_terminal(self.current_state):
            self.outcome = self._terminal_outcome()

    @property
    def halted(self) -> bool:
        return self.outcome.halted

    def _terminal_outcome(self) -> StepOutcome:
        if self.current_state == self.spec.accept_state:
            return StepOutcome.ACCEPTED
        return StepOutcome.REJECTED

    def read(self):
        if 0 <= self.head < len(self.tape):
            return self.tape[self.head]
        return self.spec.blank_symbol

    def write_at(self, symbol) -> None:
        self.tape[self.head] = symbol

    def move_head(self, direction: Direction) -> None:
        if direction is Direction.RIGHT:
            self.head += 1
            if self.head == len(self.tape):
                self.tape.append(self.spec.blank_symbol)
        elif direction is Direction.LEFT:
            self.head -= 1
            if self.head < 0:
                # Every existing cell shifts one index to the right.
                self.tape.insert(0, self.spec.blank_symbol)
                self.head = 0

    def step(self) -> StepOutcome:
        """Apply one transition and report whether the machine is still running."""
        if self.outcome.halted:
            return self.outcome
        if self.spec.is_terminal(self.current_state):
            self.outcome = self._terminal_outcome()
            return self.outcome

        symbol = self.read()
        transition = self.spec.lookup(self.current_state, symbol)

        if transition is None:
            self.current_state = self.spec.reject_state
            self.step_count += 1
            self.outcome = StepOutcome.NO_RULE
            return self.outcome

        self.write_at(transition.write_symbol)
        self.move_head(transition.direction)
        self.current_state = transition.next_state
        self.step_count += 1

        if self.spec.is_terminal(self.current_state):
            self.outcome = self._terminal_outcome()
        return self.outcome

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tape=tuple(self.tape),
            head=self.head,
            current_state=self.current_state,
            step_count=self.step_count,
            halt_status=self.outcome.status,
        )

    def tape_string(self, strip_blanks=True) -> str:
        return tape_to_string(self.tape, self.spec.blank_symbol, strip_blanks)

    def visualize(self, window=10):
        """Display a small window around the head."""
        start = max(0, self.head - window)
        end = min(len(self.tape), self.head + window + 1)

        tape_str = ""
        head_str = ""
        for pos in range(start, end):
            symbol = str(self.tape[pos])
            width = max(len(symbol), 1)
            tape_str += f"{symbol:<{width}} "
            head_str += ("^" if pos == self.head else " ").ljust(width) + " "
        print(escape(tape_str.rstrip()))
        print(head_str.rstrip())

        color = {
            StepOutcome.CONTINUING: "cyan",
            StepOutcome.ACCEPTED: "green",
            StepOutcome.REJECTED: "red",
            StepOutcome.NO_RULE: "red",
        }[self.outcome]
        print(
            f"State: {escape(str(self.current_state))}, Steps: {self.step_count}, "
            f"Status: [{color}]{self.outcome.value}[/{color}]"
        )


def tape_to_string(tape, blank, strip_blanks=True) -> str:
    cells = [str(symbol) for symbol in tape]
    blank = str(blank)
    if strip_blanks:
        while cells and cells[0] == blank:
            cells.pop(0)
        while cells and cells[-1] == blank:
            cells.pop()
    return "".join(cells)

def validate_input(spec: Specification, input_string: str) -> None:
    if spec.blank_symbol in spec.input_alphabet:
        raise ValidationError(Invariant.BLANK_IN_INPUT_ALPHABET, spec.blank_symbol)

    for position, char in enumerate(input_string):
        if char not in spec.input_alphabet:
            raise ValidationError(
                Invariant.SYMBOL_NOT_IN_INPUT_ALPHABET,
                char,
                f"input symbol {char!r} at position {position} is not in the input alphabet",
            )


def create_runtime(spec: Specification, input_string: str) -> Runtime:
    """Start a fresh session for ``input_string``, one symbol per character."""
    validate_input(spec, input_string)

    tape = list(input_string) if input_string else [spec.blank_symbol]
    return Runtime(spec, tape)
