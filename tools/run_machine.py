# tools/run_machine.py

import argparse
import time

from rich.console import Console

from simulator.examples import EXAMPLES
from simulator.serialization import import_spec
from simulator.turing_machine import StepOutcome, create_runtime

console = Console()


class RunResult:
    def __init__(self, outcome, steps_taken, budget_exhausted=False, cancelled=False):
        self.outcome = outcome
        self.steps_taken = steps_taken
        self.budget_exhausted = budget_exhausted
        self.cancelled = cancelled

    @property
    def halted(self):
        return self.outcome.halted

    def __repr__(self):
        return (
            f"RunResult(outcome={self.outcome.value}, steps_taken={self.steps_taken}, "
            f"budget_exhausted={self.budget_exhausted}, cancelled={self.cancelled})"
        )


def run_bounded(runtime, max_steps=10000):
    """Call step until the machine halts or max_steps calls have been made."""
    steps = 0
    outcome = runtime.outcome
    while not outcome.halted and steps < max_steps:
        outcome = runtime.step()
        steps += 1
    return RunResult(outcome, steps, budget_exhausted=not outcome.halted)


def run_paced(runtime, delay=0.25, max_steps=10000, should_stop=None, on_step=None, sleep=time.sleep):
    """
    Step on a fixed delay for animation.
    The run is cancelled when should_stop() returns True or on Ctrl-C;
    the runtime is left exactly as it was after the last completed step.
    """
    steps = 0
    outcome = runtime.outcome
    cancelled = False

    try:
        while not outcome.halted and steps < max_steps:
            if should_stop is not None and should_stop():
                cancelled = True
                break
            outcome = runtime.step()
            steps += 1
            if on_step is not None:
                on_step(runtime)
            if not outcome.halted:
                sleep(delay)
    except KeyboardInterrupt:
        cancelled = True

    return RunResult(outcome, steps, budget_exhausted=not outcome.halted and not cancelled, cancelled=cancelled)


def describe_result(runtime, result):
    if result.cancelled:
        return f"[yellow]Stopped after {runtime.step_count:,} steps.[/yellow]"
    if result.budget_exhausted:
        return f"[yellow]No halt within the step budget ({runtime.step_count:,} steps).[/yellow]"
    if result.outcome is StepOutcome.ACCEPTED:
        return f"[green]Accepted after {runtime.step_count:,} steps.[/green]"
    if result.outcome is StepOutcome.NO_RULE:
        return f"[red]Rejected: no rule for the current state and symbol ({runtime.step_count:,} steps).[/red]"
    return f"[red]Rejected after {runtime.step_count:,} steps.[/red]"


def main():
    parser = argparse.ArgumentParser(description="Run one input through a Turing machine")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--spec", help="Path to a machine JSON file")
    source.add_argument("--example", choices=sorted(EXAMPLES), help="Built-in example machine")
    parser.add_argument("--input", default="", help="Input string")
    parser.add_argument("--max_steps", type=int, default=10000, help="Maximum steps before giving up")
    parser.add_argument("--animate", action="store_true", help="Show every step")
    parser.add_argument("--delay", type=float, default=0.25, help="Seconds between animated steps")
    args = parser.parse_args()

    spec = EXAMPLES[args.example]() if args.example else import_spec(args.spec)[0]
    runtime = create_runtime(spec, args.input)

    if args.animate:
        runtime.visualize()
        result = run_paced(runtime, delay=args.delay, max_steps=args.max_steps, on_step=lambda rt: rt.visualize())
    else:
        result = run_bounded(runtime, max_steps=args.max_steps)
        runtime.visualize()

    console.print(describe_result(runtime, result))
    console.print(f"Tape: {runtime.tape_string()}", markup=False)


if __name__ == "__main__":
    main()
