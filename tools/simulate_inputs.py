# tools/simulate_inputs.py

import argparse
import hashlib
import json
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from simulator.evaluator import evaluate_batch
from simulator.examples import EXAMPLES
from simulator.serialization import import_spec
from simulator.spec import ValidationError
from simulator.turing_machine import StepOutcome, create_runtime, validate_input
from tools.run_machine import run_bounded

console = Console()


# === CPU Simulation ===
def simulate_single(spec, input_string, max_steps=10000):
    runtime = create_runtime(spec, input_string)
    result = run_bounded(runtime, max_steps=max_steps)
    return {
        "input": input_string,
        "outcome": result.outcome.value,
        "steps_taken": runtime.step_count,
        "final_state": runtime.current_state,
        "tape": runtime.tape_string(),
    }


# === Compiled Simulation ===
def simulate_many_jit(spec, inputs, max_steps=10000):
    result = evaluate_batch(spec, inputs, max_steps=max_steps)
    return list(result.entries(spec.blank_symbol))


# === Promotion for Long-Runners ===
def promote_long_runner(input_string, pool_file="pools/long_runners.txt"):
    Path(pool_file).parent.mkdir(parents=True, exist_ok=True)
    with open(pool_file, "a", encoding="utf-8") as f:
        f.write(input_string + "\n")


# === Utility Loaders ===
def load_input_pool(input_pool_file):
    with open(input_pool_file, "r", encoding="utf-8") as f:
        inputs = [line.rstrip("\n") for line in f]
    inputs = [s for s in inputs if s]
    return inputs


def run_key(spec, max_steps):
    """Short hash of the machine and step budget; each key gets its own results and checkpoint."""
    parts = [sorted(map(repr, spec.transition_rows()))]
    for values in (spec.states, spec.input_alphabet, spec.tape_alphabet):
        parts.append(sorted(map(repr, values)))
    parts.append([repr(v) for v in (spec.start_state, spec.accept_state, spec.reject_state, spec.blank_symbol)])
    parts.append(max_steps)
    return hashlib.sha256(repr(parts).encode("utf-8")).hexdigest()[:12]


def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []


def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)


def console_message(msg):
    console.print(msg, markup=False)


# === Main Simulation Runner ===
def simulate_inputs(
    spec,
    input_pool_file,
    output_name="results",
    batch_size=256,
    max_steps=10000,
    use_jit=False,
    results_root="results",
    long_runner_file="pools/long_runners.txt",
    run_logger=None,
):
    pool_name = Path(input_pool_file).stem
    results_folder = Path(results_root) / pool_name
    results_folder.mkdir(parents=True, exist_ok=True)
    key = run_key(spec, max_steps)
    results_file = results_folder / f"{output_name}_{key}.jsonl"
    checkpoint_file = results_folder / f"{output_name}_{key}_checkpoint.json"

    all_inputs = load_input_pool(input_pool_file)
    completed = load_checkpoint(checkpoint_file)
    done = set(completed)

    pending_inputs = [s for s in all_inputs if s not in done]
    console_message(f"Loaded {len(all_inputs):,} total inputs. {len(pending_inputs):,} pending.")

    with open(results_file, "a", encoding="utf-8") as results_fh:
        for batch_start in range(0, len(pending_inputs), batch_size):
            batch = pending_inputs[batch_start:batch_start + batch_size]
            console_message(f"Processing batch {batch_start // batch_size + 1} with {len(batch):,} inputs...")

            valid = []
            for input_string in batch:
                try:
                    validate_input(spec, input_string)
                except ValidationError as e:
                    console_message(f"[WARNING] Skipping input {input_string!r}: {e}")
                    continue
                valid.append(input_string)

            with Progress(
                    SpinnerColumn(),
                    BarColumn(),
                    "[progress.percentage]{task.percentage:>3.0f}%",
                    TextColumn("{task.completed}/{task.total} Inputs"),
                    TimeElapsedColumn(),
                    console=console,
            ) as progress:

                task = progress.add_task("[cyan]Simulating...", total=len(valid))

                if use_jit:
                    batch_results = simulate_many_jit(spec, valid, max_steps=max_steps)
                    progress.update(task, advance=len(valid))
                else:
                    batch_results = []
                    for input_string in valid:
                        batch_results.append(simulate_single(spec, input_string, max_steps=max_steps))
                        progress.update(task, advance=1)

            for entry in batch_results:
                completed.append(entry["input"])
                # === Auto-Promote Long Runners ===
                if entry["outcome"] == StepOutcome.CONTINUING.value:
                    promote_long_runner(entry["input"], long_runner_file)

            # === BULK WRITE once per batch ===
            for entry in batch_results:
                results_fh.write(json.dumps(entry, ensure_ascii=False) + "\n")
            results_fh.flush()

            if run_logger is not None:
                run_logger.log_runs(batch_results)

            save_checkpoint(completed, checkpoint_file)
            console_message("[INFO] Batch completed. Checkpoint saved.")

    console_message("[SUCCESS] All inputs simulated. Results saved.")
    return results_file


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Simulate a pool of inputs against one Turing machine with checkpointing.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--spec", help="Path to a machine JSON file")
    source.add_argument("--example", choices=sorted(EXAMPLES), help="Built-in example machine")
    parser.add_argument("--pool", required=True, help="Path to input pool file (one input per line)")
    parser.add_argument("--output", default="results", help="Output result file name (default: results)")
    parser.add_argument("--batch_size", type=int, default=256, help="Batch size per save/checkpoint")
    parser.add_argument("--max_steps", type=int, default=10000, help="Maximum steps before giving up")
    parser.add_argument("--jit", action="store_true", help="Use the compiled batch simulator")
    args = parser.parse_args()

    spec = EXAMPLES[args.example]() if args.example else import_spec(args.spec)[0]
    simulate_inputs(
        spec,
        args.pool,
        args.output,
        batch_size=args.batch_size,
        max_steps=args.max_steps,
        use_jit=args.jit,
    )


if __name__ == "__main__":
    main()
