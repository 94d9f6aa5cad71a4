# app.py

import argparse
import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, IntPrompt, Confirm
from rich.table import Table

from config.config_loader import DEFAULT_CONFIG, load_config
from logger.logger import JSONLogger
from simulator.examples import EXAMPLES
from simulator.serialization import export_spec, import_spec
from simulator.spec import ValidationError
from simulator.turing_machine import create_runtime
from tools.run_machine import RunResult, describe_result, run_bounded, run_paced
from tools.sample_inputs import generate_sample_inputs
from tools.simulate_inputs import simulate_inputs
from tools.spec_inspect import pretty_print_spec
from tools.spec_store import clear_spec, load_spec, save_spec

console = Console()

CONFIG_PATH = Path("config/runtime_config.json")


# === Utilities ===
def load_runtime_config(path=CONFIG_PATH):
    if not Path(path).exists():
        console.print(f"[yellow]{escape(str(path))} not found, using defaults.[/yellow]")
        return DEFAULT_CONFIG.copy()
    return load_config(str(path), verbose=False)


def report_error(e):
    console.print(f"[red]Error: {escape(str(e))}[/red]")


def run_entry(input_string, runtime, result):
    return {
        "input": input_string,
        "outcome": result.outcome.value,
        "steps_taken": runtime.step_count,
        "final_state": runtime.current_state,
        "tape": runtime.tape_string(),
        "budget_exhausted": result.budget_exhausted,
        "cancelled": result.cancelled,
    }


def show_main_menu(spec):
    console.print("\n[bold cyan]Turing Machine Simulator[/bold cyan]")
    if spec is None:
        console.print("[dim]No machine loaded.[/dim]")
    console.print("[1] Load Example Machine")
    console.print("[2] Import Machine File")
    console.print("[3] Export Machine File")
    console.print("[4] Inspect Machine")
    console.print("[5] Run Input")
    console.print("[6] Step Through Input")
    console.print("[7] Animate Input")
    console.print("[8] Generate Sample Inputs")
    console.print("[9] Simulate Input Pool")
    console.print("[10] Clear Saved Machine")
    console.print("[11] Exit")


def handle_load_example(config):
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name", justify="center")
    table.add_column("Description")
    for name, factory in EXAMPLES.items():
        table.add_row(name, factory.__doc__ or "")
    console.print(table)

    name = Prompt.ask("Example", choices=list(EXAMPLES), default="binary-increment")
    spec = EXAMPLES[name]()
    save_spec(spec, config["spec_store_path"])
    console.print(f"[green]Loaded example {name}.[/green]")
    return spec


def handle_import(config):
    path = Prompt.ask("Machine file", default="machines/machine.json")
    spec, metadata = import_spec(path)
    save_spec(spec, config["spec_store_path"])
    console.print(f"[green]Imported {escape(metadata.get('name') or path)}.[/green]")
    return spec


def handle_export(spec):
    path = Prompt.ask("Export to", default="machines/machine.json")
    name = Prompt.ask("Name", default="")
    description = Prompt.ask("Description", default="")
    metadata = export_spec(spec, path, name=name, description=description)
    console.print(f"[green]Exported to {escape(path)} at {metadata['exportedAt']}.[/green]")


def handle_run(spec, config, run_logger, mode="run"):
    input_string = Prompt.ask("Input", default="")
    runtime = create_runtime(spec, input_string)
    max_steps = config["max_steps"]

    if mode == "run":
        result = run_bounded(runtime, max_steps=max_steps)
        runtime.visualize(config["tape_window"])
    elif mode == "animate":
        runtime.visualize(config["tape_window"])
        result = run_paced(
            runtime,
            delay=config["step_delay"],
            max_steps=max_steps,
            on_step=lambda rt: rt.visualize(config["tape_window"]),
        )
    else:
        runtime.visualize(config["tape_window"])
        result = None
        while not runtime.halted and runtime.step_count < max_steps:
            choice = Prompt.ask("Step (s), run to end (r) or quit (q)", choices=["s", "r", "q"], default="s")
            if choice == "q":
                break
            if choice == "r":
                result = run_bounded(runtime, max_steps=max_steps - runtime.step_count)
                runtime.visualize(config["tape_window"])
                break
            runtime.step()
            runtime.visualize(config["tape_window"])
        if result is None:
            stopped_early = not runtime.halted and runtime.step_count < max_steps
            result = RunResult(
                runtime.outcome,
                runtime.step_count,
                budget_exhausted=not runtime.halted and not stopped_early,
                cancelled=stopped_early,
            )

    console.print(describe_result(runtime, result))
    console.print(f"Tape: {runtime.tape_string()}", markup=False)

    run_logger.log_run(run_entry(input_string, runtime, result))


def handle_samples(spec, config):
    count = IntPrompt.ask("How many inputs", default=config["sample_count"])
    samples = generate_sample_inputs(
        spec,
        count=count,
        min_length=config["sample_min_length"],
        max_length=config["sample_max_length"],
        seed=config["sample_seed"],
    )
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Input")
    table.add_column("Outcome")
    table.add_column("Steps", justify="right")
    table.add_column("Tape")
    for sample in samples:
        runtime = create_runtime(spec, sample)
        result = run_bounded(runtime, max_steps=config["max_steps"])
        table.add_row(escape(sample), result.outcome.value, f"{runtime.step_count:,}", escape(runtime.tape_string()))
    console.print(table)


def handle_simulate_pool(spec, config, run_logger):
    pool = Prompt.ask("Input pool file", default="pools/inputs.txt")
    use_jit = Confirm.ask("Use compiled simulator?", default=config["use_jit"])
    simulate_inputs(
        spec,
        pool,
        batch_size=config["batch_size"],
        max_steps=config["max_steps"],
        use_jit=use_jit,
        run_logger=run_logger,
    )


def interactive_main(config):
    run_logger = JSONLogger(config["output_directory"], config["log_file_prefix"])
    spec = load_spec(config["spec_store_path"])
    needs_spec = {"3", "4", "5", "6", "7", "8", "9"}

    while True:
        show_main_menu(spec)
        choice = Prompt.ask("\nChoose an option", choices=[str(i) for i in range(1, 12)], default="11")

        if choice in needs_spec and spec is None:
            console.print("[red]Load or import a machine first.[/red]")
            continue

        try:
            if choice == "1":
                spec = handle_load_example(config)
            elif choice == "2":
                spec = handle_import(config)
            elif choice == "3":
                handle_export(spec)
            elif choice == "4":
                pretty_print_spec(spec)
            elif choice == "5":
                handle_run(spec, config, run_logger, mode="run")
            elif choice == "6":
                handle_run(spec, config, run_logger, mode="step")
            elif choice == "7":
                handle_run(spec, config, run_logger, mode="animate")
            elif choice == "8":
                handle_samples(spec, config)
            elif choice == "9":
                handle_simulate_pool(spec, config, run_logger)
            elif choice == "10":
                if clear_spec(config["spec_store_path"]):
                    console.print("[green]Saved machine cleared.[/green]")
                spec = None
            elif choice == "11":
                console.print("[bold green]Goodbye![/bold green]")
                break
        except (ValidationError, FileNotFoundError, json.JSONDecodeError) as e:
            report_error(e)


# === CLI Mode for Automation ===
def cli_main(args, config):
    run_logger = JSONLogger(config["output_directory"], config["log_file_prefix"])

    if args.example:
        spec = EXAMPLES[args.example]()
        metadata = {"name": args.example}
    else:
        spec, metadata = import_spec(args.spec)

    max_steps = args.max_steps or config["max_steps"]

    if args.inspect:
        pretty_print_spec(spec, metadata)

    if args.samples:
        samples = generate_sample_inputs(
            spec,
            count=args.samples,
            min_length=config["sample_min_length"],
            max_length=config["sample_max_length"],
            seed=config["sample_seed"],
        )
        for sample in samples:
            console.print(sample, markup=False)

    if args.pool:
        simulate_inputs(
            spec,
            args.pool,
            batch_size=config["batch_size"],
            max_steps=max_steps,
            use_jit=config["use_jit"],
            run_logger=run_logger,
        )

    if args.input is not None:
        runtime = create_runtime(spec, args.input)
        if args.animate:
            runtime.visualize(config["tape_window"])
            result = run_paced(
                runtime,
                delay=config["step_delay"],
                max_steps=max_steps,
                on_step=lambda rt: rt.visualize(config["tape_window"]),
            )
        else:
            result = run_bounded(runtime, max_steps=max_steps)
            runtime.visualize(config["tape_window"])
        console.print(describe_result(runtime, result))
        console.print(f"Tape: {runtime.tape_string()}", markup=False)

        run_logger.log_run(run_entry(args.input, runtime, result))


def main():
    parser = argparse.ArgumentParser(description="Turing Machine Simulator Application")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--spec", help="Machine JSON file to load")
    source.add_argument("--example", choices=sorted(EXAMPLES), help="Built-in example machine to load")
    parser.add_argument("--input", help="Run this input and exit")
    parser.add_argument("--max-steps", type=int, default=None, help="Step budget (defaults to the config value)")
    parser.add_argument("--animate", action="store_true", help="Show every step of the run")
    parser.add_argument("--samples", type=int, default=0, help="Print this many random sample inputs")
    parser.add_argument("--inspect", action="store_true", help="Print the transition table")
    parser.add_argument("--pool", help="Simulate every input in this pool file")
    parser.add_argument("--config", default=str(CONFIG_PATH), help="Runtime configuration file")
    args = parser.parse_args()

    config = load_runtime_config(args.config)

    if args.spec or args.example:
        try:
            cli_main(args, config)
        except (ValidationError, FileNotFoundError, json.JSONDecodeError) as e:
            report_error(e)
            raise SystemExit(1)
    else:
        interactive_main(config)


if __name__ == "__main__":
    main()
