import json
import os
from datetime import datetime

from rich.console import Console

console = Console()

DEFAULT_CONFIG = {
    "max_steps": 10_000,
    "step_delay": 0.25,
    "tape_window": 10,
    "batch_size": 256,
    "use_jit": True,
    "sample_count": 5,
    "sample_min_length": 1,
    "sample_max_length": 8,
    "sample_seed": None,
    "output_directory": "logs/",
    "log_file_prefix": "tm_runs_",
    "spec_store_path": "machines/last_machine.json",
}

# Expected types for validation
CONFIG_SCHEMA = {
    "max_steps": int,
    "step_delay": (int, float),
    "tape_window": int,
    "batch_size": int,
    "use_jit": bool,
    "sample_count": int,
    "sample_min_length": int,
    "sample_max_length": int,
    "sample_seed": (int, type(None)),
    "output_directory": str,
    "log_file_prefix": str,
    "spec_store_path": str,
}


def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        value = config[key]
        # bool is an int subclass; only accept it where a bool is expected
        if isinstance(value, bool) and expected_type is not bool:
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(value)}.")
        if not isinstance(value, expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(value)}.")

    if config["max_steps"] <= 0:
        raise ValueError("max_steps must be positive.")
    if config["step_delay"] < 0:
        raise ValueError("step_delay must not be negative.")
    if config["tape_window"] < 0:
        raise ValueError("tape_window must not be negative.")
    if config["batch_size"] <= 0:
        raise ValueError("batch_size must be positive.")
    if config["sample_count"] < 0:
        raise ValueError("sample_count must not be negative.")
    if not 0 <= config["sample_min_length"] <= config["sample_max_length"]:
        raise ValueError("Sample lengths must satisfy 0 <= sample_min_length <= sample_max_length.")


def load_config(path="config/runtime_config.json", verbose=True):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    # Validate schema
    validate_config(config)

    # Validate output directory
    os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        console.print(f"[{datetime.now()}] Loaded config:", markup=False)
        for key, value in config.items():
            console.print(f"  {key}: {value}", markup=False)

    return config


def save_config(config, path="config/runtime_config.json"):
    validate_config(config)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
