# tools/spec_store.py

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from simulator.serialization import serialize, spec_from_dict
from simulator.spec import ValidationError

console = Console(stderr=True)

DEFAULT_STORE_PATH = Path("machines/last_machine.json")


def save_spec(spec, path=DEFAULT_STORE_PATH):
    """Remember the last built machine."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(serialize(spec, indent=2))
    return path


def load_spec(path=DEFAULT_STORE_PATH):
    """Return the remembered machine, or None if there is none or it cannot be read."""
    path = Path(path)
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            return spec_from_dict(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[yellow]\\[WARNING] Failed to load stored machine {escape(str(path))}: {escape(str(e))}[/yellow]")
        return None


def clear_spec(path=DEFAULT_STORE_PATH):
    path = Path(path)
    if path.exists():
        path.unlink()
        return True
    return False
