import json
import os
from datetime import datetime, timezone

OUTCOME_FILES = {
    "accepted": "accepted",
    "rejected": "rejected",
    "no_rule": "rejected",
    "continuing": "budget_exhausted",
}


class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="tm_runs_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log_batch(self, entries: list):
        """Log a batch of entries to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def rotate(self):
        """Start a new main log file if the UTC date has changed."""
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def log_run(self, entry: dict):
        """Log a finished run to the main log and to the file for its outcome."""
        self.log_runs([entry])

    def log_runs(self, entries: list):
        self.rotate()
        stamp = datetime.now(timezone.utc).isoformat()
        entries = [dict(entry) for entry in entries]
        for entry in entries:
            entry.setdefault("timestamp", stamp)
        self.log_batch(entries)

        by_kind = {}
        for entry in entries:
            kind = OUTCOME_FILES.get(entry.get("outcome"), "budget_exhausted")
            by_kind.setdefault(kind, []).append(entry)
        for kind, group in by_kind.items():
            self._log_to_file(f"{kind}_{self.today}.jsonl", group)
