import json

from logger.logger import JSONLogger


def _read_lines(path):
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f]


def test_log_writes_json_lines(tmp_path) -> None:
    run_logger = JSONLogger(str(tmp_path), "runs_")
    run_logger.log_batch([{"input": "101"}])
    run_logger.log_batch([{"input": "1"}, {"input": "0"}])

    entries = _read_lines(run_logger.current_log)
    assert [e["input"] for e in entries] == ["101", "1", "0"]
    assert run_logger.current_log.endswith(f"runs_{run_logger.today}.jsonl")


def test_log_run_splits_by_outcome(tmp_path) -> None:
    run_logger = JSONLogger(str(tmp_path), "runs_")
    run_logger.log_runs(
        [
            {"input": "101", "outcome": "accepted"},
            {"input": "2", "outcome": "no_rule"},
            {"input": "0", "outcome": "rejected"},
            {"input": "00", "outcome": "continuing"},
        ]
    )

    day = run_logger.today
    assert len(_read_lines(run_logger.current_log)) == 4
    assert [e["input"] for e in _read_lines(tmp_path / f"accepted_{day}.jsonl")] == ["101"]
    assert [e["input"] for e in _read_lines(tmp_path / f"rejected_{day}.jsonl")] == ["2", "0"]
    assert [e["input"] for e in _read_lines(tmp_path / f"budget_exhausted_{day}.jsonl")] == ["00"]


def test_log_run_adds_timestamp_without_mutating(tmp_path) -> None:
    run_logger = JSONLogger(str(tmp_path), "runs_")
    entry = {"input": "1", "outcome": "accepted"}
    run_logger.log_run(entry)

    assert "timestamp" not in entry
    assert "timestamp" in _read_lines(run_logger.current_log)[0]


def test_non_ascii_symbols_kept(tmp_path) -> None:
    run_logger = JSONLogger(str(tmp_path), "runs_")
    run_logger.log_batch([{"tape": "1□0"}])
    with open(run_logger.current_log, "r", encoding="utf-8") as f:
        assert "1□0" in f.read()


def test_creates_output_directory(tmp_path) -> None:
    out_dir = tmp_path / "nested" / "logs"
    JSONLogger(str(out_dir))
    assert out_dir.is_dir()
