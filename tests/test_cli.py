import json
import pytest

from constellation import cli


def read_events(capsys):
    out = capsys.readouterr().out
    return [json.loads(line) for line in out.splitlines() if line.strip()]


def test_scan_streams_progress_then_complete(sample_tree, capsys):
    exit_code = cli.main(["scan", str(sample_tree), "--max-depth", "1", "--scan-id", "cli-1"])

    events = read_events(capsys)
    assert exit_code == 0
    assert events[-1]["event"] == "complete"
    assert events[-1]["result"]["totalSize"] == 2080
    assert events[-1]["result"]["scanId"] == "cli-1"

    progress = [e for e in events if e["event"] == "progress"]
    assert progress[-1]["phase"] == "done"
    assert all(e["scanId"] == "cli-1" for e in progress)


def test_scan_with_files_flag(sample_tree, capsys):
    assert cli.main(["scan", str(sample_tree), "--files"]) == 0

    result = read_events(capsys)[-1]["result"]
    assert len(result["files"]) == 7


def test_invalid_root_reports_error_event(tmp_path, capsys):
    exit_code = cli.main(["scan", str(tmp_path / "missing")])

    events = read_events(capsys)
    assert exit_code == cli.EXIT_FAILED
    assert events[-1] == {
        "event": "error",
        "code": "invalid_root",
        "message": f"Root path is not a directory: {tmp_path / 'missing'}",
    }


def test_empty_root_is_a_configuration_error(capsys):
    assert cli.main(["scan", "  "]) == cli.EXIT_FAILED
    assert read_events(capsys)[-1]["code"] == "invalid_configuration"


def test_subcommand_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
