"""Integration tests for the run.py command line host."""

import json
from pathlib import Path

import pytest

import run

FP = "aa" * 32
SIG = "00" * 65


@pytest.fixture
def cli(tmp_path: Path, capsys: pytest.CaptureFixture[str]):  # type: ignore[no-untyped-def]
    """Invoke run.main with an isolated config and state file; return (exit code, JSON)."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "registry:\n"
        "  max_content_per_author: 2\n"
        "logging:\n"
        "  level: WARNING\n"
        f"  output_file: {tmp_path / 'events.jsonl'}\n"
        "checkpoint:\n"
        f"  file: {tmp_path / 'state.json'}\n"
    )

    def _run(*argv: str) -> tuple[int, dict[str, object]]:
        code = run.main(["--config", str(config_path), *argv])
        out = capsys.readouterr().out
        return code, json.loads(out)

    return _run


def register_args(fingerprint: str = FP, caller: str = "alice") -> list[str]:
    return [
        "register",
        "--caller", caller,
        "--fingerprint", fingerprint,
        "--content-type", "article",
        "--signature", SIG,
        "--title", "Hello World",
    ]


class TestRunnerCommands:

    def test_register_then_verify(self, cli, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
        code, result = cli(*register_args())
        assert code == 0
        assert result["fingerprint"] == FP
        assert result["height"] == 1
        assert (tmp_path / "state.json").exists()

        code, result = cli("verify", FP)
        assert code == 0
        record = result["record"]
        assert isinstance(record, dict)
        assert record["author"] == "alice"
        assert record["version"] == 1
        assert record["is_active"] is True
        assert record["timestamp"] == 1

    def test_heights_advance_per_write(self, cli) -> None:  # type: ignore[no-untyped-def]
        cli(*register_args(FP))
        code, result = cli(*register_args("bb" * 32))
        assert code == 0
        assert result["height"] == 2

        _, stats = cli("stats", "--author", "alice")
        assert stats["content_count"] == 2
        assert stats["last_activity"] == 2

    def test_list(self, cli) -> None:  # type: ignore[no-untyped-def]
        cli(*register_args(FP))
        cli(*register_args("bb" * 32))

        _, page = cli("list", "--author", "alice", "--start", "1")
        assert page["fingerprints"] == ["bb" * 32]

    def test_duplicate_reports_error(self, cli) -> None:  # type: ignore[no-untyped-def]
        cli(*register_args())
        code, result = cli(*register_args(caller="bob"))

        assert code == 1
        assert result["success"] is False
        assert result["code"] == "already_exists"

    def test_quota_from_config(self, cli) -> None:  # type: ignore[no-untyped-def]
        cli(*register_args("01" * 32))
        cli(*register_args("02" * 32))
        code, result = cli(*register_args("03" * 32))

        assert code == 1
        assert result["code"] == "quota_exceeded"

    def test_verify_unknown(self, cli) -> None:  # type: ignore[no-untyped-def]
        code, result = cli("verify", FP)
        assert code == 1
        assert result["code"] == "not_found"

    def test_bad_hex(self, cli) -> None:  # type: ignore[no-untyped-def]
        code, result = cli("verify", "not-hex")
        assert code == 1
        assert result["code"] == "invalid_argument"
        assert result["details"] == {"field": "fingerprint"}

    def test_failed_write_not_persisted(self, cli, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
        code, _ = cli(*register_args("abcd"))
        assert code == 1
        assert not (tmp_path / "state.json").exists()

    def test_corrupt_checkpoint_reported(self, cli, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
        cli(*register_args())
        state = tmp_path / "state.json"
        data = json.loads(state.read_text())
        data["state"]["records"].append(data["state"]["records"][0])
        state.write_text(json.dumps(data))

        code, result = cli("verify", FP)
        assert code == 1
        assert result["code"] == "invalid_argument"
        assert result["details"] == {"field": "state"}
