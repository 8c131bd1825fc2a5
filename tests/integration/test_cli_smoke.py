"""
secrets-gate — CLI subprocess smoke contracts

File: tests/integration/test_cli_smoke.py

Purpose
- Run ``python -m secrets_gate`` as a real process against a real environment.
- Verify exit codes, stdout/stderr separation, and JSON log output on stderr.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

_CONFIG = """
[gate]
env_prefix = "SMOKE_"
log_format = "json"

[required_secrets]
PORT = "int"
DEBUG = "bool"
LOG_LEVEL = { one_of = ["DEBUG", "INFO"] }
""".strip()


def _run_cli(
    cwd: Path, extra_env: dict[str, str], *args: str
) -> subprocess.CompletedProcess[str]:
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith(("SMOKE_", "SECRETS_GATE_"))
    }
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath if not existing_pythonpath else f"{src_pythonpath}:{existing_pythonpath}"
    )
    env.update(extra_env)
    return subprocess.run(
        [sys.executable, "-m", "secrets_gate", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    (tmp_path / "secrets_gate.toml").write_text(_CONFIG, encoding="utf-8")
    return tmp_path


@pytest.mark.integration
def test_check_succeeds_with_default_config_location(workdir: Path) -> None:
    completed = _run_cli(
        workdir,
        {"SMOKE_PORT": "8080", "SMOKE_DEBUG": "false", "SMOKE_LOG_LEVEL": "INFO"},
        "check",
        "--json",
    )

    assert completed.returncode == 0, completed.stderr
    payload = json.loads(completed.stdout)
    assert payload["ok"] is True
    assert payload["checked"] == ["DEBUG", "LOG_LEVEL", "PORT"]


@pytest.mark.integration
def test_check_failure_exit_code_and_json_logs(workdir: Path) -> None:
    completed = _run_cli(
        workdir,
        {
            "SMOKE_PORT": "8080",
            "SMOKE_DEBUG": "sometimes",
            "SMOKE_LOG_LEVEL": "TRACE",
            "SECRETS_GATE_LOG_LEVEL": "INFO",
        },
        "check",
    )

    assert completed.returncode == 1
    assert completed.stdout == ""
    stderr_lines = completed.stderr.splitlines()
    log_events = [json.loads(line) for line in stderr_lines if line.startswith("{")]
    assert [event["message"] for event in log_events] == ["secrets_check_failed"]
    assert log_events[0]["fields"]["kind"] == "mismatched_secret_type"
    assert sorted(log_events[0]["fields"]["keys"]) == ["DEBUG", "LOG_LEVEL"]
    assert "FAIL  mismatched_secret_type" in stderr_lines
    assert "DEBUG of type bool was given 'sometimes'" in stderr_lines


@pytest.mark.integration
def test_missing_config_exits_with_config_error(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, {}, "check")

    assert completed.returncode == 2
    assert "config file not found" in completed.stderr
