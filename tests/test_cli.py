import subprocess
import sys
from pathlib import Path
from inout.cas_parser import read_steering_file

ROOT = Path(__file__).resolve().parents[1]

def run_cli(*args):
    cmd = [sys.executable, "run_steering.py", *args]
    return subprocess.run(cmd, capture_output=True, text=True, cwd=ROOT)

def test_cli_smoke(tmp_path):
    out_file = tmp_path / "run.cas"
    proc = run_cli("--output", str(out_file), "--set", "TIME STEP=30", "--set", "TITLE='CLI run'",
                   "--remove", "RAIN OR EVAPORATION", "--show", "2")
    assert proc.returncode == 0, proc.stderr
    steering = read_steering_file(out_file)
    assert steering["TIME STEP"] == 30
    assert steering["TITLE"] == "CLI run"
    assert "RAIN OR EVAPORATION" not in steering
    assert "TITLE = 'CLI run'" in proc.stdout
    assert "steering parameter(s)" in proc.stdout
    assert f"source file: {out_file}" in proc.stdout

def test_cli_edits_existing_file(cas_file):
    proc = run_cli("--input", str(cas_file), "--set", "DURATION=3600", "--show", "0")
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == f"# 6 steering parameter(s), 6 not shown, source file: {cas_file}"

def test_cli_reports_bad_input(tmp_path):
    proc = run_cli("--input", str(tmp_path / "missing.cas"))
    assert proc.returncode == 1
    assert "Steering file processing failed" in proc.stderr

def test_cli_rejects_bad_assignment():
    proc = run_cli("--set", "NO ASSIGNMENT")
    assert proc.returncode == 1
    assert "Expected KEY=VALUE" in proc.stderr
