import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

pytestmark = pytest.mark.skipif(shutil.which("hg") is None, reason="hg is not installed")

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _run_hg(args, cwd: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["HGPLAIN"] = "1"
    return subprocess.run(
        ["hg", *args],
        cwd=str(cwd),
        env=env,
        text=True,
        capture_output=True,
        check=True,
    )


def test_cli_on_mercurial_repository(tmp_path):
    repo = tmp_path / "repo"
    repo.mkdir()
    _run_hg(["init"], cwd=repo)

    (repo / "a.txt").write_text("one\ntwo\nthree\nfour\n")
    _run_hg(["add", "a.txt"], cwd=repo)
    _run_hg(["commit", "-u", "Carol <carol@example.com>", "-m", "base"], cwd=repo)

    (repo / "a.txt").write_text("one\nTWO\nthree\nfour\n")
    _run_hg(["commit", "-u", "Dave <dave@example.com>", "-m", "dave"], cwd=repo)

    (repo / "a.txt").write_text("ONE\nTWO!\nthree\n")
    (repo / "new.txt").write_text("brand new\n")
    _run_hg(["add", "new.txt"], cwd=repo)

    env = os.environ.copy()
    env["PYTHONPATH"] = str(PROJECT_ROOT)
    completed = subprocess.run(
        [sys.executable, "-m", "find_reviewers.cli", "--vcs", "hg"],
        cwd=str(repo),
        env=env,
        text=True,
        capture_output=True,
    )

    assert completed.returncode == 0, completed.stderr
    assert completed.stdout == (
        "carol@example.com: 2 lines (66.7%)\n"
        "dave@example.com: 1 lines (33.3%)\n"
    )
