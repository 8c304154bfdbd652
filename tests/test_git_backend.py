import os
import subprocess

from find_reviewers.backends.base import run_command
from find_reviewers.backends.git import GitBackend
from find_reviewers.errors import BackendInvocationError


def test_run_command_includes_stderr_details_on_failure(monkeypatch):
    def fake_run(*args, **kwargs):
        return subprocess.CompletedProcess(
            args=["git", "blame"],
            returncode=128,
            stdout="",
            stderr="fatal: bad revision 'nope'",
        )

    monkeypatch.setattr("find_reviewers.backends.base.subprocess.run", fake_run)

    try:
        run_command(["git", "blame", "nope"])
    except BackendInvocationError as exc:
        message = str(exc)
        assert "git blame nope" in message
        assert "fatal: bad revision 'nope'" in message
    else:
        raise AssertionError("expected BackendInvocationError to be raised")


def test_run_command_reports_timeouts(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr("find_reviewers.backends.base.subprocess.run", fake_run)

    try:
        run_command(["git", "blame"], timeout=2.5)
    except BackendInvocationError as exc:
        assert "timed out after 2.5s" in str(exc)
    else:
        raise AssertionError("expected BackendInvocationError to be raised")


def test_run_command_reports_missing_executable(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr("find_reviewers.backends.base.subprocess.run", fake_run)

    try:
        run_command(["hg", "root"])
    except BackendInvocationError as exc:
        assert "failed to execute hg" in str(exc)
    else:
        raise AssertionError("expected BackendInvocationError to be raised")


class FakeGit:
    """
    Stand-in for subprocess.run that answers a few git commands.
    """

    def __init__(self, root, outputs):
        self.root = root
        self.outputs = outputs
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs.get("cwd")))
        args = cmd[3:] if cmd[1] == "-c" else cmd[1:]
        if args[:2] == ["rev-parse", "--show-toplevel"]:
            stdout = self.root + "\n"
        else:
            stdout = self.outputs[args[0]]
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout=stdout, stderr="")


def _backend(tmp_path, monkeypatch, outputs):
    root = os.path.realpath(str(tmp_path))
    fake = FakeGit(root, outputs)
    monkeypatch.setattr("find_reviewers.backends.base.subprocess.run", fake)
    return GitBackend(cwd=root), fake, root


def test_modified_lines_runs_zero_context_diff(tmp_path, monkeypatch):
    diff = """\
diff --git a/a.txt b/a.txt
index 1111111..2222222 100644
--- a/a.txt
+++ b/a.txt
@@ -3,3 +3,1 @@
-c
-d
-e
+cde
"""
    backend, fake, root = _backend(tmp_path, monkeypatch, {"diff": diff})

    line_set = backend.modified_lines(["a.txt"], "HEAD")

    assert line_set == {os.path.join(root, "a.txt"): {3, 4, 5}}
    diff_cmd, cwd = fake.calls[-1]
    assert cwd == root
    assert "-U0" in diff_cmd
    assert "--diff-filter=MD" in diff_cmd
    assert diff_cmd[-3:] == ["HEAD", "--", "a.txt"]


def test_modified_lines_without_files_runs_nothing(tmp_path, monkeypatch):
    backend, fake, _ = _backend(tmp_path, monkeypatch, {})
    assert backend.modified_lines([], "HEAD") == {}
    assert fake.calls == []


def test_whole_file_lines_counts_blob_lines(tmp_path, monkeypatch):
    backend, fake, root = _backend(tmp_path, monkeypatch, {"show": "a\nb\nc"})

    line_set = backend.whole_file_lines([os.path.join(root, "sub", "f.py")], "v1")

    assert line_set == {os.path.join(root, "sub", "f.py"): {1, 2, 3}}
    assert fake.calls[-1][0][-1] == "v1:sub/f.py"


def test_annotate_passes_ignore_revisions(tmp_path, monkeypatch):
    porcelain = (
        "abc 1 1 1\nauthor A\nauthor-mail <a@example.com>\nfilename f\n\tx\n"
        "def 2 2 1\nauthor B\nauthor-mail <b@example.com>\nfilename f\n\ty\n"
    )
    backend, fake, root = _backend(tmp_path, monkeypatch, {"blame": porcelain})

    table = backend.annotate(["f"], "HEAD", ["r1", "r2"])

    assert table == {os.path.join(root, "f"): [None, "a@example.com", "b@example.com"]}
    blame_cmd = fake.calls[-1][0]
    assert blame_cmd[blame_cmd.index("blame"):] == [
        "blame",
        "--line-porcelain",
        "--ignore-rev",
        "r1",
        "--ignore-rev",
        "r2",
        "HEAD",
        "--",
        "f",
    ]


def test_changed_files_are_absolute(tmp_path, monkeypatch):
    backend, _, root = _backend(tmp_path, monkeypatch, {"diff": "a.txt\0dir/b.txt\0"})
    assert backend.changed_files("HEAD") == [
        os.path.join(root, "a.txt"),
        os.path.join(root, "dir/b.txt"),
    ]


def test_paths_outside_repository_are_rejected(tmp_path, monkeypatch):
    repo = tmp_path / "repo"
    repo.mkdir()
    root = os.path.realpath(str(repo))
    monkeypatch.setattr("find_reviewers.backends.base.subprocess.run", FakeGit(root, {}))
    backend = GitBackend(cwd=root)

    try:
        backend.relative_path(os.path.join(os.path.dirname(root), "elsewhere.txt"))
    except BackendInvocationError as exc:
        assert "outside repository" in str(exc)
    else:
        raise AssertionError("expected BackendInvocationError to be raised")


def test_diffs_ignore_submodule_pointers(tmp_path, monkeypatch):
    backend, fake, _ = _backend(tmp_path, monkeypatch, {"diff": ""})

    backend.changed_files("HEAD")
    backend.modified_lines(["lib"], "HEAD")

    diff_cmds = [cmd for cmd, _ in fake.calls if "diff" in cmd]
    assert len(diff_cmds) == 2
    for cmd in diff_cmds:
        assert "--ignore-submodules=all" in cmd
