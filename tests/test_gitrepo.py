import subprocess
from unittest.mock import patch

import pytest

from smartcommit.gitrepo import Commit, GitError, LocalRepo, parse_git_stats, truncate_diff


def make_runner(outputs, calls=None):
    """Return a stand-in for subprocess.run answering git commands from a table."""

    def run(cmd, **kwargs):
        if calls is not None:
            calls.append((tuple(cmd), kwargs))
        key = tuple(cmd[1:])
        output = outputs.get(key)
        if output is None:
            raise subprocess.CalledProcessError(128, cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout=output, stderr="")

    return run


def test_empty_work_dir_defaults_to_current():
    assert LocalRepo("").work_dir == "."


def test_parse_git_stats_counts_files_and_lines():
    stats = " main.go | 3 ++-\n README.md | 2 +-\n 2 files changed, 3 insertions(+), 2 deletions(-)\n"
    files, additions, deletions = parse_git_stats(stats)
    assert files == ["main.go", "README.md"]
    assert additions == 3
    assert deletions == 2


def test_parse_git_stats_empty():
    assert parse_git_stats("") == ([], 0, 0)


def test_truncate_diff_short_diff_unchanged():
    diff = "a\nb\nc"
    assert truncate_diff(diff, 3) == diff
    assert truncate_diff(diff, 0) == diff


def test_truncate_diff_adds_note():
    result = truncate_diff("a\nb\nc\nd", 2)
    assert result == "a\nb\n\n...(diff truncated after 2 lines)"


def test_get_staged_diff_runs_in_work_dir(tmp_path):
    calls = []
    outputs = {("--no-pager", "diff", "--cached"): "diff --git a/x b/x\n"}
    with patch("subprocess.run", make_runner(outputs, calls)):
        result = LocalRepo(str(tmp_path)).get_staged_diff()
    assert result == "diff --git a/x b/x\n"
    assert calls[0][1]["cwd"] == str(tmp_path)


def test_get_unstaged_diff_failure_raises():
    with patch("subprocess.run", make_runner({})):
        with pytest.raises(GitError, match="failed to get unstaged diff"):
            LocalRepo(".").get_unstaged_diff()


def test_get_current_branch_strips_output():
    outputs = {("branch", "--show-current"): "feature/x\n"}
    with patch("subprocess.run", make_runner(outputs)):
        assert LocalRepo(".").get_current_branch() == "feature/x"


@pytest.mark.parametrize(
    "url",
    ["https://example.com/org/project.git\n", "git@example.com:org/project.git\n", "https://example.com/org/project\n"],
)
def test_get_repo_name_from_remote(url):
    outputs = {("remote", "get-url", "origin"): url}
    with patch("subprocess.run", make_runner(outputs)):
        assert LocalRepo(".").get_repo_name() == "project"


def test_get_repo_name_falls_back_to_directory(tmp_path):
    work_dir = tmp_path / "myrepo"
    work_dir.mkdir()
    with patch("subprocess.run", make_runner({})):
        assert LocalRepo(str(work_dir)).get_repo_name() == "myrepo"


def test_get_recent_commits_parses_log_and_stats():
    outputs = {
        ("log", "-5", "--pretty=format:%H|%s|%an|%ad", "--date=short"): (
            "abc|Add parser|Alice|2024-01-02\nmalformed line\n\ndef|Fix bug|Bob|2024-01-01"
        ),
        ("--no-pager", "show", "--stat", "--format=", "abc"): " parser.go | 2 ++\n 1 file changed, 2 insertions(+)\n",
    }
    with patch("subprocess.run", make_runner(outputs)):
        commits = LocalRepo(".").get_recent_commits(5)
    assert commits == [
        Commit(hash="abc", message="Add parser", author="Alice", date="2024-01-02",
               files=["parser.go"], additions=2, deletions=0),
        Commit(hash="def", message="Fix bug", author="Bob", date="2024-01-01"),
    ]


def test_get_recent_commits_failure_raises():
    with patch("subprocess.run", make_runner({})):
        with pytest.raises(GitError, match="failed to get recent commits"):
            LocalRepo(".").get_recent_commits(3)


def test_is_inside_work_tree_true():
    outputs = {("rev-parse", "--is-inside-work-tree"): "true\n"}
    with patch("subprocess.run", make_runner(outputs)):
        assert LocalRepo(".").is_inside_work_tree() is True


def test_is_inside_work_tree_false_on_error():
    with patch("subprocess.run", make_runner({})):
        assert LocalRepo(".").is_inside_work_tree() is False


def test_is_inside_work_tree_false_when_git_missing():
    def missing(cmd, **kwargs):
        raise FileNotFoundError("git")

    with patch("subprocess.run", missing):
        assert LocalRepo(".").is_inside_work_tree() is False