import pytest

from smartcommit.formatter import (
    BashCommandFormatter,
    BranchFormatter,
    CommitMessageFormatter,
    ContextFormatter,
    Suggestion,
    SuggestionFormatter,
)
from smartcommit.gitrepo import Commit


@pytest.fixture
def plain(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def color(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)


def test_commit_generated_plain(plain):
    out = CommitMessageFormatter().format_generated("Fix parser bug")
    assert out.startswith("\nGenerated commit message:\n")
    assert "\nFix parser bug\n" in out
    assert out.endswith("─")


def test_commit_confirmation_plain(plain):
    assert (
        CommitMessageFormatter().format_confirmation()
        == "\nDo you want to commit with this message? [y/N]: "
    )


def test_bash_confirmation_plain(plain):
    assert (
        BashCommandFormatter().format_confirmation()
        == "\nDo you want to execute this command? [y/N]: "
    )


def test_bash_generated_plain(plain):
    out = BashCommandFormatter().format_generated("ls -la")
    lines = out.split("\n")
    assert lines[0] == ""
    assert lines[2] == "ls -la"
    assert lines[1] == lines[3]


def test_commit_generated_color(color):
    out = CommitMessageFormatter().format_generated("Fix parser bug")
    assert "Generated Commit Message" in out
    assert "Fix parser bug" in out
    assert "\x1b[" in out


def test_confirmation_color(color):
    out = CommitMessageFormatter().format_confirmation()
    assert "Do you want to commit with this message?" in out
    assert "[y/N]" in out
    assert out.endswith(": ")


def test_suggestion_plain(plain):
    s = Suggestion(severity="HIGH", title="Check errors", description="Handle it")
    out = SuggestionFormatter().format_suggestion(1, s)
    assert out.split("\n") == ["1. [HIGH] Check errors", "   Handle it"]


def test_suggestion_color_has_icon(color):
    s = Suggestion(severity="HIGH", title="Check errors", description="Handle it")
    out = SuggestionFormatter().format_suggestion(2, s)
    assert out.startswith("🔴 2. ")
    assert "Check errors" in out
    assert "Handle it" in out


def test_suggestion_color_without_description(color):
    s = Suggestion(severity="LOW", title="Tidy up")
    out = SuggestionFormatter().format_suggestion(1, s)
    assert out.startswith("🟢")
    assert out.endswith("\n")


def test_summary_plain_filtered(plain):
    out = SuggestionFormatter().format_suggestions_summary(2, 5)
    assert "Found 2 suggestions" in out
    assert "(filtered from 5 total)" in out


def test_summary_plain_unfiltered(plain):
    out = SuggestionFormatter().format_suggestions_summary(3, 3)
    assert "filtered from" not in out
    assert out.startswith("\n") and out.endswith("\n")


def test_suggestions_list_empty(plain):
    out = SuggestionFormatter().format_suggestions_list([], "staged", 0)
    assert "No suggestions found matching your criteria" in out


def test_suggestions_list_plain(plain):
    items = [
        Suggestion(severity="HIGH", title="First", description="a"),
        Suggestion(severity="LOW", title="Second", description="b"),
    ]
    out = SuggestionFormatter().format_suggestions_list(items, "staged", 4)
    assert "Code Improvement Suggestions (staged changes)" in out
    assert out.index("1. [HIGH] First") < out.index("2. [LOW] Second")
    assert "filtered from 4 total" in out


def test_branch_description_plain(plain):
    out = BranchFormatter().format_description("Adds login", False)
    assert out.startswith("\nBranch Description:\n")
    assert out.endswith("\nAdds login\n")


def test_branch_description_cached_plain(plain):
    out = BranchFormatter().format_description("Adds login", True)
    assert "Branch Description (cached):" in out


def test_branch_description_cached_color(color):
    out = BranchFormatter().format_description("Adds login", True)
    assert "From cache" in out
    assert "--no-cache" in out
    assert "Adds login" in out


def test_stats_plain(plain):
    stats = "2 commits, 3 files changed"
    assert BranchFormatter().format_stats(stats) == "\nStatistics: " + stats + "\n"


def test_repo_info_not_verbose(plain):
    assert ContextFormatter().format_repo_info("repo", "main", False) == ""


def test_repo_info_plain(plain):
    out = ContextFormatter().format_repo_info("repo", "main", True)
    assert out == "Repository: repo\nBranch: main\n"


def test_repo_info_color(color):
    out = ContextFormatter().format_repo_info("repo", "main", True)
    assert "repo" in out and "main" in out
    assert out.count("\n") == 2


def test_commit_list_empty(plain):
    assert ContextFormatter().format_commit_list([]) == ""


def test_commit_list_limited_to_five(plain):
    commits = [Commit(hash=str(i), message=f"msg {i}", author="a", date="d") for i in range(7)]
    out = ContextFormatter().format_commit_list(commits)
    assert out.startswith("Recent commits:\n")
    assert out.count("  • ") == 5
    assert "msg 4" in out
    assert "msg 5" not in out