"""Access to a local Git repository through the ``git`` command."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field


class GitError(Exception):
    """Raised when a git command fails."""


@dataclass
class Commit:
    """A commit with its changed files and line statistics."""

    hash: str
    message: str
    author: str
    date: str
    files: list[str] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0


class LocalRepo:
    """A Git working tree on the local file system."""

    def __init__(self, work_dir: str = ".") -> None:
        self.work_dir = work_dir or "."

    def _git(self, *args: str, failure: str) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.work_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise GitError(f"{failure}: {exc}") from exc
        return result.stdout

    def get_staged_diff(self) -> str:
        """Return the diff of staged changes."""
        return self._git("--no-pager", "diff", "--cached", failure="failed to get staged diff")

    def get_unstaged_diff(self) -> str:
        """Return the diff of unstaged changes."""
        return self._git("--no-pager", "diff", failure="failed to get unstaged diff")

    def get_current_branch(self) -> str:
        """Return the name of the checked-out branch."""
        output = self._git("branch", "--show-current", failure="failed to get current branch")
        return output.strip()

    def get_repo_name(self) -> str:
        """Return the repository name from the origin URL, or the directory name."""
        try:
            source = self._git("remote", "get-url", "origin", failure="no origin remote")
        except GitError:
            source = os.path.basename(os.path.normpath(self.work_dir))
        name = source.strip().rsplit("/", 1)[-1]
        return name.removesuffix(".git")

    def get_recent_commits(self, count: int) -> list[Commit]:
        """Return up to ``count`` recent commits with file statistics."""
        output = self._git(
            "log",
            f"-{count}",
            "--pretty=format:%H|%s|%an|%ad",
            "--date=short",
            failure="failed to get recent commits",
        )

        commits = []
        for line in output.split("\n"):
            if not line:
                continue
            parts = line.split("|")
            if len(parts) != 4:
                continue
            commit = Commit(hash=parts[0], message=parts[1], author=parts[2], date=parts[3])
            try:
                stats = self._git(
                    "--no-pager", "show", "--stat", "--format=", commit.hash,
                    failure="failed to get commit stats",
                )
            except GitError:
                pass
            else:
                commit.files, commit.additions, commit.deletions = parse_git_stats(stats)
            commits.append(commit)
        return commits

    def is_inside_work_tree(self) -> bool:
        """Return True if the working directory is inside a Git work tree."""
        try:
            output = self._git("rev-parse", "--is-inside-work-tree", failure="not a git repository")
        except GitError:
            return False
        return output.strip() == "true"


def parse_git_stats(stats: str) -> tuple[list[str], int, int]:
    """Parse ``git show --stat`` output into (files, additions, deletions)."""
    files: list[str] = []
    additions = 0
    deletions = 0

    for raw in stats.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if "file" in line and ("changed" in line or "insertion" in line or "deletion" in line):
            continue
        if "|" not in line:
            continue
        parts = line.split("|")
        filename = parts[0].strip()
        if filename:
            files.append(filename)
        changes = parts[1]
        additions += changes.count("+")
        deletions += changes.count("-")

    return files, additions, deletions


def truncate_diff(diff: str, max_lines: int) -> str:
    """Cut ``diff`` to ``max_lines`` lines, adding a note when truncated."""
    if max_lines <= 0:
        return diff
    lines = diff.split("\n")
    if len(lines) <= max_lines:
        return diff
    truncated = "\n".join(lines[:max_lines])
    return truncated + f"\n\n...(diff truncated after {max_lines} lines)"