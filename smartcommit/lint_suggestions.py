"""The lint-suggestions command: ask the model for ranked code improvement ideas."""

from __future__ import annotations

import re
from typing import Sequence

from smartcommit.config import Settings
from smartcommit.formatter import ContextFormatter, Suggestion, SuggestionFormatter
from smartcommit.gitrepo import GitError, LocalRepo
from smartcommit.ollama_client import OllamaError
from smartcommit.progress import show_error, show_info, show_warning
from smartcommit.prompt import PromptBuilder, PromptContext, PromptError
from smartcommit.smart_commit import CommandError, generate_text

_NUMBERED = re.compile(r"^(\d+)\.\s*\[([^\]]+)\]\s*(.+)", re.ASCII)
_LEADING_NUMBER = re.compile(r"^\d+\.\s*", re.ASCII)
_SEVERITY_TAG = re.compile(r"\[(?:HIGH|MEDIUM|LOW)\]\s*", re.ASCII)


def _parse_numbered(response: str) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    current: Suggestion | None = None

    for raw in response.split("\n"):
        line = raw.strip()
        if not line:
            continue
        match = _NUMBERED.match(line)
        if match:
            if current is not None:
                suggestions.append(current)
            current = Suggestion(
                number=int(match.group(1)),
                severity=match.group(2).upper().strip(),
                title=match.group(3).strip(),
            )
        elif current is not None:
            current.description = (
                line if not current.description else f"{current.description} {line}"
            )

    if current is not None:
        suggestions.append(current)
    return suggestions


def _parse_lines(response: str) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    for raw in response.split("\n"):
        line = raw.strip()
        if not line:
            continue

        upper = line.upper()
        if "[HIGH]" in upper:
            severity = "HIGH"
        elif "[LOW]" in upper:
            severity = "LOW"
        else:
            severity = "MEDIUM"

        line = _LEADING_NUMBER.sub("", line)
        line = _SEVERITY_TAG.sub("", line)
        if line:
            suggestions.append(
                Suggestion(number=len(suggestions) + 1, severity=severity, title=line)
            )
    return suggestions


def parse_suggestions(response: str) -> list[Suggestion]:
    """Turn the model's reply into suggestions.

    Items of the form ``1. [HIGH] Title`` followed by description lines are
    recognised; if there are none, every non-empty line becomes a suggestion.
    """
    return _parse_numbered(response) or _parse_lines(response)


def filter_suggestions_by_severity(
    suggestions: Sequence[Suggestion], severity_filter: str
) -> list[Suggestion]:
    """Keep the suggestions of one severity, or all of them for ``"all"``."""
    if severity_filter == "all":
        return list(suggestions)
    target = severity_filter.upper()
    return [s for s in suggestions if s.severity == target]


def run_lint_suggestions(
    settings: Settings,
    staged: bool = True,
    unstaged: bool = False,
    severity: str = "all",
    max_suggestions: int = 10,
) -> list[Suggestion]:
    """Ask the model for improvements to the staged or unstaged changes.

    Returns the suggestions that were displayed.
    """
    if not staged and not unstaged:
        staged = True

    repo = LocalRepo(".")
    if not repo.is_inside_work_tree():
        show_error("Not inside a Git repository")
        raise CommandError("not inside a Git repository")

    diff_type = "staged" if staged else "unstaged"
    try:
        diff = repo.get_staged_diff() if staged else repo.get_unstaged_diff()
    except GitError as exc:
        show_error(f"Failed to get {diff_type} diff: {exc}")
        raise CommandError(str(exc)) from exc

    if not diff.strip():
        if staged:
            show_warning("No staged changes found. Please stage your changes with 'git add' first")
            raise CommandError("no staged changes found")
        show_warning("No unstaged changes found. Please make some changes first")
        raise CommandError("no unstaged changes found")

    try:
        repo_name = repo.get_repo_name()
    except GitError:
        repo_name = ""
    try:
        branch = repo.get_current_branch()
    except GitError:
        branch = ""

    info = ContextFormatter().format_repo_info(repo_name, branch, settings.verbose)
    if info:
        print(info, end="")

    if settings.verbose:
        line_count = len(diff.split("\n"))
        show_info(f"Analyzing {diff_type} changes ({line_count} lines)")
        show_info(f"Severity filter: {severity}")

    context = PromptContext(repo=repo_name, branch=branch, diff=diff)
    try:
        system_prompt, user_prompt = PromptBuilder().build("lint-suggestions", context)
    except PromptError as exc:
        show_error(f"Failed to build prompt: {exc}")
        raise CommandError(str(exc)) from exc

    try:
        reply = generate_text(
            settings,
            system_prompt,
            user_prompt,
            f"🔍 Analyzing {diff_type} changes for improvements",
        )
    except OllamaError as exc:
        show_error(f"Failed to generate suggestions: {exc}")
        raise CommandError(str(exc)) from exc

    response = reply.strip()
    if not response:
        show_warning("No suggestions generated")
        raise CommandError("no suggestions generated")

    suggestions = parse_suggestions(response)
    filtered = filter_suggestions_by_severity(suggestions, severity)
    if len(filtered) > max_suggestions:
        filtered = filtered[: max(max_suggestions, 0)]

    output = SuggestionFormatter().format_suggestions_list(filtered, diff_type, len(suggestions))
    print(output, end="")

    if severity != "all":
        show_info(f"Showing only {severity.upper()} severity suggestions")

    return filtered