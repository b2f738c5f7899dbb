"""Formatting of generated messages, suggestions and repository details."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from smartcommit.gitrepo import Commit
from smartcommit.styles import (
    BODY_STYLE,
    CODE_STYLE,
    COMMIT_MESSAGE_STYLE,
    HEADER_STYLE,
    INFO_STYLE,
    MUTED_STYLE,
    SUCCESS_STYLE,
    create_separator,
    get_severity_icon,
    get_severity_style,
    is_no_color,
    render,
    render_warning_box,
)

_COMMIT_LIST_LIMIT = 5


@dataclass
class Suggestion:
    """A code improvement suggestion."""

    severity: str
    title: str
    description: str = ""
    number: int = 0


def _confirmation(question: str) -> str:
    if is_no_color():
        return f"\n{question} [y/N]: "
    return f"\n{render(INFO_STYLE, question)} {render(MUTED_STYLE, '[y/N]')}: "


class CommitMessageFormatter:
    """Formats generated commit messages."""

    def format_generated(self, message: str) -> str:
        """Return the generated commit message framed for display."""
        if is_no_color():
            line = "─" * 25
            return f"\nGenerated commit message:\n{line}\n{message}\n{line}"

        header = render(HEADER_STYLE, "✨ Generated Commit Message")
        separator = create_separator(60)
        styled = render(COMMIT_MESSAGE_STYLE, message)
        return f"\n{header}\n{separator}\n{styled}\n{separator}\n"

    def format_confirmation(self) -> str:
        """Return the prompt asking whether to commit."""
        return _confirmation("Do you want to commit with this message?")


class BashCommandFormatter:
    """Formats generated shell commands."""

    def format_generated(self, command: str) -> str:
        """Return the generated command framed for display."""
        if is_no_color():
            line = "─" * 25
            return f"\n{line}\n{command}\n{line}"

        header = render(HEADER_STYLE, "Generated Bash Command")
        separator = create_separator(60)
        styled = render(CODE_STYLE, command)
        return f"\n{header}\n{separator}\n{styled}\n{separator}\n"

    def format_confirmation(self) -> str:
        """Return the prompt asking whether to run the command."""
        return _confirmation("Do you want to execute this command?")


class SuggestionFormatter:
    """Formats lists of lint suggestions."""

    def format_suggestions_list(
        self, suggestions: Sequence[Suggestion], diff_type: str, total: int
    ) -> str:
        """Return all suggestions with a header and a summary line."""
        if not suggestions:
            return render_warning_box("No suggestions found matching your criteria")

        header = f"💡 Code Improvement Suggestions ({diff_type} changes)"
        if is_no_color():
            parts = [f"\n{header}\n", "─" * 60 + "\n\n"]
        else:
            parts = ["\n" + render(HEADER_STYLE, header) + "\n", create_separator(60) + "\n\n"]

        for number, suggestion in enumerate(suggestions, start=1):
            parts.append(self.format_suggestion(number, suggestion))
            parts.append("\n")

        parts.append(self.format_suggestions_summary(len(suggestions), total))
        return "".join(parts)

    def format_suggestion(self, number: int, suggestion: Suggestion) -> str:
        """Return one suggestion with its severity, title and description."""
        if is_no_color():
            return (
                f"{number}. [{suggestion.severity}] {suggestion.title}\n"
                f"   {suggestion.description}"
            )

        icon = get_severity_icon(suggestion.severity)
        severity_style = get_severity_style(suggestion.severity)
        title = (
            f"{render(severity_style, f'[{suggestion.severity}]')} "
            f"{render(BODY_STYLE, suggestion.title)}"
        )
        result = f"{icon} {number}. {title}\n"
        if suggestion.description:
            result += render(MUTED_STYLE, "   " + suggestion.description)
        return result

    def format_suggestions_summary(self, shown: int, total: int) -> str:
        """Return the closing line counting shown and filtered suggestions."""
        if is_no_color():
            summary = f"Found {shown} suggestions"
            if total > shown:
                summary += f" (filtered from {total} total)"
            return "\n" + summary + "\n"

        summary = f"Found {render(SUCCESS_STYLE, str(shown))} suggestions"
        if total > shown:
            summary += render(MUTED_STYLE, f" (filtered from {total} total)")
        return "\n" + render(INFO_STYLE, "💡 ") + summary + "\n"


class BranchFormatter:
    """Formats branch descriptions and statistics."""

    def format_description(self, description: str, cached: bool) -> str:
        """Return the branch description, noting whether it came from the cache."""
        if is_no_color():
            header = "Branch Description"
            if cached:
                header += " (cached)"
            return f"\n{header}:\n{'─' * 21}\n{description}\n"

        header = render(HEADER_STYLE, "📄 Branch Description")
        if cached:
            header += render(MUTED_STYLE, " (cached)")
        separator = create_separator(60)
        content = render(BODY_STYLE, description)
        result = f"\n{header}\n{separator}\n{content}\n"
        if cached:
            note = render(MUTED_STYLE, "💾 From cache • Use --no-cache to regenerate")
            result += "\n" + note + "\n"
        return result

    def format_stats(self, stats: str) -> str:
        """Return a statistics line."""
        if is_no_color():
            return "\nStatistics: " + stats + "\n"
        return "\n" + render(INFO_STYLE, "📊 Statistics: ") + render(MUTED_STYLE, stats) + "\n"


class ContextFormatter:
    """Formats repository context shown in verbose mode."""

    def format_repo_info(self, repo_name: str, branch: str, verbose: bool) -> str:
        """Return repository and branch lines, or an empty string unless verbose."""
        if not verbose:
            return ""
        if is_no_color():
            return f"Repository: {repo_name}\nBranch: {branch}\n"
        repo = render(MUTED_STYLE, "Repository: ") + render(INFO_STYLE, repo_name)
        branch_info = render(MUTED_STYLE, "Branch: ") + render(INFO_STYLE, branch)
        return f"{repo}\n{branch_info}\n"

    def format_commit_list(self, commits: Sequence[Commit]) -> str:
        """Return up to five commit subjects as a bulleted list."""
        if not commits:
            return ""
        shown = commits[:_COMMIT_LIST_LIMIT]
        if is_no_color():
            lines = ["Recent commits:\n"]
            lines.extend(f"  • {commit.message}\n" for commit in shown)
        else:
            lines = [render(MUTED_STYLE, "Recent commits:") + "\n"]
            lines.extend(
                render(MUTED_STYLE, "  • ") + render(BODY_STYLE, commit.message) + "\n"
                for commit in shown
            )
        return "".join(lines)