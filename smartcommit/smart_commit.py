"""The smart-commit command and helpers shared by the generating commands."""

from __future__ import annotations

import shlex
import subprocess
import sys

from smartcommit.config import Settings
from smartcommit.formatter import CommitMessageFormatter, ContextFormatter
from smartcommit.gitrepo import GitError, LocalRepo, truncate_diff
from smartcommit.ollama_client import ChatRequest, Message, OllamaClient, OllamaError, Options
from smartcommit.progress import StreamingSpinner, show_error, show_info, show_success, show_warning
from smartcommit.prompt import (
    PromptBuilder,
    PromptContext,
    PromptError,
    sanitize_commit_message,
    validate_commit_message,
)

COMMIT_RULES = [
    "Commit title max 72 chars",
    "Use imperative mood",
    "Follow Conventional Commits standard",
]


class CommandError(Exception):
    """Raised when a command cannot complete; the message is meant for the user."""


def run_shell_command(command: str) -> None:
    """Run ``command`` with ``sh -c``, sharing this process's output streams."""
    try:
        completed = subprocess.run(["sh", "-c", command], check=False)
    except OSError as exc:
        raise CommandError(str(exc)) from exc
    if completed.returncode > 0:
        raise CommandError(f"exit status {completed.returncode}")
    if completed.returncode < 0:
        raise CommandError(f"terminated by signal {-completed.returncode}")


def generate_text(
    settings: Settings, system_prompt: str, user_prompt: str, spinner_message: str
) -> str:
    """Ask the model for a reply and return it whole.

    Raises CommandError if the server cannot be reached and OllamaError if
    the reply cannot be streamed.
    """
    if settings.verbose:
        show_info("Sending request to Ollama...")

    host = settings.ollama_url
    client = OllamaClient(host)
    try:
        client.ping()
    except OllamaError as exc:
        show_error(f"Failed to connect to Ollama at {host}: {exc}")
        raise CommandError(str(exc)) from exc

    request = ChatRequest(
        model=settings.model,
        messages=[
            Message(role="system", content=system_prompt),
            Message(role="user", content=user_prompt),
        ],
        options=Options(temperature=settings.temperature),
    )

    spinner = StreamingSpinner(spinner_message)
    spinner.start()
    parts: list[str] = []
    try:
        for chunk in client.chat(request):
            spinner.update()
            parts.append(chunk.message.content)
    finally:
        spinner.stop()
    return "".join(parts)


def ask_confirmation(prompt_text: str) -> bool:
    """Show ``prompt_text`` and return True if the user answers y or yes."""
    sys.stdout.write(prompt_text)
    sys.stdout.flush()
    line = sys.stdin.readline()
    if not line.endswith("\n"):
        show_error("Failed to read user input: EOF")
        raise CommandError("EOF")
    return line.strip().lower() in ("y", "yes")


def _repo_context(repo: LocalRepo) -> tuple[str, str]:
    try:
        name = repo.get_repo_name()
    except GitError:
        name = ""
    try:
        branch = repo.get_current_branch()
    except GitError:
        branch = ""
    return name, branch


def run_smart_commit(
    settings: Settings, auto_commit: bool = False, dry_run: bool = False, max_diff_lines: int = 500
) -> str | None:
    """Generate a commit message for the staged changes and optionally commit.

    Returns the generated message.
    """
    repo = LocalRepo(".")
    if not repo.is_inside_work_tree():
        show_error("Not inside a Git repository")
        raise CommandError("not inside a Git repository")

    try:
        diff = repo.get_staged_diff()
    except GitError as exc:
        show_error(f"Failed to get staged diff: {exc}")
        raise CommandError(str(exc)) from exc

    if not diff.strip():
        show_warning("No staged changes found. Please stage your changes with 'git add' first")
        raise CommandError("no staged changes found")

    if max_diff_lines > 0:
        diff = truncate_diff(diff, max_diff_lines)

    repo_name, branch = _repo_context(repo)
    info = ContextFormatter().format_repo_info(repo_name, branch, settings.verbose)
    if info:
        print(info, end="")

    if settings.verbose:
        show_info(f"Analyzing {len(diff.split(chr(10)))} lines of changes")

    context = PromptContext(repo=repo_name, branch=branch, diff=diff, rules=list(COMMIT_RULES))
    try:
        system_prompt, user_prompt = PromptBuilder().build("smart-commit", context)
    except PromptError as exc:
        show_error(f"Failed to build prompt: {exc}")
        raise CommandError(str(exc)) from exc

    try:
        reply = generate_text(settings, system_prompt, user_prompt, "🤖 Generating commit message")
    except OllamaError as exc:
        show_error(f"Failed to generate commit message: {exc}")
        raise CommandError(str(exc)) from exc

    message = sanitize_commit_message(reply)
    if not message:
        show_error("Generated commit message is empty")
        raise CommandError("generated commit message is empty")

    try:
        validate_commit_message(message)
    except PromptError as exc:
        show_warning(f"Validation warning: {exc}")

    formatter = CommitMessageFormatter()
    print(formatter.format_generated(message), end="")

    if dry_run:
        show_info("Dry run mode - not committing")
        return message

    if not auto_commit and not ask_confirmation(formatter.format_confirmation()):
        show_info("Commit cancelled")
        return message

    if settings.verbose:
        show_info("Committing changes...")

    try:
        run_shell_command(f"git commit -m {shlex.quote(message)}")
    except CommandError as exc:
        show_error(f"Failed to commit: {exc}")
        raise

    show_success("Changes committed successfully!")
    return message