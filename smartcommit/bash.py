"""The bash command: turn a description into a shell command and run it."""

from __future__ import annotations

import contextlib
import os
import platform
import sys
from dataclasses import dataclass

from smartcommit.config import Settings
from smartcommit.formatter import BashCommandFormatter
from smartcommit.gitrepo import GitError, LocalRepo
from smartcommit.ollama_client import OllamaError
from smartcommit.progress import show_error, show_info
from smartcommit.prompt import PromptBuilder, PromptContext, PromptError, sanitize_bash_command
from smartcommit.smart_commit import (
    CommandError,
    ask_confirmation,
    generate_text,
    run_shell_command,
)

_IGNORED_NAMES = frozenset({"node_modules", "vendor", "__pycache__"})
_MAX_TREE_ENTRIES = 10

_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
}


@dataclass
class SystemContext:
    """Facts about the machine and directory that shape a generated command."""

    os: str = ""
    arch: str = ""
    working_dir: str = ""
    is_git_repo: bool = False
    repo: str = ""
    branch: str = ""
    file_tree: str = ""
    shell: str = ""
    user: str = ""


def _os_name() -> str:
    return platform.system().lower() or sys.platform


def _arch_name() -> str:
    machine = platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine)


def get_file_tree(directory: str | os.PathLike[str], max_depth: int) -> str:
    """List the top entries of ``directory``, one per line, directories with ``/``.

    Hidden entries and common dependency folders are skipped; after eleven
    entries a ``... (more files)`` line ends the list. Raises OSError if the
    directory cannot be read.
    """
    if max_depth <= 0:
        return ""

    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda entry: entry.name)

    lines: list[str] = []
    shown = 0
    for entry in entries:
        if entry.name.startswith(".") or entry.name in _IGNORED_NAMES:
            continue
        if shown > _MAX_TREE_ENTRIES:
            lines.append("... (more files)\n")
            break
        lines.append(f"{entry.name}/\n" if entry.is_dir() else f"{entry.name}\n")
        shown += 1
    return "".join(lines)


def gather_system_context() -> SystemContext:
    """Collect information about the system and the current directory."""
    ctx = SystemContext(os=_os_name(), arch=_arch_name())

    with contextlib.suppress(OSError):
        ctx.working_dir = os.getcwd()

    ctx.user = os.environ.get("USER") or os.environ.get("USERNAME") or ""
    ctx.shell = os.environ.get("SHELL", "")

    repo = LocalRepo(".")
    if repo.is_inside_work_tree():
        ctx.is_git_repo = True
        with contextlib.suppress(GitError):
            ctx.repo = repo.get_repo_name()
        with contextlib.suppress(GitError):
            ctx.branch = repo.get_current_branch()

    if ctx.working_dir:
        with contextlib.suppress(OSError):
            ctx.file_tree = get_file_tree(ctx.working_dir, 2)

    return ctx


def run_bash(
    settings: Settings, description: str, dry_run: bool = False, auto_execute: bool = False
) -> str | None:
    """Generate a shell command for ``description`` and run it after confirmation.

    Returns the generated command.
    """
    if not description.strip():
        show_error("Please provide a description of what you want to do")
        raise CommandError("description is required")

    if settings.verbose:
        show_info(f"Task: {description}")

    system_ctx = gather_system_context()
    if settings.verbose:
        show_info("Gathered system context")

    context = PromptContext(
        repo=system_ctx.repo,
        branch=system_ctx.branch,
        description=description,
        system_info=system_ctx,
    )
    try:
        system_prompt, user_prompt = PromptBuilder().build("bash", context)
    except PromptError as exc:
        show_error(f"Failed to build prompt: {exc}")
        raise CommandError(str(exc)) from exc

    try:
        reply = generate_text(settings, system_prompt, user_prompt, "Generating...")
    except OllamaError as exc:
        show_error(f"Failed to generate bash command: {exc}")
        raise CommandError(str(exc)) from exc

    command = sanitize_bash_command(reply)
    if not command:
        show_error("Generated command is empty")
        raise CommandError("generated command is empty")

    formatter = BashCommandFormatter()
    print(formatter.format_generated(command), end="")

    if dry_run:
        show_info("Dry run mode - not executing command")
        return command

    if not auto_execute and not ask_confirmation(formatter.format_confirmation()):
        show_info("Command execution cancelled")
        return command

    if settings.verbose:
        show_info("Executing command...")

    try:
        run_shell_command(command)
    except CommandError as exc:
        show_error(f"Failed to execute command: {exc}")
        raise

    return command