"""Prompt templates for the model and helpers that clean up its output.

Templates use Jinja syntax. The context variables are the field names of
:class:`PromptContext`: ``repo``, ``branch``, ``diff``, ``commits``, ``rules``,
``max_length``, ``style``, ``description`` and ``system_info``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

import jinja2

from smartcommit.gitrepo import Commit


class PromptError(Exception):
    """Raised when a prompt cannot be built or a message fails validation."""


@dataclass(frozen=True)
class Template:
    """A pair of system and user prompt templates."""

    system: str
    user: str


@dataclass
class PromptContext:
    """Values that templates may refer to."""

    repo: str = ""
    branch: str = ""
    diff: str = ""
    commits: list[Commit] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)
    max_length: int = 0
    style: str = ""
    description: str = ""
    system_info: Any = None

    def as_mapping(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


SMART_COMMIT_TEMPLATE = Template(
    system=(
        "You write commit messages for software projects. "
        "Reply with the message text alone.\n"
        "\n"
        "Strict output rules:\n"
        "- Return only the commit message.\n"
        "- Do not explain, introduce or comment on it.\n"
        '- Never open with a lead-in such as "Here is the commit message:".\n'
        "- Do not wrap the message in quotation marks.\n"
        "\n"
        "How the message should read:\n"
        "1. Open with an imperative verb such as Add, Remove, Fix, Update or Refactor.\n"
        "2. Name the files or components that were touched.\n"
        "3. Keep the first line shorter than 72 characters.\n"
        "4. Be specific yet brief.\n"
        '5. Write plain prose; leave out type prefixes like "feat:" or "fix:".\n'
        "6. Say what changed and where it changed.\n"
        "\n"
        "Sample messages:\n"
        "Add retry logic to HttpFetcher\n"
        "Remove stale cache flag from SettingsPanel\n"
        "Fix off-by-one error in pagination helper\n"
        "Update setup steps in CONTRIBUTING\n"
        "Refactor query building in OrderStore\n"
        "\n"
        "Your whole reply is the commit message and nothing more."
    ),
    user=(
        "Repository: {{ repo }}\n"
        "Branch: {{ branch }}\n"
        "{% if rules %}\n"
        "Rules:\n"
        "{% for rule in rules %}- {{ rule }}\n"
        "{% endfor %}{% endif %}\n"
        "Diff:\n"
        "{{ diff }}\n"
        "\n"
        "Reply with the commit message only:"
    ),
)

LINT_SUGGESTIONS_TEMPLATE = Template(
    system=(
        "You review code changes as a senior engineer. Look at the diff and "
        "point out what could be better, paying attention to:\n"
        "\n"
        "1. Readability and maintainability\n"
        "2. Performance\n"
        "3. Security\n"
        "4. Established good practice\n"
        "5. Likely bugs\n"
        "\n"
        "Answer with a numbered list. Each item starts with its severity in "
        "brackets, one of [HIGH], [MEDIUM] or [LOW], followed by a short title; "
        "the lines below it give a concrete recommendation.\n"
        "\n"
        "Put the most important points first and keep every point actionable."
    ),
    user=(
        "Repository: {{ repo }}\n"
        "Branch: {{ branch }}\n"
        "\n"
        "Diff under review:\n"
        "{{ diff }}\n"
        "\n"
        "List your suggestions, most important first:"
    ),
)

BRANCH_DESCRIBE_TEMPLATE = Template(
    system=(
        "You summarise the work done on a version-control branch for "
        "documentation.\n"
        "\n"
        "From the commits and changes given, write two or three sentences that say:\n"
        "1. What the branch achieves\n"
        "2. Its main changes or new features\n"
        "3. Why it matters\n"
        "\n"
        "Use the present tense and describe purpose and outcome rather than "
        "implementation detail."
    ),
    user=(
        "Repository: {{ repo }}\n"
        "Branch: {{ branch }}\n"
        "\n"
        "Commits:\n"
        "{% for commit in commits %}- {{ commit.message }} ({{ commit.date }})\n"
        "{% endfor %}"
        "{% if diff %}\n"
        "Changes:\n"
        "{{ diff }}\n"
        "{% endif %}\n"
        "Summarise what this branch achieves:"
    ),
)

BASH_TEMPLATE = Template(
    system=(
        "You are a command-line expert. Turn the user's request and the "
        "system details into one safe, efficient shell command.\n"
        "\n"
        "Strict output rules:\n"
        "- Return only the command.\n"
        "- No explanation, no introduction, no markdown fences.\n"
        '- Never open with a lead-in such as "Run:" or "You can use:".\n'
        "- Prefer common Unix tools and respect the operating system given.\n"
        "\n"
        "Safety:\n"
        "- Do nothing destructive unless the request clearly asks for it.\n"
        "- Add safety flags such as -i where they help.\n"
        "- Prefer paths relative to the working directory.\n"
        "\n"
        "Sample replies:\n"
        'find . -name "*.py" -type f\n'
        "du -sh * | sort -h\n"
        "tar -czf archive.tar.gz docs/\n"
        'grep -rn "FIXME" --include="*.ts" .\n'
        "\n"
        "Your whole reply is the command and nothing more."
    ),
    user=(
        "Task: {{ description }}\n"
        "\n"
        "System:\n"
        "- OS: {{ system_info.os }}\n"
        "- Architecture: {{ system_info.arch }}\n"
        "- Working Directory: {{ system_info.working_dir }}\n"
        "- Shell: {{ system_info.shell }}\n"
        "- User: {{ system_info.user }}\n"
        "{% if system_info.is_git_repo %}"
        "- Git Repository: {{ system_info.repo }}\n"
        "- Current Branch: {{ system_info.branch }}\n"
        "{% endif %}\n"
        "Directory contents:\n"
        "{{ system_info.file_tree }}\n"
        "Reply with the command:"
    ),
)

TAG_SUGGEST_TEMPLATE = Template(
    system=(
        "You label code changes. Read the changes and propose fitting tags.\n"
        "\n"
        "Take into account:\n"
        "1. Languages and file types\n"
        "2. Parts of the system affected, such as frontend, backend or database\n"
        "3. Kind of change, such as feature, bugfix, refactor or performance\n"
        "4. Impact, such as breaking, major, minor or patch\n"
        "5. Functional area, such as auth, ui, api or docs\n"
        "\n"
        "Give three to five tags as one comma-separated line."
    ),
    user=(
        "Repository: {{ repo }}\n"
        "Branch: {{ branch }}\n"
        "\n"
        "Files:\n"
        "{% for commit in commits %}{% for file in commit.files %}- {{ file }}\n"
        "{% endfor %}{% endfor %}\n"
        "Changes:\n"
        "{{ diff }}\n"
        "\n"
        "Tags (comma-separated):"
    ),
)


_ENV = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def _render(source: str, part: str, values: dict[str, Any]) -> str:
    try:
        compiled = _ENV.from_string(source)
    except jinja2.TemplateSyntaxError as exc:
        raise PromptError(f"failed to parse {part} template: {exc}") from exc
    try:
        return compiled.render(values)
    except jinja2.TemplateError as exc:
        raise PromptError(f"failed to execute {part} template: {exc}") from exc


class PromptBuilder:
    """Builds system and user prompts from named templates."""

    def __init__(self) -> None:
        self.templates: dict[str, Template] = {
            "smart-commit": SMART_COMMIT_TEMPLATE,
            "lint-suggestions": LINT_SUGGESTIONS_TEMPLATE,
            "branch-describe": BRANCH_DESCRIBE_TEMPLATE,
            "bash": BASH_TEMPLATE,
            "tag-suggest": TAG_SUGGEST_TEMPLATE,
        }

    def build(self, template_name: str, context: PromptContext) -> tuple[str, str]:
        """Return the (system, user) prompts for ``template_name``."""
        template = self.templates.get(template_name)
        if template is None:
            raise PromptError(f"template not found: {template_name}")
        values = context.as_mapping()
        return (
            _render(template.system, "system", values),
            _render(template.user, "user", values),
        )

    def add_template(self, name: str, template: Template) -> None:
        """Register or replace a template under ``name``."""
        self.templates[name] = template


_MAX_TITLE = 72


def validate_commit_message(message: str) -> None:
    """Raise PromptError if ``message`` is not an acceptable commit message."""
    if not message:
        raise PromptError("commit message is empty")

    title = message.split("\n", 1)[0].strip()
    if len(title) > _MAX_TITLE:
        raise PromptError(f"first line is too long ({len(title)} chars, max {_MAX_TITLE})")

    if ":" not in title:
        raise PromptError("commit message should follow 'type: description' format")


_COMMIT_LEAD_INS = (
    "Here is the commit message:",
    "Commit message:",
    "The commit message is:",
    "Here's the commit message:",
    "```",
)

_COMMAND_LEAD_INS = (
    "Here is the command:",
    "The command is:",
    "Here's the command:",
    "You can use:",
    "Try this:",
    "Run:",
    "Execute:",
    "```bash",
    "```sh",
    "```",
    "$",
    "# ",
)


def _drop_lead_ins(text: str, lead_ins: tuple[str, ...]) -> str:
    for lead_in in lead_ins:
        if text.startswith(lead_in):
            text = text[len(lead_in):].strip()
    return text


def sanitize_commit_message(message: str) -> str:
    """Remove chatter, quotes and backticks around a generated commit message."""
    text = _drop_lead_ins(message.strip(), _COMMIT_LEAD_INS)
    return text.strip("`\"'").strip()


def _looks_like_command(line: str) -> bool:
    return bool(line) and not line.startswith(("#", "//"))


def sanitize_bash_command(command: str) -> str:
    """Reduce a generated reply to the single shell command it holds."""
    text = _drop_lead_ins(command.strip(), _COMMAND_LEAD_INS).removesuffix("```")
    candidate = next(
        (line for line in (raw.strip() for raw in text.split("\n")) if _looks_like_command(line)),
        None,
    )
    return candidate if candidate is not None else text.strip()